from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .color import parse_color
from .errors import InvalidMode

MODES = ("light", "dark")
STEPS = tuple(range(1, 13))

SNAP_THRESHOLD = 10.0

NEUTRAL = "neutral"
WARM_NEUTRAL = "warm-neutral"
CHROMATIC = "chromatic"

# (key, name, reference hue, step-9 reference hex)
HUE_TABLE = [
    ("gray", "Gray", 0.0, "#8d8d8d"),
    ("crimson", "Crimson", 1.3, "#e93d82"),
    ("ruby", "Ruby", 13.2, "#e54666"),
    ("red", "Red", 23.0, "#e5484d"),
    ("tomato", "Tomato", 33.3, "#e54d2e"),
    ("bronze", "Bronze", 44.2, "#a18072"),
    ("orange", "Orange", 45.0, "#f76b15"),
    ("brown", "Brown", 61.0, "#ad7f58"),
    ("gold", "Gold", 77.7, "#978365"),
    ("amber", "Amber", 84.1, "#ffc53d"),
    ("yellow", "Yellow", 100.9, "#ffe629"),
    ("sand", "Sand", 106.7, "#8d8d86"),
    ("lime", "Lime", 126.1, "#bdee63"),
    ("olive", "Olive", 136.6, "#898e87"),
    ("grass", "Grass", 147.4, "#46a758"),
    ("green", "Green", 157.7, "#30a46c"),
    ("jade", "Jade", 170.7, "#29a383"),
    ("sage", "Sage", 171.6, "#868e8b"),
    ("mint", "Mint", 178.0, "#86ead4"),
    ("teal", "Teal", 182.0, "#12a594"),
    ("sky", "Sky", 217.8, "#7ce2fe"),
    ("cyan", "Cyan", 221.7, "#00a2c7"),
    ("blue", "Blue", 251.8, "#0090ff"),
    ("indigo", "Indigo", 267.0, "#3e63dd"),
    ("slate", "Slate", 277.7, "#8b8d98"),
    ("iris", "Iris", 278.3, "#5b5bd6"),
    ("violet", "Violet", 288.0, "#6e56cf"),
    ("mauve", "Mauve", 292.9, "#8e8c99"),
    ("purple", "Purple", 305.9, "#8e4ec6"),
    ("plum", "Plum", 322.1, "#ab4aba"),
    ("pink", "Pink", 346.0, "#d6409f"),
]

NEUTRAL_KEYS = {"gray", "sand", "olive", "sage", "slate", "mauve"}
WARM_NEUTRAL_KEYS = {"bronze", "gold"}
# step 9 is lighter than step 8; paired with dark text
BRIGHT_KEYS = {"yellow", "lime", "amber", "mint", "sky"}

# ============================================================
# Curve templates
# ============================================================

LIGHT_BASE_LIGHTNESS = (0.993, 0.981, 0.959, 0.931, 0.897, 0.858, 0.805, 0.732)
LIGHT_TEXT_LIGHTNESS = (0.561, 0.332)

DARK_BASE_LIGHTNESS = (0.178, 0.205, 0.255, 0.293, 0.332, 0.378, 0.437, 0.512)
DARK_TEXT_LIGHTNESS = (0.86, 0.925)

CHROMA_SHAPE = {
    "light": (0.02, 0.06, 0.15, 0.28, 0.40, 0.52, 0.60, 0.72, 1.0, 0.98, 0.85, 0.45),
    "dark": (0.10, 0.12, 0.30, 0.40, 0.45, 0.48, 0.52, 0.62, 1.0, 0.95, 0.70, 0.30),
}


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise InvalidMode(mode)
    return mode


def _light_curve(l9: float, bright: bool) -> Tuple[float, ...]:
    if bright:
        l10 = l9 - 0.02
        l11 = LIGHT_TEXT_LIGHTNESS[0]
    else:
        l10 = l9 - 0.03
        l11 = min(LIGHT_TEXT_LIGHTNESS[0], l10 - 0.03)
    return LIGHT_BASE_LIGHTNESS + (l9, l10, l11, LIGHT_TEXT_LIGHTNESS[1])


def _dark_curve(l9: float, bright: bool, neutral: bool) -> Tuple[float, ...]:
    if neutral:
        l9 = max(0.52, l9 - 0.1)
    if bright:
        l10 = min(l9 + 0.02, 0.96)
        l11 = DARK_TEXT_LIGHTNESS[0]
    else:
        l10 = l9 + 0.04
        l11 = min(DARK_TEXT_LIGHTNESS[0], max(0.78, l10 + 0.04))
    return DARK_BASE_LIGHTNESS + (l9, l10, l11, DARK_TEXT_LIGHTNESS[1])


# ============================================================
# Hue definitions
# ============================================================


@dataclass(frozen=True)
class HueDefinition:
    key: str
    name: str
    hue: float
    category: str
    reference_hex: str
    reference_chroma: float
    reference_lightness: float
    bright: bool
    light_lightness: Tuple[float, ...]
    dark_lightness: Tuple[float, ...]

    @property
    def is_neutral(self) -> bool:
        return self.category == NEUTRAL

    @property
    def is_chromatic(self) -> bool:
        return self.category == CHROMATIC

    def lightness_curve(self, mode: str) -> Tuple[float, ...]:
        check_mode(mode)
        return self.light_lightness if mode == "light" else self.dark_lightness

    def chroma_shape(self, mode: str) -> Tuple[float, ...]:
        return CHROMA_SHAPE[check_mode(mode)]

    def chroma_targets(self, mode: str) -> Tuple[float, ...]:
        return tuple(s * self.reference_chroma for s in self.chroma_shape(mode))

    def target_lightness(self, mode: str, step: int) -> float:
        return self.lightness_curve(mode)[step - 1]

    def target_chroma(self, mode: str, step: int) -> float:
        return self.chroma_targets(mode)[step - 1]


def _define(key: str, name: str, hue: float, reference_hex: str) -> HueDefinition:
    ref = parse_color(reference_hex)
    if key in NEUTRAL_KEYS:
        category = NEUTRAL
    elif key in WARM_NEUTRAL_KEYS:
        category = WARM_NEUTRAL
    else:
        category = CHROMATIC
    bright = key in BRIGHT_KEYS
    return HueDefinition(
        key=key,
        name=name,
        hue=hue,
        category=category,
        reference_hex=reference_hex,
        reference_chroma=ref.c,
        reference_lightness=ref.l,
        bright=bright,
        light_lightness=_light_curve(ref.l, bright),
        dark_lightness=_dark_curve(ref.l, bright, category == NEUTRAL),
    )


BASELINE_HUES: Dict[str, HueDefinition] = {
    key: _define(key, name, hue, ref) for key, name, hue, ref in HUE_TABLE
}
HUE_KEYS: Tuple[str, ...] = tuple(BASELINE_HUES)
HUE_COUNT = len(HUE_KEYS)


# ============================================================
# Lookup
# ============================================================


def circ_dist_deg(a: float, b: float) -> float:
    d = abs(a - b) % 360.0
    return min(d, 360.0 - d)


def signed_hue_offset(h: float, ref: float) -> float:
    """Signed difference ``h - ref`` wrapped into [-180, 180)."""
    return (h - ref + 180.0) % 360.0 - 180.0


def find_closest_hue(
    angle: float, include_neutrals: bool = False
) -> Tuple[HueDefinition, float]:
    best: Optional[HueDefinition] = None
    best_d = float("inf")
    for hue in BASELINE_HUES.values():
        if not include_neutrals and not hue.is_chromatic:
            continue
        d = circ_dist_deg(angle, hue.hue)
        if d < best_d:
            best, best_d = hue, d
    return best, best_d


def find_closest_neutral(angle: float) -> Tuple[HueDefinition, float]:
    """
    Nearest tinted neutral family by hue angle. Pure gray carries no hue, so
    it is only chosen explicitly by callers.
    """
    best: Optional[HueDefinition] = None
    best_d = float("inf")
    for hue in BASELINE_HUES.values():
        if not hue.is_neutral or hue.key == "gray":
            continue
        d = circ_dist_deg(angle, hue.hue)
        if d < best_d:
            best, best_d = hue, d
    return best, best_d


def should_snap_to_slot(distance: float) -> bool:
    return distance <= SNAP_THRESHOLD


def nearest_step(curve: Sequence[float], lightness: float) -> int:
    best_step = 1
    best_d = float("inf")
    for step, target in zip(STEPS, curve):
        d = abs(target - lightness)
        if d < best_d:
            best_step, best_d = step, d
    return best_step


def hues_by_category() -> Dict[str, List[HueDefinition]]:
    out: Dict[str, List[HueDefinition]] = {NEUTRAL: [], WARM_NEUTRAL: [], CHROMATIC: []}
    for hue in BASELINE_HUES.values():
        out[hue.category].append(hue)
    return out


def get_hue(key: str) -> HueDefinition:
    try:
        return BASELINE_HUES[key]
    except KeyError:
        raise KeyError(f"Unknown hue family {key!r}") from None
