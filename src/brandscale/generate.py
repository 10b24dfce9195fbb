from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .analyze import NEON, PASTEL, CustomRowInfo, TuningProfile
from .apca import contrast
from .color import Color, clamp, lch_to_hex_many, to_css, to_hex
from .hues import BASELINE_HUES, CHROMA_SHAPE, STEPS, HueDefinition, check_mode

log = logging.getLogger(__name__)

APCA_THRESHOLDS = {"body": 75.0, "large": 60.0, "decorative": 45.0}

# text step -> required Lc against every background step
TEXT_STEPS = {12: APCA_THRESHOLDS["body"], 11: APCA_THRESHOLDS["large"]}
BACKGROUND_STEPS = (1, 2)
SOLID_STEP = 9
WHITE = "#ffffff"

CORRECTION_STEP = 0.01
MAX_CORRECTION_ITERATIONS = 60

# share of the lightness shift applied per step; background steps stay near the curve ends
SHIFT_WEIGHTS = (0.0, 0.15, 0.35, 0.6, 0.8, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0)


# ============================================================
# Data model
# ============================================================


@dataclass(frozen=True)
class CustomHue:
    """A hue outside the taxonomy, shaped after its nearest standard family."""

    key: str
    color: Color
    anchor_step: int
    reason: str
    nearest: HueDefinition
    hue_distance: float

    @classmethod
    def from_row(cls, row: CustomRowInfo) -> "CustomHue":
        return cls(
            key=row.row_key,
            color=row.color,
            anchor_step=row.anchor_step,
            reason=row.reason,
            nearest=BASELINE_HUES[row.nearest_slot],
            hue_distance=row.hue_distance,
        )

    @property
    def name(self) -> str:
        return self.key.replace("-", " ").title()


HueLike = Union[HueDefinition, CustomHue]


@dataclass(frozen=True)
class ContrastShortfall:
    text_step: int
    bg_step: Union[int, str]
    expected: float
    actual: float
    severity: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "textStep": self.text_step,
            "bgStep": self.bg_step,
            "expected": self.expected,
            "actual": round(self.actual, 1),
            "severity": self.severity,
        }


@dataclass(frozen=True)
class Scale:
    key: str
    name: str
    mode: str
    colors: Tuple[Color, ...]
    hexes: Tuple[str, ...]
    anchor_step: Optional[int] = None
    pinned_steps: Tuple[int, ...] = ()
    notes: Tuple[ContrastShortfall, ...] = ()
    is_custom: bool = False

    def _index(self, step: int) -> int:
        if step not in STEPS:
            raise IndexError(f"Scale step must be 1-12, got {step!r}")
        return step - 1

    def __getitem__(self, step: int) -> str:
        return self.hexes[self._index(step)]

    def __len__(self) -> int:
        return len(self.hexes)

    def color(self, step: int) -> Color:
        return self.colors[self._index(step)]

    def css(self, step: int) -> str:
        return to_css(self.color(step))

    def flagged(self, text_step: int, bg_step: Union[int, str]) -> bool:
        return any(n.text_step == text_step and n.bg_step == bg_step for n in self.notes)

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "name": self.name,
            "mode": self.mode,
            "custom": self.is_custom,
            "anchorStep": self.anchor_step,
            "pinnedSteps": list(self.pinned_steps),
            "steps": {
                str(step): {"hex": self.hexes[step - 1], "oklch": self.css(step)}
                for step in STEPS
            },
            "notes": [n.to_dict() for n in self.notes],
        }


# ============================================================
# Targets
# ============================================================


def _standard_targets(hue: HueDefinition, profile: TuningProfile, mode: str) -> List[Color]:
    tuning = profile.slots.get(hue.key) if hue.is_chromatic else None
    if hue.is_neutral:
        h = hue.hue
    elif tuning is not None:
        h = hue.hue + tuning.hue_shift
    else:
        h = hue.hue + profile.hue_shift
    if tuning is not None:
        mult = tuning.chroma_multiplier
    elif hue.is_chromatic:
        mult = profile.chroma_multiplier
    else:
        mult = min(profile.chroma_multiplier, 1.0)

    return [
        Color(clamp(l + profile.lightness_shift * w, 0.0, 1.0), c * mult, h)
        for l, c, w in zip(hue.lightness_curve(mode), hue.chroma_targets(mode), SHIFT_WEIGHTS)
    ]


def _custom_targets(hue: CustomHue, profile: TuningProfile, mode: str) -> List[Color]:
    shape = CHROMA_SHAPE[mode]
    h = hue.color.h
    if hue.reason == NEON:
        h += profile.hue_shift
    if hue.reason == PASTEL:
        peak = hue.color.c
    else:
        peak = hue.color.c / shape[hue.anchor_step - 1]

    return [
        Color(l, s * peak, h)
        for l, s in zip(hue.nearest.lightness_curve(mode), shape)
    ]


# ============================================================
# Contrast correction
# ============================================================


def _min_lc(text_hex: str, bg_hexes: Sequence[str]) -> Tuple[float, int]:
    """Weakest |Lc| of the text against the backgrounds, with its index."""
    lcs = [abs(contrast(text_hex, bg)) for bg in bg_hexes]
    i = min(range(len(lcs)), key=lcs.__getitem__)
    return lcs[i], i


def _correct_step(color: Color, bg_colors: Sequence[Color], threshold: float) -> Color:
    bg_hexes = [to_hex(c) for c in bg_colors]
    ref_l = bg_colors[0].l
    direction = 1.0 if color.l > ref_l or (color.l == ref_l and ref_l < 0.5) else -1.0

    for _ in range(MAX_CORRECTION_ITERATIONS):
        lc, _ = _min_lc(to_hex(color), bg_hexes)
        if lc >= threshold:
            break
        l = color.l + direction * CORRECTION_STEP
        color = color.with_lightness(l)
        if l <= 0.0 or l >= 1.0:
            break
    return color


def _check_text_steps(
    key: str, colors: List[Color], hexes: List[str], pinned: Sequence[int]
) -> List[ContrastShortfall]:
    """Correct unpinned text steps in place; return what is still short."""
    bg_colors = [colors[s - 1] for s in BACKGROUND_STEPS]
    bg_hexes = [hexes[s - 1] for s in BACKGROUND_STEPS]
    notes: List[ContrastShortfall] = []

    for step, threshold in TEXT_STEPS.items():
        if step not in pinned:
            fixed = _correct_step(colors[step - 1], bg_colors, threshold)
            if fixed != colors[step - 1]:
                log.debug(
                    "%s step %d: lightness %.3f -> %.3f",
                    key, step, colors[step - 1].l, fixed.l,
                )
                colors[step - 1] = fixed
                hexes[step - 1] = to_hex(fixed)

        for bg_step, bg_hex in zip(BACKGROUND_STEPS, bg_hexes):
            lc = abs(contrast(hexes[step - 1], bg_hex))
            if lc < threshold:
                log.warning(
                    "%s: step %d on step %d reaches Lc %.1f (needs %.0f)",
                    key, step, bg_step, lc, threshold,
                )
                notes.append(ContrastShortfall(step, bg_step, threshold, lc, "fail"))
    return notes


def _check_solid_step(hexes: Sequence[str]) -> Optional[ContrastShortfall]:
    threshold = APCA_THRESHOLDS["large"]
    lc = abs(contrast(WHITE, hexes[SOLID_STEP - 1]))
    if lc < threshold:
        return ContrastShortfall(SOLID_STEP, "white", threshold, lc, "warning")
    return None


# ============================================================
# Entry point
# ============================================================


def generate_scale(
    hue: HueLike,
    profile: TuningProfile,
    mode: str = "light",
    pins: Optional[Dict[int, Color]] = None,
) -> Scale:
    """
    Generate the 12-step scale of one standard or custom hue.

    ``pins`` maps steps to colors that are used verbatim; when omitted, the
    profile's anchored inputs for this hue are pinned.
    """
    check_mode(mode)
    is_custom = isinstance(hue, CustomHue)

    if is_custom:
        colors = _custom_targets(hue, profile, mode)
        anchor_step: Optional[int] = hue.anchor_step
    else:
        colors = _standard_targets(hue, profile, mode)
        anchor = profile.anchor_for(hue.key)
        anchor_step = anchor.step if anchor else None

    if pins is None:
        pins = profile.pins_for(hue.key)

    hexes = lch_to_hex_many([(c.l, c.c, c.h) for c in colors])
    for step, pin in pins.items():
        colors[step - 1] = pin.opaque()
        hexes[step - 1] = to_hex(pin.opaque())
    pinned = tuple(sorted(pins))

    notes = _check_text_steps(hue.key, colors, hexes, pinned)
    solid = _check_solid_step(hexes)
    if solid:
        notes.append(solid)

    return Scale(
        key=hue.key,
        name=hue.name,
        mode=mode,
        colors=tuple(colors),
        hexes=tuple(hexes),
        anchor_step=anchor_step,
        pinned_steps=pinned,
        notes=tuple(notes),
        is_custom=is_custom,
    )
