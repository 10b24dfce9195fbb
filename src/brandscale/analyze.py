from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .color import Color, canonical_hex, clamp, parse_color, to_css
from .errors import MAX_BRAND_COLORS, EmptyInput, TooManyInputs
from .hues import (
    BASELINE_HUES,
    HueDefinition,
    check_mode,
    find_closest_hue,
    find_closest_neutral,
    nearest_step,
    should_snap_to_slot,
    signed_hue_offset,
)

log = logging.getLogger(__name__)

ACHROMATIC_CHROMA = 0.03
GRAY_CHROMA = 0.005

NEON_CHROMA_RATIO = 1.3
PASTEL_CHROMA_RATIO = 0.5
PASTEL_MIN_LIGHTNESS = 0.8
EXTREME_STEPS = (1, 2, 12)
EXTREME_CHROMA = 0.12

CHROMA_MULTIPLIER_RANGE = (0.5, 1.5)
MAX_LIGHTNESS_SHIFT = 0.05

NEON = "neon"
PASTEL = "pastel"
HUE_GAP = "hue-gap"
EXTREME_LIGHTNESS = "extreme-lightness"


# ============================================================
# Data model
# ============================================================


@dataclass(frozen=True)
class Anchor:
    slot: str
    step: int
    is_custom_row: bool = False


@dataclass(frozen=True)
class CustomRowInfo:
    row_key: str
    anchor_step: int
    reason: str
    input_hex: str
    color: Color
    nearest_slot: str
    hue_distance: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "rowKey": self.row_key,
            "anchorStep": self.anchor_step,
            "reason": self.reason,
            "inputHex": self.input_hex,
            "oklch": to_css(self.color),
            "nearestSlot": self.nearest_slot,
            "hueDistance": round(self.hue_distance, 2),
        }


@dataclass(frozen=True)
class ColorAnalysis:
    input: str
    hex: str
    color: Color
    mode: str
    slot: str
    hue_distance: float
    step: int
    target_lightness: float
    expected_chroma: float
    achromatic: bool
    reason: Optional[str] = None
    row_key: Optional[str] = None

    @property
    def snapped(self) -> bool:
        return self.reason is None

    @property
    def hue_offset(self) -> float:
        if self.achromatic:
            return 0.0
        return signed_hue_offset(self.color.h, BASELINE_HUES[self.slot].hue)

    @property
    def chroma_ratio(self) -> float:
        if self.expected_chroma <= 0:
            return 1.0
        return self.color.c / self.expected_chroma


@dataclass(frozen=True)
class SlotTuning:
    """Hue offset and chroma ratio of the brand colors anchored to one slot."""

    hue_shift: float
    chroma_multiplier: float


@dataclass(frozen=True)
class TuningProfile:
    """
    How a brand deviates from the baseline taxonomy.

    ``hue_shift`` is in signed degrees, ``chroma_multiplier`` scales standard
    chroma targets (1.0 is no change) and ``lightness_shift`` moves every
    lightness target. ``anchors`` maps each input color string to where it
    landed; ``conflicts`` lists inputs that share a standard slot.
    Anchored chromatic slots follow their own inputs through ``slots``
    instead of the brand-wide hue and chroma means.
    """

    mode: str
    hue_shift: float = 0.0
    chroma_multiplier: float = 1.0
    lightness_shift: float = 0.0
    anchors: Mapping[str, Anchor] = field(default_factory=lambda: MappingProxyType({}))
    custom_rows: Tuple[CustomRowInfo, ...] = ()
    conflicts: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    slots: Mapping[str, SlotTuning] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def neutral(cls, mode: str) -> "TuningProfile":
        return cls(mode=check_mode(mode))

    def anchored_slots(self) -> List[str]:
        out: List[str] = []
        for anchor in self.anchors.values():
            if not anchor.is_custom_row and anchor.slot not in out:
                out.append(anchor.slot)
        return out

    def anchor_for(self, key: str) -> Optional[Anchor]:
        for anchor in self.anchors.values():
            if anchor.slot == key:
                return anchor
        return None

    def pins_for(self, key: str) -> Dict[int, Color]:
        """Input colors anchored to ``key``, by step. First input wins a step."""
        pins: Dict[int, Color] = {}
        for text, anchor in self.anchors.items():
            if anchor.slot == key and anchor.step not in pins:
                pins[anchor.step] = parse_color(text).opaque()
        return pins

    def to_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode,
            "hueShift": round(self.hue_shift, 3),
            "chromaMultiplier": round(self.chroma_multiplier, 4),
            "lightnessShift": round(self.lightness_shift, 4),
            "anchors": {
                text: {"slot": a.slot, "step": a.step, "isCustomRow": a.is_custom_row}
                for text, a in self.anchors.items()
            },
            "customRows": [row.to_dict() for row in self.custom_rows],
            "conflicts": {slot: list(inputs) for slot, inputs in self.conflicts.items()},
            "slots": {
                slot: {
                    "hueShift": round(t.hue_shift, 3),
                    "chromaMultiplier": round(t.chroma_multiplier, 4),
                }
                for slot, t in self.slots.items()
            },
        }


@dataclass(frozen=True)
class AnalysisReport:
    analyses: Tuple[ColorAnalysis, ...]
    profile: TuningProfile
    summary: str


# ============================================================
# Per-color analysis
# ============================================================


def _classify(color: Color, hue: HueDefinition, distance: float, step: int):
    ratio = color.c / hue.reference_chroma if hue.reference_chroma > 0 else 1.0

    if ratio > NEON_CHROMA_RATIO:
        return NEON, f"neon-{hue.key}"
    if ratio < PASTEL_CHROMA_RATIO and color.l >= PASTEL_MIN_LIGHTNESS:
        return PASTEL, f"pastel-{hue.key}"
    if not should_snap_to_slot(distance):
        return HUE_GAP, f"custom-{int(color.h + 0.5) % 360}"
    if step in EXTREME_STEPS and color.c > EXTREME_CHROMA:
        prefix = "dark" if color.l < 0.5 else "bright"
        return EXTREME_LIGHTNESS, f"{prefix}-{hue.key}"
    return None, None


def analyze_color(text: str, mode: str = "light") -> ColorAnalysis:
    check_mode(mode)
    color = parse_color(text).opaque()
    hex_ = canonical_hex(text)

    if color.c < ACHROMATIC_CHROMA:
        if color.c < GRAY_CHROMA:
            hue, distance = BASELINE_HUES["gray"], 0.0
        else:
            hue, distance = find_closest_neutral(color.h)
        step = nearest_step(hue.lightness_curve(mode), color.l)
        log.debug("%s: achromatic, anchored to %s step %d", hex_, hue.key, step)
        return ColorAnalysis(
            input=text.strip(),
            hex=hex_,
            color=color,
            mode=mode,
            slot=hue.key,
            hue_distance=distance,
            step=step,
            target_lightness=hue.target_lightness(mode, step),
            expected_chroma=hue.target_chroma(mode, step),
            achromatic=True,
        )

    hue, distance = find_closest_hue(color.h)
    step = nearest_step(hue.lightness_curve(mode), color.l)
    reason, row_key = _classify(color, hue, distance, step)

    if reason:
        log.debug("%s: custom row %s (%s)", hex_, row_key, reason)
    else:
        log.debug("%s: anchored to %s step %d (%.1f deg)", hex_, hue.key, step, distance)

    return ColorAnalysis(
        input=text.strip(),
        hex=hex_,
        color=color,
        mode=mode,
        slot=hue.key,
        hue_distance=distance,
        step=step,
        target_lightness=hue.target_lightness(mode, step),
        expected_chroma=hue.target_chroma(mode, step),
        achromatic=False,
        reason=reason,
        row_key=row_key,
    )


# ============================================================
# Aggregation
# ============================================================


def check_brand_colors(brand_colors: Sequence[str]) -> List[str]:
    """
    Count and syntax checks shared by analysis and palette generation.
    Returns the inputs with duplicates (same color) removed, first one kept.
    """
    colors = list(brand_colors or [])
    if not colors:
        raise EmptyInput()
    if len(colors) > MAX_BRAND_COLORS:
        raise TooManyInputs(len(colors))

    seen = set()
    unique: List[str] = []
    for text in colors:
        hex_ = canonical_hex(text)
        if hex_ in seen:
            log.debug("Skipping duplicate brand color %s", text)
            continue
        seen.add(hex_)
        unique.append(text.strip())
    return unique


def circular_mean_offset(offsets: Iterable[float]) -> float:
    rad = np.deg2rad(np.asarray(list(offsets), dtype=float))
    if rad.size == 0:
        return 0.0
    mean = float(np.rad2deg(np.arctan2(np.mean(np.sin(rad)), np.mean(np.cos(rad)))))
    return signed_hue_offset(mean, 0.0)


def _lightness_delta(analysis: ColorAnalysis) -> float:
    curve = BASELINE_HUES[analysis.slot].lightness_curve(analysis.mode)
    L = analysis.color.l
    if L > max(curve) or L < min(curve):
        return 0.0
    return L - analysis.target_lightness


def _unique_key(key: str, taken: Dict[str, int]) -> str:
    n = taken.get(key, 0) + 1
    taken[key] = n
    return key if n == 1 else f"{key}-{n}"


def build_profile(analyses: Sequence[ColorAnalysis], mode: str) -> TuningProfile:
    anchors: Dict[str, Anchor] = {}
    custom_rows: List[CustomRowInfo] = []
    by_slot: Dict[str, List[str]] = {}
    taken: Dict[str, int] = {}

    offsets: List[float] = []
    ratios: List[float] = []
    deltas: List[float] = []
    slot_offsets: Dict[str, List[float]] = {}
    slot_ratios: Dict[str, List[float]] = {}

    for a in analyses:
        if a.reason:
            row_key = _unique_key(a.row_key, taken)
            anchors[a.input] = Anchor(row_key, a.step, True)
            custom_rows.append(
                CustomRowInfo(
                    row_key=row_key,
                    anchor_step=a.step,
                    reason=a.reason,
                    input_hex=a.hex,
                    color=a.color,
                    nearest_slot=a.slot,
                    hue_distance=a.hue_distance,
                )
            )
            continue

        anchors[a.input] = Anchor(a.slot, a.step, False)
        by_slot.setdefault(a.slot, []).append(a.input)
        deltas.append(_lightness_delta(a))
        if not a.achromatic:
            offsets.append(a.hue_offset)
            slot_offsets.setdefault(a.slot, []).append(a.hue_offset)
            if a.expected_chroma > 0:
                ratios.append(a.chroma_ratio)
                slot_ratios.setdefault(a.slot, []).append(a.chroma_ratio)

    conflicts = {slot: tuple(inputs) for slot, inputs in by_slot.items() if len(inputs) > 1}
    for slot, inputs in conflicts.items():
        log.warning("%d brand colors anchor to %s: %s", len(inputs), slot, ", ".join(inputs))

    lo, hi = CHROMA_MULTIPLIER_RANGE
    slots = {
        slot: SlotTuning(
            hue_shift=circular_mean_offset(slot_offsets[slot]),
            chroma_multiplier=(
                clamp(float(np.mean(slot_ratios[slot])), lo, hi) if slot in slot_ratios else 1.0
            ),
        )
        for slot in slot_offsets
    }
    return TuningProfile(
        mode=mode,
        hue_shift=circular_mean_offset(offsets),
        chroma_multiplier=clamp(float(np.mean(ratios)), lo, hi) if ratios else 1.0,
        lightness_shift=(
            clamp(float(np.mean(deltas)), -MAX_LIGHTNESS_SHIFT, MAX_LIGHTNESS_SHIFT)
            if deltas
            else 0.0
        ),
        anchors=MappingProxyType(anchors),
        custom_rows=tuple(custom_rows),
        conflicts=MappingProxyType(conflicts),
        slots=MappingProxyType(slots),
    )


def _analyze_all(brand_colors: Sequence[str], mode: str) -> List[ColorAnalysis]:
    check_mode(mode)
    return [analyze_color(text, mode) for text in check_brand_colors(brand_colors)]


def analyze(brand_colors: Sequence[str], mode: str = "light") -> TuningProfile:
    """
    Build the TuningProfile for 1-7 brand colors in one appearance mode.

    Raises EmptyInput, TooManyInputs, or the InvalidColor of the first
    malformed input.
    """
    return build_profile(_analyze_all(brand_colors, mode), mode)


# ============================================================
# Report
# ============================================================


def _describe(a: ColorAnalysis, row_key: Optional[str]) -> str:
    if a.achromatic:
        return f"✓ {a.hex} → {a.slot} step {a.step} (neutral)"
    if a.reason is None:
        return (
            f"✓ {a.hex} → {a.slot} step {a.step} "
            f"(H {a.hue_offset:+.1f}°, C× {a.chroma_ratio:.2f})"
        )
    return (
        f"✗ {a.hex} → {row_key} step {a.step} "
        f"({a.reason}, {a.hue_distance:.1f}° from {a.slot})"
    )


def format_profile(profile: TuningProfile) -> str:
    return (
        f"Profile ({profile.mode}): hue {profile.hue_shift:+.1f}°, "
        f"chroma ×{profile.chroma_multiplier:.2f}, "
        f"lightness {profile.lightness_shift:+.3f}"
    )


def analysis_report(brand_colors: Sequence[str], mode: str = "light") -> AnalysisReport:
    analyses = _analyze_all(brand_colors, mode)
    profile = build_profile(analyses, mode)

    lines = []
    for a in analyses:
        anchor = profile.anchors[a.input]
        lines.append(_describe(a, anchor.slot if anchor.is_custom_row else None))
    for slot, inputs in profile.conflicts.items():
        lines.append(f"! {slot} is claimed by {', '.join(inputs)}")
    lines.append(format_profile(profile))

    return AnalysisReport(tuple(analyses), profile, "\n".join(lines))
