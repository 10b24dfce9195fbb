from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .analyze import TuningProfile, analyze, check_brand_colors
from .errors import InvalidMode
from .generate import CustomHue, Scale, generate_scale
from .hues import BASELINE_HUES, STEPS, check_mode

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaletteStats:
    total_hues: int
    total_colors: int
    anchored_hues: int
    custom_hues: int


@dataclass(frozen=True)
class Palette:
    mode: str
    scales: Tuple[Scale, ...]
    tuning_profile: TuningProfile
    input_colors: Tuple[str, ...]
    anchored_slots: Tuple[str, ...]
    custom_slots: Tuple[str, ...]

    def __iter__(self) -> Iterator[Scale]:
        return iter(self.scales)

    def __len__(self) -> int:
        return len(self.scales)

    def __contains__(self, key: str) -> bool:
        return any(s.key == key for s in self.scales)

    def __getitem__(self, key: str) -> Scale:
        for scale in self.scales:
            if scale.key == key:
                return scale
        raise KeyError(key)

    @property
    def keys(self) -> List[str]:
        return [s.key for s in self.scales]

    def stats(self) -> PaletteStats:
        return PaletteStats(
            total_hues=len(self.scales),
            total_colors=len(self.scales) * len(STEPS),
            anchored_hues=len(self.anchored_slots),
            custom_hues=len(self.custom_slots),
        )

    def to_dict(self) -> Dict[str, object]:
        stats = self.stats()
        return {
            "mode": self.mode,
            "inputColors": list(self.input_colors),
            "anchoredSlots": list(self.anchored_slots),
            "customSlots": list(self.custom_slots),
            "tuningProfile": self.tuning_profile.to_dict(),
            "stats": {
                "totalHues": stats.total_hues,
                "totalColors": stats.total_colors,
                "anchoredHues": stats.anchored_hues,
                "customHues": stats.custom_hues,
            },
            "scales": {s.key: s.to_dict() for s in self.scales},
        }


@dataclass(frozen=True)
class Theme:
    light: Palette
    dark: Palette

    @property
    def palettes(self) -> Tuple[Palette, Palette]:
        return (self.light, self.dark)

    def to_dict(self) -> Dict[str, object]:
        return {"light": self.light.to_dict(), "dark": self.dark.to_dict()}


def palette_stats(palette: Palette) -> PaletteStats:
    return palette.stats()


def generate_palette(
    brand_colors: Sequence[str],
    mode: str = "light",
    tuning_profile: Optional[TuningProfile] = None,
) -> Palette:
    """
    Generate all 31 baseline scales plus one scale per custom row.

    ``tuning_profile`` replaces the analysis of ``brand_colors`` when given;
    the inputs are still validated and the profile must be for ``mode``.
    """
    check_mode(mode)
    if tuning_profile is not None and tuning_profile.mode != mode:
        raise InvalidMode(
            mode, f"Tuning profile was built for {tuning_profile.mode} mode, not {mode}"
        )
    inputs = check_brand_colors(brand_colors)
    profile = tuning_profile if tuning_profile is not None else analyze(inputs, mode)

    scales = [generate_scale(hue, profile, mode) for hue in BASELINE_HUES.values()]
    for row in profile.custom_rows:
        scales.append(generate_scale(CustomHue.from_row(row), profile, mode))

    log.debug("Generated %d scales (%s)", len(scales), mode)
    return Palette(
        mode=mode,
        scales=tuple(scales),
        tuning_profile=profile,
        input_colors=tuple(inputs),
        anchored_slots=tuple(profile.anchored_slots()),
        custom_slots=tuple(row.row_key for row in profile.custom_rows),
    )


def generate_theme(brand_colors: Sequence[str]) -> Theme:
    return Theme(
        light=generate_palette(brand_colors, "light"),
        dark=generate_palette(brand_colors, "dark"),
    )
