from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .color import ColorLike, color_to_rgb8
from .hues import check_mode

RGB_MAX = 255


def _round(x: float) -> int:
    return int(math.floor(x + 0.5))


def blend_channel(fg: int, alpha: float, bg: int) -> int:
    return _round(bg * (1.0 - alpha)) + _round(fg * alpha)


@dataclass(frozen=True)
class AlphaColor:
    foreground: Tuple[int, int, int]
    alpha: float

    @property
    def hex(self) -> str:
        r, g, b = self.foreground
        return f"#{r:02x}{g:02x}{b:02x}{_round(self.alpha * RGB_MAX):02x}"

    @property
    def css(self) -> str:
        r, g, b = self.foreground
        return f"rgba({r}, {g}, {b}, {self.alpha:.3f})"

    def composite(self, backdrop: ColorLike) -> Tuple[int, int, int]:
        bg = color_to_rgb8(backdrop)
        return tuple(blend_channel(f, self.alpha, b) for f, b in zip(self.foreground, bg))


def backdrop_for(mode: str) -> str:
    return "#ffffff" if check_mode(mode) == "light" else "#000000"


def solve_alpha_color(
    target: ColorLike,
    backdrop: ColorLike = "#ffffff",
    target_alpha: Optional[float] = None,
) -> AlphaColor:
    """
    Solve for the translucent color that composites to ``target``.

    ``target_alpha`` fixes the alpha instead of using the minimum. The
    composited result is within one unit of the target in every channel.
    """
    t = color_to_rgb8(target)
    b = color_to_rgb8(backdrop)

    desired = RGB_MAX if any(tc > bc for tc, bc in zip(t, b)) else 0
    alphas = [
        (tc - bc) / (desired - bc) if desired != bc else 0.0 for tc, bc in zip(t, b)
    ]

    # grays reach the target with the pure extreme
    if target_alpha is None and alphas[0] == alphas[1] == alphas[2]:
        return AlphaColor((desired, desired, desired), alphas[0])

    raw = target_alpha if target_alpha is not None else max(alphas)
    # tolerance keeps float noise (221/255*255 > 221) from bumping alpha a unit
    A = min(RGB_MAX, max(0, math.ceil(raw * RGB_MAX - 1e-9))) / RGB_MAX
    if A == 0:
        return AlphaColor(t, 0.0)

    fg = []
    for tc, bc in zip(t, b):
        f = min(RGB_MAX, max(0, _round((tc - bc * (1.0 - A)) / A)))
        candidates = [c for c in (f, f - 1, f + 1) if 0 <= c <= RGB_MAX]
        fg.append(min(candidates, key=lambda c: abs(blend_channel(c, A, bc) - tc)))

    return AlphaColor((fg[0], fg[1], fg[2]), A)


def alpha_scale(scale, backdrop: Optional[ColorLike] = None) -> Tuple[AlphaColor, ...]:
    """All 12 steps of a scale as translucent colors over the mode's backdrop."""
    bg = backdrop if backdrop is not None else backdrop_for(scale.mode)
    return tuple(solve_alpha_color(scale[step], bg) for step in range(1, 13))
