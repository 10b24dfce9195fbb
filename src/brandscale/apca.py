"""
APCA lightness contrast (0.0.98G-4g constants).

``contrast(text, background)`` returns the signed Lc value: positive for dark
text on a light background, negative for light text on a dark background.
Callers that only care about magnitude compare ``abs(lc)``.
"""

from __future__ import annotations

from typing import Sequence

from .color import ColorLike, color_to_rgb8

MAIN_TRC = 2.4
SR_CO = 0.2126729
SG_CO = 0.7151522
SB_CO = 0.0721750

NORM_BG = 0.56
NORM_TXT = 0.57
REV_TXT = 0.62
REV_BG = 0.65

BLK_THRS = 0.022
BLK_CLMP = 1.414
SCALE_BOW = 1.14
SCALE_WOB = 1.14
LO_BOW_OFFSET = 0.027
LO_WOB_OFFSET = 0.027
DELTA_Y_MIN = 0.0005
LO_CLIP = 0.1


def srgb_to_y(rgb8: Sequence[int]) -> float:
    r, g, b = (float(v) / 255.0 for v in rgb8)
    return SR_CO * r**MAIN_TRC + SG_CO * g**MAIN_TRC + SB_CO * b**MAIN_TRC


def _soft_clamp(y: float) -> float:
    if y > BLK_THRS:
        return y
    return y + (BLK_THRS - y) ** BLK_CLMP


def apca_contrast(text_y: float, bg_y: float) -> float:
    """Lc from two screen luminances (0..1)."""
    txt = _soft_clamp(text_y)
    bg = _soft_clamp(bg_y)

    if abs(bg - txt) < DELTA_Y_MIN:
        return 0.0

    if bg > txt:
        sapc = (bg**NORM_BG - txt**NORM_TXT) * SCALE_BOW
        out = 0.0 if sapc < LO_CLIP else sapc - LO_BOW_OFFSET
    else:
        sapc = (bg**REV_BG - txt**REV_TXT) * SCALE_WOB
        out = 0.0 if sapc > -LO_CLIP else sapc + LO_WOB_OFFSET

    return out * 100.0


def contrast(text: ColorLike, background: ColorLike) -> float:
    return apca_contrast(srgb_to_y(color_to_rgb8(text)), srgb_to_y(color_to_rgb8(background)))
