from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import colour
import numpy as np

from .errors import (
    EmptyColor,
    InvalidColor,
    InvalidHexCharacters,
    InvalidHexLength,
    MissingHashPrefix,
    UnrecognizedColorFormat,
)

# Below this chroma the hue angle is numerical noise.
ACHROMATIC_EPSILON = 5e-4

GAMUT_EPSILON = 1e-4
GAMUT_ITERATIONS = 18

HEX_DIGITS_RE = re.compile(r"^[0-9a-fA-F]+$")
BARE_HEX_RE = re.compile(r"^[0-9a-fA-F]{3,8}$")
OKLCH_RE = re.compile(
    r"^oklch\(\s*"
    r"([-+]?\d*\.?\d+)(%?)\s+"
    r"([-+]?\d*\.?\d+)\s+"
    r"([-+]?\d*\.?\d+)(?:deg)?"
    r"(?:\s*/\s*([-+]?\d*\.?\d+)(%?))?"
    r"\s*\)$",
    re.IGNORECASE,
)


# ============================================================
# Value type
# ============================================================


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


@dataclass(frozen=True)
class Color:
    """
    Immutable OKLCH color.

    Values are normalized on construction: lightness and alpha are clamped to
    [0, 1], chroma is floored at 0 and hue wraps into [0, 360).
    """

    l: float
    c: float
    h: float
    alpha: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "l", clamp(float(self.l), 0.0, 1.0))
        object.__setattr__(self, "c", max(0.0, float(self.c)))
        object.__setattr__(self, "h", float(self.h) % 360.0)
        if self.alpha is not None:
            object.__setattr__(self, "alpha", clamp(float(self.alpha), 0.0, 1.0))

    def with_lightness(self, l: float) -> "Color":
        return replace(self, l=l)

    def with_chroma(self, c: float) -> "Color":
        return replace(self, c=c)

    def with_hue(self, h: float) -> "Color":
        return replace(self, h=h)

    def opaque(self) -> "Color":
        return replace(self, alpha=None)

    @property
    def hex(self) -> str:
        return to_hex(self)

    @property
    def css(self) -> str:
        return to_css(self)


@dataclass(frozen=True)
class ColorValidation:
    valid: bool
    error: Optional[str] = None
    suggestion: Optional[str] = None


ColorLike = Union[Color, str]


# ============================================================
# Lab / LCh helpers
# ============================================================


def lab_to_lch(L: float, a: float, b: float) -> Tuple[float, float, float]:
    C = math.sqrt(a * a + b * b)
    if C <= ACHROMATIC_EPSILON:
        return (float(L), 0.0, 0.0)
    h = math.degrees(math.atan2(b, a)) % 360.0
    return (float(L), float(C), float(h))


def lch_to_lab(L: float, C: float, h: float) -> Tuple[float, float, float]:
    hr = math.radians(h)
    return (float(L), float(C * math.cos(hr)), float(C * math.sin(hr)))


def lch_array_to_lab(lch: np.ndarray) -> np.ndarray:
    hr = np.radians(lch[..., 2])
    return np.stack(
        [lch[..., 0], lch[..., 1] * np.cos(hr), lch[..., 1] * np.sin(hr)], axis=-1
    )


def srgb_to_oklab(rgb: np.ndarray) -> np.ndarray:
    # rgb: (..., 3) gamma-encoded sRGB in 0..1
    return colour.XYZ_to_Oklab(colour.sRGB_to_XYZ(rgb))


def oklab_to_srgb(lab: np.ndarray) -> np.ndarray:
    return colour.XYZ_to_sRGB(colour.Oklab_to_XYZ(lab))


def _in_gamut(rgb: np.ndarray) -> np.ndarray:
    return np.all((rgb >= -GAMUT_EPSILON) & (rgb <= 1.0 + GAMUT_EPSILON), axis=-1)


def fit_gamut(lch: Iterable[Sequence[float]]) -> np.ndarray:
    """
    Map OKLCH rows to sRGB in 0..1, bisecting chroma for rows outside the
    gamut. Lightness and hue of every row are preserved.
    """
    lch = np.array(lch, dtype=float).reshape(-1, 3)
    rgb = oklab_to_srgb(lch_array_to_lab(lch))
    outside = ~_in_gamut(rgb)

    if outside.any():
        sub = lch[outside].copy()
        lo = np.zeros(len(sub))
        hi = sub[:, 1].copy()
        for _ in range(GAMUT_ITERATIONS):
            mid = (lo + hi) / 2.0
            sub[:, 1] = mid
            ok = _in_gamut(oklab_to_srgb(lch_array_to_lab(sub)))
            lo = np.where(ok, mid, lo)
            hi = np.where(ok, hi, mid)
        sub[:, 1] = lo
        rgb[outside] = oklab_to_srgb(lch_array_to_lab(sub))

    return np.clip(np.nan_to_num(rgb), 0.0, 1.0)


def rgb8_to_color(rgb8: Sequence[int], alpha: Optional[float] = None) -> Color:
    lab = srgb_to_oklab(np.asarray(rgb8, dtype=float) / 255.0)
    return Color(*lab_to_lch(*lab), alpha=alpha)


# ============================================================
# Formatting
# ============================================================


def _format_hex(rgb: np.ndarray, alpha: Optional[float] = None) -> str:
    r, g, b = (rgb * 255.0 + 0.5).astype(int)
    out = f"#{r:02x}{g:02x}{b:02x}"
    if alpha is not None and alpha < 1.0:
        out += f"{int(alpha * 255.0 + 0.5):02x}"
    return out


def to_hex(color: Color) -> str:
    rgb = fit_gamut([(color.l, color.c, color.h)])[0]
    return _format_hex(rgb, color.alpha)


def lch_to_hex_many(rows: Iterable[Sequence[float]]) -> List[str]:
    """Vectorized ``to_hex`` for opaque (l, c, h) rows."""
    return [_format_hex(rgb) for rgb in fit_gamut(rows)]


def to_css(color: Color) -> str:
    out = f"oklch({color.l * 100:.1f}% {color.c:.4f} {color.h:.1f}"
    if color.alpha is not None and color.alpha < 1.0:
        out += f" / {color.alpha:.3f}"
    return out + ")"


def hex_to_rgb8(hex_color: str) -> Tuple[int, int, int]:
    digits = hex_color.strip().lstrip("#")
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def color_to_rgb8(color: ColorLike) -> Tuple[int, int, int]:
    if isinstance(color, Color):
        return hex_to_rgb8(to_hex(color.opaque()))
    return hex_to_rgb8(canonical_hex(color))


# ============================================================
# Parsing
# ============================================================


def _parse_hex(text: str, digits: str) -> Color:
    if digits and not HEX_DIGITS_RE.match(digits):
        raise InvalidHexCharacters(
            text,
            "invalid hex characters",
            "Hex colors should only contain 0-9 and A-F",
        )
    if len(digits) not in (3, 4, 6, 8):
        raise InvalidHexLength(
            text,
            f"invalid hex length ({len(digits)} characters)",
            "Hex colors should be 3, 4, 6, or 8 characters after #",
        )

    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    rgb8 = (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    alpha = int(digits[6:8], 16) / 255.0 if len(digits) == 8 else None
    return rgb8_to_color(rgb8, alpha)


def _parse_oklch(m: re.Match) -> Color:
    l = float(m.group(1))
    if m.group(2):
        l /= 100.0
    alpha = None
    if m.group(5) is not None:
        alpha = float(m.group(5))
        if m.group(6):
            alpha /= 100.0
    return Color(l, float(m.group(3)), float(m.group(4)), alpha)


def parse_color(text: str) -> Color:
    """
    Read a hex (``#rgb``, ``#rgba``, ``#rrggbb``, ``#rrggbbaa``) or CSS
    ``oklch()`` string.

    Raises an ``InvalidColor`` subtype describing what is wrong with the
    input, with a suggestion where one can be made.
    """
    if not isinstance(text, str) or not text.strip():
        raise EmptyColor("" if text is None else str(text), "color is required")

    s = text.strip()

    m = OKLCH_RE.match(s)
    if m:
        return _parse_oklch(m)

    if s.startswith("#"):
        return _parse_hex(text, s[1:])

    if BARE_HEX_RE.match(s):
        raise MissingHashPrefix(text, "missing # prefix", f"Did you mean #{s}?")

    raise UnrecognizedColorFormat(
        text,
        "unrecognized color format",
        "Try a hex color like #FF4F00 or oklch(70% 0.2 45)",
    )


def validate_color(text: str) -> ColorValidation:
    try:
        parse_color(text)
    except InvalidColor as e:
        return ColorValidation(False, e.reason, e.suggestion)
    return ColorValidation(True)


def canonical_hex(text: str) -> str:
    """Lowercase ``#rrggbb`` form of an input color, alpha dropped."""
    color = parse_color(text)
    s = text.strip()
    if s.startswith("#"):
        digits = s[1:]
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        return f"#{digits[:6].lower()}"
    return to_hex(color.opaque())


def coerce_color(value: ColorLike) -> Color:
    if isinstance(value, Color):
        return value
    return parse_color(value)
