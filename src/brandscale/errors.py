from __future__ import annotations

from typing import Optional

MAX_BRAND_COLORS = 7


class BrandscaleError(Exception):
    """Root of every error raised by brandscale."""


class InvalidColor(BrandscaleError, ValueError):
    """
    A color string could not be read.

    Non-fatal at the batch level: the caller decides whether to abort or ask
    for another value. ``suggestion`` carries a corrective hint when one is
    known (e.g. a missing ``#`` prefix).
    """

    def __init__(self, color: str, reason: str, suggestion: Optional[str] = None):
        self.color = color
        self.reason = reason
        self.suggestion = suggestion
        msg = f"Invalid color {color!r}: {reason}"
        if suggestion:
            msg += f" ({suggestion})"
        super().__init__(msg)


class EmptyColor(InvalidColor):
    pass


class MissingHashPrefix(InvalidColor):
    pass


class InvalidHexCharacters(InvalidColor):
    pass


class InvalidHexLength(InvalidColor):
    pass


class UnrecognizedColorFormat(InvalidColor):
    pass


class EmptyInput(BrandscaleError, ValueError):
    def __init__(self):
        super().__init__("At least one brand color is required")


class TooManyInputs(BrandscaleError, ValueError):
    def __init__(self, count: int, limit: int = MAX_BRAND_COLORS):
        self.count = count
        self.limit = limit
        super().__init__(f"Got {count} brand colors; at most {limit} are supported")


class InvalidMode(BrandscaleError, ValueError):
    def __init__(self, mode: str, message: Optional[str] = None):
        self.mode = mode
        super().__init__(
            message or f"Unknown appearance mode {mode!r} (expected 'light' or 'dark')"
        )


class ConfigError(BrandscaleError):
    pass
