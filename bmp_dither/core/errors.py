"""Exception types raised by the bitmap codec and the dithering engine."""

from __future__ import annotations


class BitmapDitherError(Exception):
    """Base class for every error raised by bmp_dither."""


class FormatError(BitmapDitherError, ValueError):
    """Malformed or truncated bitmap data (bad signature, bad sizes)."""


class UnsupportedFormatError(BitmapDitherError, ValueError):
    """Well-formed bitmap using a bit depth or compression we don't handle."""


class InvalidPaletteError(BitmapDitherError, ValueError):
    """Empty palette, unknown color name, or out-of-range channel value."""
