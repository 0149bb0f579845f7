"""Floyd-Steinberg palette dithering for uncompressed 24-bit BMP files."""

from bmp_dither.core.bitmap import BitmapHeader, decode, encode, read_bitmap, write_bitmap
from bmp_dither.core.dither import floyd_steinberg
from bmp_dither.core.errors import (
    BitmapDitherError,
    FormatError,
    InvalidPaletteError,
    UnsupportedFormatError,
)
from bmp_dither.core.palette import Palette, parse_palette, uniform_palette
from bmp_dither.core.pipeline import dither_bytes, dither_file
from bmp_dither.core.pixels import PixelBuffer
from bmp_dither.core.quantize import DistanceMode, nearest

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BitmapHeader",
    "BitmapDitherError",
    "DistanceMode",
    "FormatError",
    "InvalidPaletteError",
    "Palette",
    "PixelBuffer",
    "UnsupportedFormatError",
    "decode",
    "dither_bytes",
    "dither_file",
    "encode",
    "floyd_steinberg",
    "nearest",
    "parse_palette",
    "read_bitmap",
    "uniform_palette",
    "write_bitmap",
]
