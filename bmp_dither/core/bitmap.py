"""Uncompressed 24-bit Windows bitmap (BMP) decoding and encoding.

Layout handled here:

    offset  size  field
    0       2     signature "BM"
    2       4     file size
    6       4     reserved
    10      4     pixel data offset
    14      4     info header size (40 for BITMAPINFOHEADER, 108/124 for V4/V5)
    18      4     width (signed)
    22      4     height (signed, negative = rows stored top-down)
    26      2     color planes (always 1)
    28      2     bits per pixel
    30      4     compression
    34      4     image size (may be 0 for uncompressed data)
    38      4     horizontal resolution, pixels per metre
    42      4     vertical resolution, pixels per metre
    46      4     colors used
    50      4     important colors

Pixel rows are B,G,R triples padded to a multiple of 4 bytes. Decoding always
produces a top-to-bottom RGB PixelBuffer; encoding always writes bottom-up rows.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

import numpy as np

from bmp_dither.core.errors import FormatError, UnsupportedFormatError
from bmp_dither.core.pixels import PixelBuffer

logger = logging.getLogger(__name__)

SIGNATURE = b"BM"
FILE_HEADER = struct.Struct("<2sIHHI")
INFO_HEADER = struct.Struct("<IiiHHIIiiII")
FILE_HEADER_SIZE = FILE_HEADER.size  # 14
INFO_HEADER_SIZE = INFO_HEADER.size  # 40
PIXEL_DATA_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE

SUPPORTED_BITS_PER_PIXEL = 24
DEFAULT_PIXELS_PER_METER = 2835  # 72 DPI


class Compression(IntEnum):
    RGB = 0
    RLE8 = 1
    RLE4 = 2
    BITFIELDS = 3
    JPEG = 4
    PNG = 5
    ALPHABITFIELDS = 6
    CMYK = 11
    CMYKRLE8 = 12
    CMYKRLE4 = 13


def _compression_name(value: int) -> str:
    try:
        return Compression(value).name
    except ValueError:
        return f"unknown ({value})"


def row_stride(width: int, bits_per_pixel: int = SUPPORTED_BITS_PER_PIXEL) -> int:
    """Bytes per stored row, including padding to a 4-byte boundary."""
    return ((width * bits_per_pixel + 31) // 32) * 4


@dataclass(frozen=True)
class BitmapHeader:
    """Decoded bitmap metadata. ``height`` is always positive."""

    file_size: int
    data_offset: int
    header_size: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int
    image_size: int
    top_down: bool = False
    x_pixels_per_meter: int = DEFAULT_PIXELS_PER_METER
    y_pixels_per_meter: int = DEFAULT_PIXELS_PER_METER

    @property
    def row_stride(self) -> int:
        return row_stride(self.width, self.bits_per_pixel)

    @property
    def pixel_data_size(self) -> int:
        return self.row_stride * self.height

    def as_dict(self) -> dict[str, int | bool | str]:
        return {
            "file_size": self.file_size,
            "data_offset": self.data_offset,
            "header_size": self.header_size,
            "width": self.width,
            "height": self.height,
            "planes": self.planes,
            "bits_per_pixel": self.bits_per_pixel,
            "compression": _compression_name(self.compression),
            "image_size": self.image_size,
            "top_down": self.top_down,
            "x_pixels_per_meter": self.x_pixels_per_meter,
            "y_pixels_per_meter": self.y_pixels_per_meter,
        }


def _unpack(fmt: struct.Struct, data: bytes, offset: int, what: str) -> tuple:
    """``fmt.unpack_from`` that reports truncation as a FormatError."""
    end = offset + fmt.size
    if len(data) < end:
        raise FormatError(
            f"Truncated {what}: need {end} bytes, got {len(data)} "
            f"(missing {end - len(data)})"
        )
    return fmt.unpack_from(data, offset)


def decode_header(data: bytes) -> BitmapHeader:
    """Parse and validate the file and info headers.

    Raises:
        FormatError: bad signature, truncated data or impossible sizes.
        UnsupportedFormatError: a header version, bit depth or compression
            other than uncompressed 24-bit BITMAPINFOHEADER (or newer).
    """
    signature, file_size, _, _, data_offset = _unpack(FILE_HEADER, data, 0, "file header")
    if signature != SIGNATURE:
        raise FormatError(f"Bad signature {signature!r}, expected {SIGNATURE!r}")

    (header_size,) = _unpack(struct.Struct("<I"), data, FILE_HEADER_SIZE, "info header")
    if len(data) < FILE_HEADER_SIZE + header_size:
        raise FormatError(
            f"Truncated info header: declared {header_size} bytes, "
            f"{len(data) - FILE_HEADER_SIZE} available"
        )
    if header_size < INFO_HEADER_SIZE:
        raise UnsupportedFormatError(
            f"Unsupported info header size {header_size} (need {INFO_HEADER_SIZE} or more)"
        )

    (
        _,
        width,
        raw_height,
        planes,
        bits_per_pixel,
        compression,
        image_size,
        x_ppm,
        y_ppm,
        _,
        _,
    ) = _unpack(INFO_HEADER, data, FILE_HEADER_SIZE, "info header")

    if width <= 0 or raw_height == 0:
        raise FormatError(f"Invalid dimensions {width}x{raw_height}")
    if planes != 1:
        raise FormatError(f"Invalid color plane count {planes}, expected 1")
    if bits_per_pixel != SUPPORTED_BITS_PER_PIXEL:
        raise UnsupportedFormatError(
            f"Unsupported bit depth {bits_per_pixel}, only "
            f"{SUPPORTED_BITS_PER_PIXEL}-bit bitmaps are handled"
        )
    if compression != Compression.RGB:
        raise UnsupportedFormatError(
            f"Unsupported compression {_compression_name(compression)}, "
            "only uncompressed (RGB) bitmaps are handled"
        )
    if file_size > len(data):
        raise FormatError(
            f"Truncated file: header declares {file_size} bytes, got {len(data)}"
        )
    if data_offset < FILE_HEADER_SIZE + header_size:
        raise FormatError(
            f"Pixel data offset {data_offset} overlaps the headers "
            f"({FILE_HEADER_SIZE + header_size} bytes)"
        )

    header = BitmapHeader(
        file_size=file_size,
        data_offset=data_offset,
        header_size=header_size,
        width=width,
        height=abs(raw_height),
        planes=planes,
        bits_per_pixel=bits_per_pixel,
        compression=compression,
        image_size=image_size,
        top_down=raw_height < 0,
        x_pixels_per_meter=x_ppm,
        y_pixels_per_meter=y_ppm,
    )
    end = header.data_offset + header.pixel_data_size
    if len(data) < end:
        raise FormatError(
            f"Truncated pixel data: need {end} bytes, got {len(data)} "
            f"(missing {end - len(data)})"
        )
    return header


def decode(data: bytes) -> tuple[BitmapHeader, PixelBuffer]:
    """Decode BMP bytes into a header and a top-to-bottom RGB PixelBuffer."""
    data = bytes(data)
    header = decode_header(data)
    w, h, stride = header.width, header.height, header.row_stride

    rows = np.frombuffer(
        data, dtype=np.uint8, count=stride * h, offset=header.data_offset
    ).reshape(h, stride)
    # Strip row padding, split into triples, BGR -> RGB
    rgb = rows[:, : w * 3].reshape(h, w, 3)[:, :, ::-1]
    if not header.top_down:
        rgb = rgb[::-1]

    logger.debug("Decoded bitmap header %s", header)
    return header, PixelBuffer.from_array(rgb)


def header_for(buffer: PixelBuffer) -> BitmapHeader:
    """The header ``encode`` writes for ``buffer``."""
    image_size = row_stride(buffer.width) * buffer.height
    return BitmapHeader(
        file_size=PIXEL_DATA_OFFSET + image_size,
        data_offset=PIXEL_DATA_OFFSET,
        header_size=INFO_HEADER_SIZE,
        width=buffer.width,
        height=buffer.height,
        planes=1,
        bits_per_pixel=SUPPORTED_BITS_PER_PIXEL,
        compression=Compression.RGB,
        image_size=image_size,
    )


def encode(buffer: PixelBuffer) -> bytes:
    """Encode ``buffer`` as an uncompressed, bottom-up 24-bit BMP."""
    header = header_for(buffer)
    w, h, stride = header.width, header.height, header.row_stride

    file_header = FILE_HEADER.pack(
        SIGNATURE, header.file_size, 0, 0, header.data_offset
    )
    info_header = INFO_HEADER.pack(
        header.header_size,
        header.width,
        header.height,
        header.planes,
        header.bits_per_pixel,
        header.compression,
        header.image_size,
        header.x_pixels_per_meter,
        header.y_pixels_per_meter,
        0,
        0,
    )

    rows = np.zeros((h, stride), dtype=np.uint8)
    rows[:, : w * 3] = buffer.pixels[::-1, :, ::-1].reshape(h, w * 3)
    return file_header + info_header + rows.tobytes()


def read_bitmap(path: str | Path) -> tuple[BitmapHeader, PixelBuffer]:
    """Read and decode a BMP file."""
    return decode(Path(path).read_bytes())


def write_bitmap(path: str | Path, buffer: PixelBuffer) -> int:
    """Encode ``buffer`` and write it to ``path``. Returns bytes written.

    Encoding completes before the file is opened, so a failure never leaves
    a partial file behind.
    """
    payload = encode(buffer)
    Path(path).write_bytes(payload)
    return len(payload)
