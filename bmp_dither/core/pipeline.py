"""Decode -> dither -> encode, on bytes or on files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from bmp_dither.core.bitmap import decode, encode
from bmp_dither.core.dither import floyd_steinberg
from bmp_dither.core.palette import Palette
from bmp_dither.core.quantize import DEFAULT_DISTANCE, DistanceMode, as_palette

logger = logging.getLogger(__name__)


@dataclass
class DitherResult:
    """Summary of a completed file conversion."""

    input: Path
    output: Path
    width: int
    height: int
    bytes_written: int
    palette_size: int
    distance: DistanceMode
    serpentine: bool


def dither_bytes(
    data: bytes,
    palette: Palette | Sequence[Sequence[int]],
    distance: DistanceMode = DEFAULT_DISTANCE,
    serpentine: bool = False,
) -> bytes:
    """Dither BMP ``data`` and return the re-encoded BMP bytes."""
    palette = as_palette(palette)  # fail on a bad palette before decoding
    _, buffer = decode(data)
    floyd_steinberg(buffer, palette, distance, serpentine)
    return encode(buffer)


def dither_file(
    input_path: str | Path,
    output_path: str | Path,
    palette: Palette | Sequence[Sequence[int]],
    distance: DistanceMode = DEFAULT_DISTANCE,
    serpentine: bool = False,
) -> DitherResult:
    """Dither a BMP file into ``output_path``.

    The output file is only written after the whole image has been dithered
    and encoded.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    palette = as_palette(palette)

    header, buffer = decode(input_path.read_bytes())
    logger.info(
        "Dithering %s (%dx%d) with %d colors", input_path, header.width, header.height, len(palette)
    )
    floyd_steinberg(buffer, palette, distance, serpentine)
    payload = encode(buffer)
    output_path.write_bytes(payload)

    return DitherResult(
        input=input_path,
        output=output_path,
        width=buffer.width,
        height=buffer.height,
        bytes_written=len(payload),
        palette_size=len(palette),
        distance=DistanceMode(distance),
        serpentine=serpentine,
    )
