"""Floyd-Steinberg error diffusion dithering against a fixed palette."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from bmp_dither.core.palette import Palette
from bmp_dither.core.pixels import PixelBuffer
from bmp_dither.core.quantize import DEFAULT_DISTANCE, DistanceMode, _nearest_index, as_palette

logger = logging.getLogger(__name__)

# (dx, dy, weight) relative to the current pixel, for a left-to-right walk.
FLOYD_STEINBERG_KERNEL: tuple[tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


def floyd_steinberg(
    buffer: PixelBuffer,
    palette: Palette | Sequence[Sequence[int]],
    distance: DistanceMode = DEFAULT_DISTANCE,
    serpentine: bool = False,
) -> None:
    """Dither ``buffer`` in place so every pixel becomes a palette color.

    The scan is inherently sequential, so the per-pixel work runs on plain
    Python floats rather than numpy scalars. Expect a few seconds per
    megapixel; palettes with many entries cost proportionally more.

    Args:
        buffer: pixels to dither, modified in place.
        palette: output colors. Validated before any pixel is written.
        distance: metric used to pick the nearest palette entry.
        serpentine: walk odd rows right to left (mirroring the kernel)
            instead of the default left-to-right raster order.

    Raises:
        InvalidPaletteError: if the palette is invalid.
    """
    colors = as_palette(palette).colors
    mode = DistanceMode(distance)
    pixels = buffer.pixels
    h, w = pixels.shape[:2]
    # stored value plus diffused error; error accumulates unclamped
    work = pixels.astype(np.float64).tolist()
    out: list[list[tuple[int, int, int]]] = [[(0, 0, 0)] * w for _ in range(h)]
    lookup: dict[tuple[float, float, float], int] = {}

    for y in range(h):
        flip = serpentine and y % 2 == 1
        x_range = range(w - 1, -1, -1) if flip else range(w)
        for x in x_range:
            r, g, b = work[y][x]
            r = min(255.0, max(0.0, r))
            g = min(255.0, max(0.0, g))
            b = min(255.0, max(0.0, b))
            key = (r, g, b)
            index = lookup.get(key)
            if index is None:
                index = _nearest_index(r, g, b, colors, mode)
                lookup[key] = index
            new = colors[index]
            out[y][x] = new
            err_r, err_g, err_b = r - new[0], g - new[1], b - new[2]

            for dx, dy, weight in FLOYD_STEINBERG_KERNEL:
                nx = x - dx if flip else x + dx
                ny = y + dy
                if 0 <= nx < w and ny < h:
                    target = work[ny][nx]
                    target[0] += err_r * weight
                    target[1] += err_g * weight
                    target[2] += err_b * weight

    pixels[...] = np.array(out, dtype=np.uint8)

    logger.debug(
        "Dithered %dx%d buffer against %d colors (%s, %s)",
        w,
        h,
        len(colors),
        mode.value,
        "serpentine" if serpentine else "raster",
    )
