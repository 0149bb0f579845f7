"""Nearest-palette-color lookup under a selectable distance metric.

Both metrics treat the three channels equally. Ties always go to the entry
that appears first in the palette, so reordering a palette can only change
the output where two entries are exactly equidistant.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

from bmp_dither.core.errors import InvalidPaletteError
from bmp_dither.core.palette import Palette
from bmp_dither.core.pixels import RGB


class DistanceMode(str, Enum):
    MANHATTAN = "manhattan"  # sum of per-channel absolute differences
    EUCLIDEAN = "euclidean"  # squared Euclidean distance


DEFAULT_DISTANCE = DistanceMode.EUCLIDEAN


def as_palette(palette: Palette | Sequence[Sequence[int]]) -> Palette:
    """Return ``palette`` as a validated Palette.

    Plain sequences go through the same checks as ``Palette`` itself, so a
    bad palette fails here before any pixel is touched.
    """
    if isinstance(palette, Palette):
        return palette
    try:
        colors = tuple(palette)
    except TypeError:
        raise InvalidPaletteError(f"Palette must be a sequence of RGB triples, got {palette!r}") from None
    return Palette(colors)


def palette_array(palette: Palette | Sequence[Sequence[int]]) -> np.ndarray:
    """Validated palette colors as a read-only (n, 3) int64 array."""
    return as_palette(palette).array


def _nearest_index(
    r: float, g: float, b: float, colors: Sequence[RGB], mode: DistanceMode
) -> int:
    best_index = 0
    best_distance = float("inf")
    manhattan = mode == DistanceMode.MANHATTAN
    for index, (R, G, B) in enumerate(colors):
        if manhattan:
            dist = abs(R - r) + abs(G - g) + abs(B - b)
        else:
            dist = (R - r) ** 2 + (G - g) ** 2 + (B - b) ** 2
        # strict comparison keeps the first entry on ties
        if dist < best_distance:
            best_distance = dist
            best_index = index
    return best_index


def distance(a: Sequence[float], b: Sequence[float], mode: DistanceMode = DEFAULT_DISTANCE) -> float:
    """Distance between two colors under ``mode``."""
    mode = DistanceMode(mode)
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    if mode == DistanceMode.MANHATTAN:
        return float(np.abs(diff).sum())
    return float((diff * diff).sum())


def nearest(
    color: Sequence[float],
    palette: Palette | Sequence[Sequence[int]],
    mode: DistanceMode = DEFAULT_DISTANCE,
) -> int:
    """Index of the palette entry closest to ``color``.

    Args:
        color: RGB triple. Floats are accepted since working colors carry
            fractional diffused error.
        palette: a Palette or any sequence of at least two RGB triples.
        mode: distance metric.

    Returns:
        Index into ``palette``; the lowest index wins on ties.

    Raises:
        InvalidPaletteError: if the palette is empty, has a single color,
            or holds channel values outside [0, 255].
    """
    r, g, b = (float(c) for c in color)
    return _nearest_index(r, g, b, as_palette(palette).colors, DistanceMode(mode))


def nearest_color(
    color: Sequence[float],
    palette: Palette | Sequence[Sequence[int]],
    mode: DistanceMode = DEFAULT_DISTANCE,
) -> RGB:
    """The palette entry closest to ``color``."""
    pal = as_palette(palette)
    return pal[nearest(color, pal, mode)]
