"""Addressable RGB pixel grid.

Rows are stored top to bottom (row 0 is the visual top), columns left to
right. The codec takes care of the bitmap's bottom-up storage.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

import numpy as np

RGB = tuple[int, int, int]


class PixelBuffer:
    """A ``width x height`` grid of 8-bit RGB triples backed by numpy."""

    def __init__(self, width: int, height: int, fill: Sequence[int] = (0, 0, 0)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")
        _check_color(fill)
        self._pixels = np.empty((height, width, 3), dtype=np.uint8)
        self._pixels[:, :] = fill

    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """Build a buffer from an array of shape (height, width, 3).

        The array is copied; values must already be in [0, 255].
        """
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected shape (height, width, 3), got {arr.shape}")
        if arr.size and (arr.min() < 0 or arr.max() > 255):
            raise ValueError("Channel values must be in [0, 255]")
        height, width = arr.shape[:2]
        buf = cls(width, height)
        buf._pixels[...] = arr.astype(np.uint8)
        return buf

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Sequence[int]]]) -> PixelBuffer:
        """Build a buffer from nested rows of RGB triples, top row first."""
        return cls.from_array(np.array([list(row) for row in rows], dtype=np.int64))

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """The live (height, width, 3) uint8 array. Writes go straight through."""
        return self._pixels

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer"
            )

    def get(self, x: int, y: int) -> RGB:
        self._check_bounds(x, y)
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def set(self, x: int, y: int, color: Sequence[int]) -> None:
        self._check_bounds(x, y)
        _check_color(color)
        self._pixels[y, x] = color

    def rows(self) -> Iterator[list[RGB]]:
        """Yield each row, top to bottom, as a list of RGB tuples."""
        for row in self._pixels:
            yield [(int(r), int(g), int(b)) for r, g, b in row]

    def colors(self) -> set[RGB]:
        """Distinct colors present in the buffer."""
        flat = np.unique(self._pixels.reshape(-1, 3), axis=0)
        return {(int(r), int(g), int(b)) for r, g, b in flat}

    def to_array(self) -> np.ndarray:
        return self._pixels.copy()

    def copy(self) -> PixelBuffer:
        return PixelBuffer.from_array(self._pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def _check_color(color: Sequence[int]) -> None:
    if len(color) != 3:
        raise ValueError(f"Expected an RGB triple, got {color!r}")
    for channel in color:
        if not 0 <= int(channel) <= 255:
            raise ValueError(f"Channel value out of range [0, 255]: {color!r}")
