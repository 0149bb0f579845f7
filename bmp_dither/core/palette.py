"""Output palettes: named colors, palette parsing and uniform channel grids."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

import numpy as np

from bmp_dither.core.errors import InvalidPaletteError
from bmp_dither.core.pixels import RGB

NAMED_COLORS: dict[str, RGB] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "yellow": (255, 255, 0),
}

MAX_UNIFORM_BITS = 4
MIN_PALETTE_SIZE = 2


def _channel(value: object) -> int:
    try:
        channel = int(value)
    except (TypeError, ValueError):
        raise InvalidPaletteError(f"Invalid channel value {value!r}") from None
    if channel != value or not 0 <= channel <= 255:
        raise InvalidPaletteError(f"Channel value must be an integer in [0, 255], got {value!r}")
    return channel


@dataclass(frozen=True)
class Palette:
    """Ordered sequence of at least two RGB colors.

    Channels must be integers in [0, 255]; floats are only accepted when
    they hold a whole number. Order matters: when two entries are equally
    close to a color, the quantizer picks the one that appears first.
    """

    colors: tuple[RGB, ...]
    _array: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        colors = []
        for color in self.colors:
            try:
                color = tuple(color)
            except TypeError:
                raise InvalidPaletteError(f"Invalid palette color: {color!r}") from None
            if len(color) != 3:
                raise InvalidPaletteError(f"Invalid palette color: {color!r}")
            colors.append(tuple(_channel(c) for c in color))
        if len(colors) < MIN_PALETTE_SIZE:
            raise InvalidPaletteError(
                f"Palette must contain at least {MIN_PALETTE_SIZE} colors, got {len(colors)}"
            )
        arr = np.array(colors, dtype=np.int64)
        arr.setflags(write=False)
        object.__setattr__(self, "colors", tuple(colors))
        object.__setattr__(self, "_array", arr)

    @classmethod
    def from_names(cls, *names: str) -> Palette:
        return cls(tuple(parse_color(name) for name in names))

    @property
    def array(self) -> np.ndarray:
        """Read-only (n, 3) int64 view of the colors."""
        return self._array

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[RGB]:
        return iter(self.colors)

    def __getitem__(self, index: int) -> RGB:
        return self.colors[index]

    def __contains__(self, color: object) -> bool:
        if isinstance(color, (str, bytes)) or not isinstance(color, Sequence):
            return False
        if len(color) != 3:
            return False
        return tuple(int(c) for c in color) in self.colors


def parse_color(token: str) -> RGB:
    """Parse a color name (``red``) or hex triple (``#ff8800`` / ``ff8800``)."""
    text = token.strip().lower()
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]
    hex_digits = text[1:] if text.startswith("#") else text
    if len(hex_digits) == 6:
        try:
            value = int(hex_digits, 16)
        except ValueError:
            pass
        else:
            return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
    known = ", ".join(NAMED_COLORS)
    raise InvalidPaletteError(
        f"Unknown color {token!r}: use one of {known} or a #rrggbb value"
    )


def parse_palette(text: str | Iterable[str]) -> Palette:
    """Build a palette from ``"black,white,#ff0000"`` or a list of tokens."""
    if isinstance(text, str):
        tokens = [t for t in text.split(",") if t.strip()]
    else:
        tokens = [t for t in text if t.strip()]
    if not tokens:
        raise InvalidPaletteError("Palette is empty")
    return Palette(tuple(parse_color(t) for t in tokens))


def uniform_palette(bits: int) -> Palette:
    """Evenly spaced ``2**bits`` levels per channel, every combination.

    ``bits=1`` gives the eight corners of the RGB cube. Colors are ordered
    red-major, so black comes first and white last.
    """
    if not 1 <= bits <= MAX_UNIFORM_BITS:
        raise InvalidPaletteError(
            f"Bits per channel must be between 1 and {MAX_UNIFORM_BITS}, got {bits}"
        )
    steps = (1 << bits) - 1
    levels = [round(i * 255 / steps) for i in range(steps + 1)]
    return Palette(tuple(itertools.product(levels, repeat=3)))


BLACK_AND_WHITE = Palette((NAMED_COLORS["black"], NAMED_COLORS["white"]))
