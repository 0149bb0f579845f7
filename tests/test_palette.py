"""Tests for palette construction and parsing."""

import pytest

from bmp_dither.core.errors import InvalidPaletteError
from bmp_dither.core.palette import (
    NAMED_COLORS,
    Palette,
    parse_color,
    parse_palette,
    uniform_palette,
)


class TestPalette:
    def test_preserves_order(self):
        palette = Palette(((255, 0, 0), (0, 0, 0)))
        assert list(palette) == [(255, 0, 0), (0, 0, 0)]
        assert palette[0] == (255, 0, 0)
        assert len(palette) == 2

    def test_empty_rejected(self):
        with pytest.raises(InvalidPaletteError):
            Palette(())

    def test_single_color_rejected(self):
        with pytest.raises(InvalidPaletteError, match="at least 2"):
            Palette(((0, 0, 0),))

    @pytest.mark.parametrize("channel", [0.5, 200.7, "12", None])
    def test_non_integer_channel_rejected(self, channel):
        with pytest.raises(InvalidPaletteError):
            Palette(((0, 0, 0), (channel, 0, 0)))

    def test_whole_float_channels_accepted(self):
        assert Palette(((0.0, 0, 0), (255.0, 255, 255))).colors == ((0, 0, 0), (255, 255, 255))

    @pytest.mark.parametrize("color", [(256, 0, 0), (-1, 0, 0), (1, 2)])
    def test_bad_color_rejected(self, color):
        with pytest.raises(InvalidPaletteError):
            Palette((color,))

    def test_contains(self):
        palette = Palette.from_names("black", "white")
        assert (0, 0, 0) in palette
        assert [255, 255, 255] in palette
        assert (1, 1, 1) not in palette
        assert "black" not in palette

    def test_array_is_read_only(self):
        palette = Palette.from_names("red", "blue")
        assert palette.array.shape == (2, 3)
        with pytest.raises(ValueError):
            palette.array[0, 0] = 1

    def test_hashable_and_comparable(self):
        assert Palette.from_names("red", "blue") == Palette(((255, 0, 0), (0, 0, 255)))
        assert len({Palette.from_names("red", "blue"), Palette.from_names("red", "blue")}) == 1


class TestParseColor:
    @pytest.mark.parametrize("name", list(NAMED_COLORS))
    def test_names(self, name):
        assert parse_color(name) == NAMED_COLORS[name]

    def test_case_and_whitespace(self):
        assert parse_color("  Red ") == (255, 0, 0)

    @pytest.mark.parametrize("token", ["#ff8800", "FF8800"])
    def test_hex(self, token):
        assert parse_color(token) == (255, 136, 0)

    @pytest.mark.parametrize("token", ["orange", "#ff88", "#gg0000", ""])
    def test_unknown(self, token):
        with pytest.raises(InvalidPaletteError):
            parse_color(token)


class TestParsePalette:
    def test_comma_separated(self):
        palette = parse_palette("white, black,#0000ff")
        assert palette.colors == ((255, 255, 255), (0, 0, 0), (0, 0, 255))

    def test_list_of_tokens(self):
        assert parse_palette(["red", "green"]).colors == ((255, 0, 0), (0, 255, 0))

    @pytest.mark.parametrize("text", ["", " , ", []])
    def test_empty(self, text):
        with pytest.raises(InvalidPaletteError):
            parse_palette(text)


class TestUniformPalette:
    def test_one_bit_is_cube_corners(self):
        palette = uniform_palette(1)
        assert len(palette) == 8
        assert palette[0] == (0, 0, 0)
        assert palette[-1] == (255, 255, 255)
        assert (255, 0, 255) in palette

    def test_levels(self):
        palette = uniform_palette(2)
        assert len(palette) == 64
        assert {c[0] for c in palette} == {0, 85, 170, 255}

    @pytest.mark.parametrize("bits", [0, 5, -1])
    def test_out_of_range(self, bits):
        with pytest.raises(InvalidPaletteError):
            uniform_palette(bits)
