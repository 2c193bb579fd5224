"""Tests for font.py - AHF fonts and glyphs."""

import io

import pytest

from ahi.errors import (
    EmptyCharLiteral,
    GlyphHeightMismatch,
    InvalidPixelCharacter,
    UnexpectedToken,
    UnsupportedVersion,
    ValueTooLarge,
)
from ahi.font import Font, Glyph, decode_font, encode_font
from ahi.image import Image

FONT = (
    b"ahf0 h3 b2 n2\n"
    b"\n"
    b"def w3 l0 r4\n"
    b"101\n"
    b"010\n"
    b"101\n"
    b"\n"
    b"'|' w1 l0 r2\n"
    b"1\n"
    b"1\n"
    b"1\n"
    b"\n"
    b"'\\u{2603}' w2 l0 r4\n"
    b"11\n"
    b"11\n"
    b"00\n"
)


def _build_font():
    font = Font.with_glyph_height(3)
    font.baseline = 2
    font.set_default_glyph(Glyph(Image([[1, 0, 1], [0, 1, 0], [1, 0, 1]]), 0, 4))
    # inserted out of order on purpose; output is sorted by character
    font.set_char_glyph("☃", Glyph(Image([[1, 1], [1, 1], [0, 0]]), 0, 4))
    font.set_char_glyph("|", Glyph(Image([[1], [1], [1]]), 0, 2))
    return font


class TestFontModel:
    """Test the Font class."""

    def test_with_glyph_height(self):
        font = Font.with_glyph_height(5)
        assert font.glyph_height == 5
        assert font.baseline == 5
        assert font.default_glyph.image.size == (0, 5)
        assert len(font) == 0

    def test_lookup_falls_back_to_default(self):
        font = _build_font()
        assert font["|"].image.width == 1
        assert font["x"] is font.default_glyph
        assert font.get_char_glyph("x") is None
        assert "|" in font and "x" not in font

    def test_chars_sorted(self):
        assert _build_font().chars() == ["|", "☃"]
        assert list(_build_font()) == ["|", "☃"]

    def test_height_mismatch(self):
        font = Font.with_glyph_height(3)
        with pytest.raises(GlyphHeightMismatch, match="glyph height must be 3"):
            font.set_char_glyph("a", Glyph(Image.new(2, 2)))
        with pytest.raises(GlyphHeightMismatch):
            font.set_default_glyph(Glyph(Image.new(2, 4)))
        assert "a" not in font

    def test_glyphs_stored_by_value(self):
        """Changing a glyph after storing it does not change the font."""
        font = Font.with_glyph_height(1)
        glyph = Glyph(Image([[1]]), 0, 1)
        font.set_char_glyph("a", glyph)
        font.set_char_glyph("b", glyph)
        glyph.image[0, 0] = 9
        glyph.right = 7
        font.get_char_glyph("a").image[0, 0] = 2
        assert font["a"].image[0, 0] == 2
        assert font["b"].image[0, 0] == 1
        assert font["b"].right == 1

    def test_remove(self):
        font = _build_font()
        font.remove_char_glyph("|")
        font.remove_char_glyph("never-set")
        assert font.chars() == ["☃"]
        assert font["|"] is font.default_glyph

    def test_copy(self):
        font = _build_font()
        clone = font.copy()
        assert clone == font
        clone["|"].left = -1
        assert font["|"].left == 0


class TestFontRead:
    """Test decoding AHF documents."""

    def test_read(self):
        font = decode_font(FONT)
        assert font.glyph_height == 3
        assert font.baseline == 2
        assert font.default_glyph.image.width == 3
        assert font.default_glyph.left == 0
        assert font.default_glyph.right == 4
        assert font["|"].image.width == 1
        assert len(font.chars()) == 2
        assert font["☃"].image.pixels.tolist() == [[1, 1], [1, 1], [0, 0]]

    def test_read_stream(self):
        assert Font.read(io.BytesIO(FONT)) == decode_font(FONT)

    def test_negative_edges_and_baseline(self):
        data = b"ahf0 h1 b-3 n1\n\ndef w0 l0 r0\n\n\n'a' w1 l-2 r-100000\n1\n"
        font = decode_font(data)
        assert font.baseline == -3
        assert (font["a"].left, font["a"].right) == (-2, -100000)

    def test_unsupported_version(self):
        with pytest.raises(UnsupportedVersion, match="unsupported AHF version: 1"):
            decode_font(FONT.replace(b"ahf0", b"ahf1", 1))

    def test_missing_default(self):
        with pytest.raises(UnexpectedToken):
            decode_font(b"ahf0 h0 b0 n0\n\n'a' w0 l0 r0\n")

    def test_signed_32_extremes(self):
        data = b"ahf0 h0 b-2147483648 n1\n\ndef w0 l0 r0\n\n'a' w0 l-2147483648 r2147483647\n"
        font = decode_font(data)
        assert font.baseline == -2**31
        assert (font["a"].left, font["a"].right) == (-2**31, 2**31 - 1)
        assert font.to_bytes() == data

    def test_signed_32_overflow(self):
        with pytest.raises(ValueTooLarge):
            decode_font(b"ahf0 h0 b-2147483649 n0\n\ndef w0 l0 r0\n")
        with pytest.raises(ValueTooLarge):
            decode_font(b"ahf0 h0 b0 n0\n\ndef w0 l0 r2147483648\n")

    def test_duplicate_glyph_last_wins(self):
        data = b"ahf0 h0 b0 n2\n\ndef w0 l0 r0\n\n'a' w0 l0 r1\n\n'a' w0 l0 r5\n"
        font = decode_font(data)
        assert len(font) == 1
        assert font["a"].right == 5

    def test_empty_char(self):
        with pytest.raises(EmptyCharLiteral):
            decode_font(b"ahf0 h0 b0 n1\n\ndef w0 l0 r0\n\n'' w0 l0 r0\n")

    def test_bad_pixel(self):
        with pytest.raises(InvalidPixelCharacter):
            decode_font(FONT.replace(b"101\n010", b"101\n0x0", 1))


class TestFontWrite:
    """Test encoding AHF documents."""

    def test_write(self):
        assert _build_font().to_bytes() == FONT

    def test_round_trip(self):
        font = _build_font()
        decoded = decode_font(font.to_bytes())
        assert decoded == font
        assert decoded.baseline == 2
        assert decoded["|"].right == 2

    def test_empty_font(self):
        assert Font.with_glyph_height(0).to_bytes() == b"ahf0 h0 b0 n0\n\ndef w0 l0 r0\n"

    def test_escaped_chars(self):
        font = Font.with_glyph_height(0)
        for char in ("'", "\\", "\n"):
            font.set_char_glyph(char, Glyph(Image.new(0, 0)))
        data = font.to_bytes()
        assert b"'\\n' " in data and b"'\\'' " in data and b"'\\\\' " in data
        assert decode_font(data) == font

    def test_signed_32_bounds(self):
        font = Font.with_glyph_height(0)
        font.baseline = -2**31
        font.set_char_glyph("a", Glyph(Image.new(0, 0), -2**31, 2**31 - 1))
        assert b"b-2147483648 " in font.to_bytes()
        font.baseline = -2**31 - 1
        with pytest.raises(ValueTooLarge):
            font.to_bytes()
        font.baseline = 0
        font.get_char_glyph("a").left = -2**31 - 1
        with pytest.raises(ValueTooLarge):
            font.to_bytes()
        font.get_char_glyph("a").left = 0
        font.get_char_glyph("a").right = 2**31
        with pytest.raises(ValueTooLarge):
            font.to_bytes()

    def test_resized_glyph_rejected(self):
        """A glyph image swapped for one of another height fails on write."""
        font = _build_font()
        font.get_char_glyph("|").image = Image.new(1, 2)
        out = io.BytesIO()
        with pytest.raises(GlyphHeightMismatch):
            encode_font(font, out)
        assert out.getvalue() == b""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
