"""
ASCII Hex Font (.ahf) files: 16-color bitmap fonts.

File format:
    ahf0 h<height> b<baseline> n<num_glyphs>

    def w<width> l<left> r<right>
    <height pixel rows>

    '<char>' w<width> l<left> r<right>
    <height pixel rows>
    ...

The default glyph ("def") is always present and always first. The other
glyphs follow in ascending character order, one per distinct character,
each with a single-quoted character literal such as 'g', '\\n' or
'\\u{2603}'. Every glyph image has the font's glyph height.

left/right are signed pixel offsets from the left edge of the glyph image:
`left` is where the glyph starts, `right` is where the next glyph starts.
The baseline is measured in pixels down from the top of the glyph.
"""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterator, List, Optional

from ahi.errors import GlyphHeightMismatch, UnsupportedVersion, ValueTooLarge
from ahi.image import Image, read_grid, write_grid
from ahi.literals import format_quoted_char, read_quoted_char
from ahi.tokens import MAX_HEADER_VALUE, MAX_SIGNED_32, MIN_SIGNED_32, ByteSource, TokenReader

logger = logging.getLogger(__name__)

AHF_MAGIC = b"ahf"
SUPPORTED_AHF_VERSIONS = (0,)


@dataclass
class Glyph:
    """
    The image for one character, plus its horizontal spacing.

    Attributes:
        image: Glyph pixels; the height must match the font's glyph height
        left: Offset (may be negative) from the image's left edge at which
              the glyph starts
        right: Offset (may be negative) from the image's left edge at which
               the next glyph starts
    """
    image: Image
    left: int = 0
    right: int = 0

    def copy(self) -> "Glyph":
        return Glyph(self.image.copy(), self.left, self.right)


class Font:
    """
    A mapping from characters to glyphs, with a default glyph for characters
    that have none.

    Glyphs are stored by value: the setters keep a copy of the glyph passed
    in, so changing the caller's glyph afterwards does not affect the font.
    Use `font.get_char_glyph(ch)` or `font.default_glyph` to edit a stored
    glyph in place.

    Args:
        glyph_height: Pixel height shared by every glyph in the font
        baseline: Pixels down from the top of the glyph; defaults to
                  glyph_height
    """

    def __init__(self, glyph_height: int, baseline: Optional[int] = None):
        if glyph_height < 0:
            raise ValueError(f"glyph height must be nonnegative, got {glyph_height}")
        self._default = Glyph(Image.new(0, glyph_height), 0, 0)
        self._glyphs: Dict[str, Glyph] = {}
        self.baseline = glyph_height if baseline is None else baseline

    @classmethod
    def with_glyph_height(cls, height: int) -> "Font":
        """New font whose default glyph is a zero-width space of `height` rows."""
        return cls(height)

    @property
    def glyph_height(self) -> int:
        return self._default.image.height

    def _check_glyph(self, glyph: Glyph) -> None:
        if glyph.image.height != self.glyph_height:
            raise GlyphHeightMismatch(self.glyph_height, glyph.image.height)

    @property
    def default_glyph(self) -> Glyph:
        return self._default

    def set_default_glyph(self, glyph: Glyph) -> None:
        self._check_glyph(glyph)
        self._default = glyph.copy()

    def get_char_glyph(self, char: str) -> Optional[Glyph]:
        """Return the glyph for `char`, or None if it falls back to the default."""
        return self._glyphs.get(char)

    def set_char_glyph(self, char: str, glyph: Glyph) -> None:
        """
        Set the glyph for a character.

        Raises:
            GlyphHeightMismatch: If the glyph image height is not glyph_height
        """
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")
        self._check_glyph(glyph)
        self._glyphs[char] = glyph.copy()

    def remove_char_glyph(self, char: str) -> None:
        """Drop the glyph for `char`; the default glyph is used from now on."""
        self._glyphs.pop(char, None)

    def chars(self) -> List[str]:
        """Characters that have their own glyph, in ascending order."""
        return sorted(self._glyphs)

    def __getitem__(self, char: str) -> Glyph:
        return self._glyphs.get(char, self._default)

    def __contains__(self, char) -> bool:
        return char in self._glyphs

    def __len__(self) -> int:
        return len(self._glyphs)

    def __iter__(self) -> Iterator[str]:
        return iter(self.chars())

    def copy(self) -> "Font":
        font = Font(self.glyph_height, self.baseline)
        font._default = self._default.copy()
        font._glyphs = {char: glyph.copy() for char, glyph in self._glyphs.items()}
        return font

    def __eq__(self, other):
        if not isinstance(other, Font):
            return NotImplemented
        return (
            self.baseline == other.baseline
            and self._default == other._default
            and self._glyphs == other._glyphs
        )

    def __repr__(self) -> str:
        return f"Font(glyph_height={self.glyph_height}, baseline={self.baseline}, glyphs={len(self)})"

    @classmethod
    def read(cls, source: ByteSource) -> "Font":
        return decode_font(source)

    def write(self, sink: BinaryIO) -> None:
        encode_font(self, sink)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Font":
        return decode_font(data)

    def to_bytes(self) -> bytes:
        out = io.BytesIO()
        encode_font(self, out)
        return out.getvalue()


def _read_glyph(reader: TokenReader, height: int) -> Glyph:
    reader.read_exactly(b"w")
    width = reader.read_decimal_uint(b" ")
    reader.read_exactly(b"l")
    left = reader.read_decimal_int(b" ", max_value=MAX_SIGNED_32, min_value=MIN_SIGNED_32)
    reader.read_exactly(b"r")
    right = reader.read_decimal_int(b"\n", max_value=MAX_SIGNED_32, min_value=MIN_SIGNED_32)
    return Glyph(Image(read_grid(reader, width, height)), left, right)


def decode_font(source: ByteSource) -> Font:
    """
    Read a font from bytes or a binary stream.

    Raises:
        UnsupportedVersion: For any version other than 0
        AhiError: For any other grammar violation (see ahi.errors)

    A character defined more than once keeps its last definition.
    """
    reader = TokenReader(source)
    reader.read_exactly(AHF_MAGIC)
    version_offset = reader.offset
    version = reader.read_decimal_uint(b" ")
    if version not in SUPPORTED_AHF_VERSIONS:
        raise UnsupportedVersion("AHF", version, version_offset)
    reader.read_exactly(b"h")
    height = reader.read_decimal_uint(b" ")
    reader.read_exactly(b"b")
    baseline = reader.read_decimal_int(b" ", max_value=MAX_SIGNED_32, min_value=MIN_SIGNED_32)
    reader.read_exactly(b"n")
    num_glyphs = reader.read_decimal_uint(b"\n")
    logger.debug("AHF v%d header: height=%d baseline=%d glyphs=%d", version, height, baseline, num_glyphs)

    font = Font(height, baseline)
    reader.read_exactly(b"\ndef ")
    font._default = _read_glyph(reader, height)

    for _ in range(num_glyphs):
        reader.read_exactly(b"\n")
        char_offset = reader.offset
        char = read_quoted_char(reader)
        if char in font._glyphs:
            logger.debug("Glyph %r redefined at byte %d; keeping the later one", char, char_offset)
        reader.read_exactly(b" ")
        font._glyphs[char] = _read_glyph(reader, height)
    return font


def _check_signed_32(value: int) -> None:
    if value > MAX_SIGNED_32:
        raise ValueTooLarge(value, MAX_SIGNED_32)
    if value < MIN_SIGNED_32:
        raise ValueTooLarge(value, MIN_SIGNED_32)


def _glyph_subheader(glyph: Glyph) -> bytes:
    width = glyph.image.width
    if width > MAX_HEADER_VALUE:
        raise ValueTooLarge(width, MAX_HEADER_VALUE)
    for edge in (glyph.left, glyph.right):
        _check_signed_32(edge)
    return f"w{width} l{glyph.left} r{glyph.right}\n".encode("ascii")


def encode_font(font: Font, sink: BinaryIO) -> None:
    """
    Write a font to a binary sink.

    Raises:
        GlyphHeightMismatch: If a glyph image was resized after being added
        ValueTooLarge: If the height, glyph count or a width exceeds 0xFFFF

    Nothing is written to `sink` when an error is raised.
    """
    height = font.glyph_height
    for value in (height, len(font)):
        if value > MAX_HEADER_VALUE:
            raise ValueTooLarge(value, MAX_HEADER_VALUE)
    _check_signed_32(font.baseline)

    out = io.BytesIO()
    out.write(f"ahf0 h{height} b{font.baseline} n{len(font)}\n".encode("ascii"))
    out.write(b"\ndef ")
    out.write(_glyph_subheader(font.default_glyph))
    out.write(write_grid(font.default_glyph.image.pixels))
    for char in font.chars():
        glyph = font[char]
        if glyph.image.height != height:
            raise GlyphHeightMismatch(height, glyph.image.height)
        out.write(b"\n" + format_quoted_char(char).encode("ascii") + b" ")
        out.write(_glyph_subheader(glyph))
        out.write(write_grid(glyph.image.pixels))
    sink.write(out.getvalue())
