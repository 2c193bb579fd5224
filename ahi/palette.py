"""
16-color RGBA palettes and their one-line text encoding.

A palette is written as 16 fields separated by ';' and ended by a newline.
Each field holds 0-8 hex digits, and the digit count selects the layout:

    digits  meaning
    0       transparent (0, 0, 0, 0)
    1       gray shorthand, opaque        "7"        -> (0x77, 0x77, 0x77, 0xFF)
    2       gray, opaque                  "7F"       -> (0x7F, 0x7F, 0x7F, 0xFF)
    3       RGB shorthand, opaque         "F00"      -> (0xFF, 0x00, 0x00, 0xFF)
    4       RGB + alpha shorthand         "F008"     -> (0xFF, 0x00, 0x00, 0x88)
    5       RGB shorthand + alpha         "F0080"    -> (0xFF, 0x00, 0x00, 0x80)
    6       RGB, opaque                   "7F0000"   -> (0x7F, 0x00, 0x00, 0xFF)
    7       RGB + alpha shorthand         "7F00008"  -> (0x7F, 0x00, 0x00, 0x88)
    8       RGB + alpha                   "7F000080" -> (0x7F, 0x00, 0x00, 0x80)

Digits are read in either case. The writer always emits the shortest field
that reproduces the color exactly, in uppercase.
"""

from typing import List, Sequence, Tuple

import numpy as np

from ahi.color import NUM_COLORS
from ahi.errors import TooManyPaletteDigits
from ahi.tokens import TokenReader

RGBA = Tuple[int, int, int, int]

MAX_FIELD_DIGITS = 8

TRANSPARENT: RGBA = (0, 0, 0, 0)


class Palette:
    """
    A table of 16 RGBA colors, indexed by pixel color (0-15).

    Args:
        rgba: 16 (r, g, b, a) entries, each channel 0-255. Defaults to a
              copy of the default palette.
    """

    def __init__(self, rgba=None):
        if rgba is None:
            rgba = _DEFAULT_RGBA
        table = np.array(rgba, dtype=np.int64)
        if table.shape != (NUM_COLORS, 4):
            raise ValueError(f"palette must have shape (16, 4), got {table.shape}")
        if table.min() < 0 or table.max() > 255:
            raise ValueError("palette channels must be in 0..255")
        self._rgba = table.astype(np.uint8)

    @classmethod
    def default(cls) -> "Palette":
        """Return the shared, read-only default palette."""
        return DEFAULT_PALETTE

    @property
    def rgba(self) -> np.ndarray:
        """The (16, 4) uint8 color table."""
        return self._rgba

    @property
    def read_only(self) -> bool:
        return not self._rgba.flags.writeable

    def get(self, color: int) -> RGBA:
        """Return the RGBA tuple for a color slot."""
        _check_slot(color)
        r, g, b, a = (int(v) for v in self._rgba[color])
        return (r, g, b, a)

    def set(self, color: int, rgba: Sequence[int]) -> None:
        """Set the RGBA tuple for a color slot."""
        _check_slot(color)
        if self.read_only:
            raise ValueError("the default palette is read-only; use Palette.default().copy()")
        values = [int(v) for v in rgba]
        if len(values) != 4 or not all(0 <= v <= 255 for v in values):
            raise ValueError(f"invalid RGBA value: {tuple(rgba)}")
        self._rgba[color] = values

    def lookup(self, pixels) -> np.ndarray:
        """
        Map color indices to RGBA.

        Args:
            pixels: Array of color indices of any shape

        Returns:
            uint8 array with a trailing axis of 4 (r, g, b, a)
        """
        return self._rgba[np.asarray(pixels, dtype=np.intp)]

    def copy(self) -> "Palette":
        return Palette(self._rgba)

    def __eq__(self, other):
        if not isinstance(other, Palette):
            return NotImplemented
        return bool(np.array_equal(self._rgba, other._rgba))

    def __repr__(self) -> str:
        return f"Palette({encode_palette(self).decode('ascii').strip()!r})"

    @classmethod
    def read(cls, reader: TokenReader) -> "Palette":
        return decode_palette(reader)

    def to_line(self) -> bytes:
        return encode_palette(self)


def _check_slot(color: int) -> None:
    if not 0 <= color < NUM_COLORS:
        raise ValueError(f"color index must be in 0..15, got {color}")


def _nibble(value: int) -> int:
    return value * 0x11


def _byte(high: int, low: int) -> int:
    return high * 16 + low


def decode_field(digits: Sequence[int]) -> RGBA:
    """
    Turn the hex digits of one palette field into an RGBA tuple.

    Raises:
        TooManyPaletteDigits: If there are more than 8 digits
    """
    d = list(digits)
    count = len(d)
    if count == 0:
        return TRANSPARENT
    if count == 1:
        gray = _nibble(d[0])
        return (gray, gray, gray, 255)
    if count == 2:
        gray = _byte(d[0], d[1])
        return (gray, gray, gray, 255)
    if count == 3:
        return (_nibble(d[0]), _nibble(d[1]), _nibble(d[2]), 255)
    if count == 4:
        return (_nibble(d[0]), _nibble(d[1]), _nibble(d[2]), _nibble(d[3]))
    if count == 5:
        return (_nibble(d[0]), _nibble(d[1]), _nibble(d[2]), _byte(d[3], d[4]))
    if count == 6:
        return (_byte(d[0], d[1]), _byte(d[2], d[3]), _byte(d[4], d[5]), 255)
    if count == 7:
        return (_byte(d[0], d[1]), _byte(d[2], d[3]), _byte(d[4], d[5]), _nibble(d[6]))
    if count == 8:
        return (_byte(d[0], d[1]), _byte(d[2], d[3]), _byte(d[4], d[5]), _byte(d[6], d[7]))
    raise TooManyPaletteDigits(count)


def _short(value: int) -> bool:
    return value % 0x11 == 0


def encode_field(rgba: Sequence[int]) -> str:
    """Return the shortest palette field that decodes to exactly `rgba`."""
    r, g, b, a = (int(v) for v in rgba)
    if (r, g, b, a) == TRANSPARENT:
        return ""
    rgb_short = _short(r) and _short(g) and _short(b)
    if a == 255:
        if r == g == b:
            if _short(r):
                return f"{r // 0x11:X}"
            return f"{r:02X}"
        if rgb_short:
            return f"{r // 0x11:X}{g // 0x11:X}{b // 0x11:X}"
        return f"{r:02X}{g:02X}{b:02X}"
    if rgb_short:
        if _short(a):
            return f"{r // 0x11:X}{g // 0x11:X}{b // 0x11:X}{a // 0x11:X}"
        return f"{r // 0x11:X}{g // 0x11:X}{b // 0x11:X}{a:02X}"
    if _short(a):
        return f"{r:02X}{g:02X}{b:02X}{a // 0x11:X}"
    return f"{r:02X}{g:02X}{b:02X}{a:02X}"


def decode_palette(reader: TokenReader) -> Palette:
    """Read one palette line (16 fields, the last ended by a newline)."""
    colors: List[RGBA] = []
    for slot in range(NUM_COLORS):
        terminator = b"\n" if slot == NUM_COLORS - 1 else b";"
        start = reader.offset
        digits = reader.read_hex_digits(terminator, MAX_FIELD_DIGITS)
        if len(digits) > MAX_FIELD_DIGITS:
            raise TooManyPaletteDigits(len(digits), start)
        colors.append(decode_field(digits))
    return Palette(colors)


def encode_palette(palette: Palette) -> bytes:
    """Write one palette as a newline-terminated line."""
    fields = [encode_field(palette.rgba[slot]) for slot in range(NUM_COLORS)]
    return (";".join(fields) + "\n").encode("ascii")


_DEFAULT_RGBA = [
    (0, 0, 0, 0),
    (0, 0, 0, 255),
    (127, 0, 0, 255),
    (255, 0, 0, 255),
    (0, 127, 0, 255),
    (0, 255, 0, 255),
    (127, 127, 0, 255),
    (255, 255, 0, 255),
    (0, 0, 127, 255),
    (0, 0, 255, 255),
    (127, 0, 127, 255),
    (255, 0, 255, 255),
    (0, 127, 127, 255),
    (0, 255, 255, 255),
    (127, 127, 127, 255),
    (255, 255, 255, 255),
]

DEFAULT_PALETTE = Palette(_DEFAULT_RGBA)
DEFAULT_PALETTE.rgba.flags.writeable = False
