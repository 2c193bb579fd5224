"""
Pixel color characters.

Each pixel is one hex digit naming a palette slot: '0'-'9' are slots 0-9 and
'A'-'F' are slots 10-15. Only uppercase is accepted for pixels.

In the default palette the digit's bits select the color: the 1's place is
brightness, the 2's place red, the 4's place green and the 8's place blue.
Slot 0 is special-cased to transparent and slot 1 is black.
"""

from typing import Optional

import numpy as np

from ahi.errors import InvalidPixelCharacter

NUM_COLORS = 16

PIXEL_CHARS = b"0123456789ABCDEF"

_INVALID = 0xFF

# byte -> color index lookup, _INVALID for bytes that are not pixel chars
_DECODE_TABLE = np.full(256, _INVALID, dtype=np.uint8)
_DECODE_TABLE[np.frombuffer(PIXEL_CHARS, dtype=np.uint8)] = np.arange(NUM_COLORS, dtype=np.uint8)

# color index -> byte
_ENCODE_TABLE = np.frombuffer(PIXEL_CHARS, dtype=np.uint8)

NEWLINE = ord("\n")


def to_byte(color: int) -> int:
    """Return the pixel character byte for a color index 0-15."""
    if not 0 <= color < NUM_COLORS:
        raise ValueError(f"color index must be in 0..15, got {color}")
    return PIXEL_CHARS[color]


def from_byte(byte: int) -> int:
    """
    Return the color index for a pixel character byte.

    Raises:
        InvalidPixelCharacter: If the byte is not one of 0-9, A-F
    """
    if not 0 <= byte <= 0xFF or _DECODE_TABLE[byte] == _INVALID:
        raise InvalidPixelCharacter(byte)
    return int(_DECODE_TABLE[byte])


def decode_row(data: bytes, offset: Optional[int] = None) -> np.ndarray:
    """
    Decode a row of pixel characters into a uint8 array of color indices.

    Args:
        data: Pixel characters for one row (without the newline)
        offset: Byte offset of the row in the stream, for error reporting

    Raises:
        InvalidPixelCharacter: At the first byte that is not a pixel char
    """
    row = _DECODE_TABLE[np.frombuffer(data, dtype=np.uint8)]
    bad = np.flatnonzero(row == _INVALID)
    if bad.size:
        index = int(bad[0])
        raise InvalidPixelCharacter(data[index], None if offset is None else offset + index)
    return row


def encode_rows(pixels: np.ndarray) -> bytes:
    """
    Encode a (height, width) grid as newline-terminated rows of pixel chars.

    A zero-width grid still produces one newline per row.
    """
    pixels = np.asarray(pixels)
    if pixels.size and int(pixels.max()) >= NUM_COLORS:
        raise ValueError(f"color index must be in 0..15, got {int(pixels.max())}")
    height, width = pixels.shape
    out = np.empty((height, width + 1), dtype=np.uint8)
    out[:, :width] = _ENCODE_TABLE[pixels]
    out[:, width] = NEWLINE
    return out.tobytes()
