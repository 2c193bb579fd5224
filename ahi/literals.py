"""
Quoted strings, quoted characters and integer lists.

Image tags are written as double-quoted strings, font characters as
single-quoted character literals, and image metadata as bracketed lists of
signed 16-bit integers:

    "hero/idle"      'g'      '\\u{2603}'      [1, -2, 300]

Escapes inside quotes: \\\\ \\' \\" \\n \\r \\t and \\u{<1-8 hex digits>}.
Any other byte must be printable ASCII (0x20-0x7E).
"""

from typing import List, Optional, Sequence

from ahi.errors import (
    EmptyCharLiteral,
    InvalidCharLiteralByte,
    InvalidDigit,
    InvalidEscape,
    InvalidUnicodeScalar,
    ListIntegerOutOfRange,
    MisplacedSign,
    MissingDigits,
)
from ahi.tokens import MINUS, TokenReader

INT16_MIN = -0x8000
INT16_MAX = 0x7FFF

BACKSLASH = ord("\\")

_SIMPLE_ESCAPES = {
    ord("\\"): "\\",
    ord("'"): "'",
    ord('"'): '"',
    ord("n"): "\n",
    ord("r"): "\r",
    ord("t"): "\t",
}

_ESCAPED_CHARS = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def is_unicode_scalar(value: int) -> bool:
    """True for code points that are not surrogates and not above U+10FFFF."""
    return 0 <= value <= 0x10FFFF and not 0xD800 <= value <= 0xDFFF


def read_char_escape(reader: TokenReader, quote: int) -> Optional[str]:
    """
    Read one character of a quoted literal.

    Returns:
        The decoded character, or None if the closing quote was read
    """
    position = reader.offset
    byte = reader.read_byte("quoted literal")
    if byte == quote:
        return None
    if byte == BACKSLASH:
        escape_position = reader.offset
        esc = reader.read_byte("escape sequence")
        if esc in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[esc]
        if esc == ord("u"):
            reader.read_exactly(b"{")
            value_position = reader.offset
            value = reader.read_hex_uint(b"}", 8)
            if not is_unicode_scalar(value):
                raise InvalidUnicodeScalar(value, value_position)
            return chr(value)
        raise InvalidEscape(esc, escape_position)
    if byte < 0x20 or byte > 0x7E:
        raise InvalidCharLiteralByte(byte, position)
    return chr(byte)


def read_quoted_char(reader: TokenReader) -> str:
    """Read a single-quoted character literal such as 'a' or '\\n'."""
    start = reader.offset
    reader.read_exactly(b"'")
    char = read_char_escape(reader, ord("'"))
    if char is None:
        raise EmptyCharLiteral(start)
    reader.read_exactly(b"'")
    return char


def read_quoted_string(reader: TokenReader) -> str:
    """Read a double-quoted string; "" yields the empty string."""
    reader.read_exactly(b'"')
    chars = []
    while True:
        char = read_char_escape(reader, ord('"'))
        if char is None:
            return "".join(chars)
        chars.append(char)


def read_int_list(reader: TokenReader) -> List[int]:
    """
    Read a bracketed list of signed 16-bit integers, e.g. [3, -1, 0].

    Items are separated by a comma and exactly one space; [] is empty.

    Raises:
        MissingDigits: For an empty item such as [1, ] or [,]
        MisplacedSign, InvalidDigit: For malformed items
        ListIntegerOutOfRange: For values outside -32768..32767
    """
    reader.read_exactly(b"[")
    values: List[int] = []
    done = False
    while not done:
        negative = False
        any_digits = False
        value = 0
        start = reader.offset
        while True:
            position = reader.offset
            byte = reader.read_byte("integer list")
            if byte in (ord("]"), ord(",")):
                if not any_digits and (byte == ord(",") or values or negative):
                    raise MissingDigits(position)
                done = byte == ord("]")
                break
            if byte == MINUS:
                if negative or any_digits:
                    raise MisplacedSign(position)
                negative = True
            elif 0x30 <= byte <= 0x39:
                value = value * 10 + (byte - 0x30)
                any_digits = True
                if value > 0x8000:
                    raise ListIntegerOutOfRange(-value if negative else value, start)
            else:
                raise InvalidDigit(byte, position)
        if not any_digits:
            # only reachable for "[]"
            break
        if negative:
            value = -value
        if not INT16_MIN <= value <= INT16_MAX:
            raise ListIntegerOutOfRange(value, start)
        values.append(value)
        if not done:
            reader.read_exactly(b" ")
    return values


def escape_char(char: str) -> str:
    """Escape one character for use inside a quoted literal."""
    if char in _ESCAPED_CHARS:
        return _ESCAPED_CHARS[char]
    code = ord(char)
    if 0x20 <= code <= 0x7E:
        return char
    return f"\\u{{{code:x}}}"


def format_quoted_char(char: str) -> str:
    """Format a character as a single-quoted literal."""
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    if not is_unicode_scalar(ord(char)):
        raise InvalidUnicodeScalar(ord(char))
    return f"'{escape_char(char)}'"


def format_quoted_string(text: str) -> str:
    """Format a string as a double-quoted literal."""
    for char in text:
        if not is_unicode_scalar(ord(char)):
            raise InvalidUnicodeScalar(ord(char))
    return '"' + "".join(escape_char(char) for char in text) + '"'


def format_int_list(values: Sequence[int]) -> str:
    """
    Format integers as a bracketed list.

    Raises:
        ListIntegerOutOfRange: If a value does not fit in 16 signed bits
    """
    for value in values:
        if not INT16_MIN <= int(value) <= INT16_MAX:
            raise ListIntegerOutOfRange(int(value))
    return "[" + ", ".join(str(int(value)) for value in values) + "]"
