"""
Low-level token reading for the AHI/AHF text formats.

Both formats are read strictly byte by byte from a binary stream: header
fields are decimal integers ended by a known terminator byte, flags and
palette fields are hex digits, and everything else is matched against exact
literals. TokenReader keeps track of the byte offset so that errors can point
at the offending token.

Integer grammar:
- Optional leading '-', then one or more ASCII digits, then the terminator
- The terminator is consumed
- Header counts and dimensions are capped at MAX_HEADER_VALUE (0xFFFF)
"""

import io
from typing import BinaryIO, List, Optional, Tuple, Union

from ahi.errors import (
    HexLiteralTooLarge,
    InvalidDigit,
    MisplacedSign,
    MissingDigits,
    MissingHexLiteral,
    NegativeNotAllowed,
    UnexpectedEndOfInput,
    UnexpectedToken,
    ValueTooLarge,
)

# Largest magnitude allowed in header counts and dimensions
MAX_HEADER_VALUE = 0xFFFF

# Range of the signed 32-bit fields (font baseline and glyph edges)
MIN_SIGNED_32 = -0x80000000
MAX_SIGNED_32 = 0x7FFFFFFF

MINUS = ord("-")

# Bytes that end a header field
SEPARATORS = b" \n"

ByteSource = Union[bytes, bytearray, memoryview, BinaryIO]


def hex_digit_value(byte: int) -> int:
    """Return the value of a hex digit byte (either case), or -1."""
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    return -1


class TokenReader:
    """
    Sequential reader over a byte stream.

    Args:
        source: Bytes, or a binary file-like object opened for reading

    Example:
        >>> reader = TokenReader(b"ahi0 w2 ")
        >>> reader.read_exactly(b"ahi")
        >>> reader.read_decimal_uint(b" ")
        0
    """

    def __init__(self, source: ByteSource):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self._stream = source
        self.offset = 0

    def read_bytes(self, count: int, what: str = "data") -> bytes:
        """Read exactly `count` bytes, failing at end of input."""
        chunks = []
        remaining = count
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                raise UnexpectedEndOfInput(what, self.offset + count - remaining)
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self.offset += count
        return data

    def read_byte(self, what: str = "data") -> int:
        """Read a single byte and return it as an int."""
        return self.read_bytes(1, what)[0]

    def read_exactly(self, expected: bytes) -> None:
        """
        Consume `len(expected)` bytes and check they equal `expected`.

        Raises:
            UnexpectedToken: If the bytes differ from the literal
            UnexpectedEndOfInput: If the stream ends first
        """
        start = self.offset
        actual = self.read_bytes(len(expected), repr(expected.decode("latin-1")))
        if actual != expected:
            raise UnexpectedToken(expected, actual, start)

    def _read_signed(self, terminator: bytes, max_value: int,
                     max_negative: Optional[int] = None) -> Tuple[bool, int]:
        """Read sign and magnitude of a decimal field up to `terminator`."""
        end = terminator[0]
        if max_negative is None:
            max_negative = max_value
        negative = False
        any_digits = False
        value = 0
        while True:
            position = self.offset
            byte = self.read_byte("integer field")
            if byte == end:
                if not any_digits:
                    raise MissingDigits(position)
                return negative, value
            if byte == MINUS:
                if negative or any_digits:
                    raise MisplacedSign(position)
                negative = True
            elif 0x30 <= byte <= 0x39:
                value = value * 10 + (byte - 0x30)
                any_digits = True
                if negative and value > max_negative:
                    raise ValueTooLarge(-value, -max_negative, position)
                if not negative and value > max_value:
                    raise ValueTooLarge(value, max_value, position)
            elif any_digits and byte in SEPARATORS:
                # the field ended, but not where the grammar says it does
                raise UnexpectedToken(terminator, bytes([byte]), position)
            else:
                raise InvalidDigit(byte, position)

    def read_decimal_int(self, terminator: bytes, max_value: int = MAX_HEADER_VALUE,
                         min_value: Optional[int] = None) -> int:
        """
        Read a signed decimal integer ended by `terminator`.

        Args:
            terminator: Single byte that ends the field (consumed)
            max_value: Largest value accepted
            min_value: Smallest value accepted (defaults to -max_value)

        Returns:
            The parsed integer

        Raises:
            UnexpectedToken: If the digits end with a different separator
            MissingDigits, MisplacedSign, InvalidDigit, ValueTooLarge
        """
        max_negative = None if min_value is None else -min_value
        negative, value = self._read_signed(terminator, max_value, max_negative)
        return -value if negative else value

    def read_decimal_uint(self, terminator: bytes, max_value: int = MAX_HEADER_VALUE) -> int:
        """Like read_decimal_int, but any minus sign is rejected."""
        start = self.offset
        negative, value = self._read_signed(terminator, max_value)
        if negative:
            raise NegativeNotAllowed(-value, start)
        return value

    def read_hex_digits(self, terminator: bytes, limit: int) -> List[int]:
        """
        Read hex digits (either case) up to `terminator`.

        Stops early once more than `limit` digits have been seen, so the
        caller can report an oversized field without reading the rest of it.
        """
        end = terminator[0]
        digits: List[int] = []
        while len(digits) <= limit:
            position = self.offset
            byte = self.read_byte("hex field")
            if byte == end:
                break
            digit = hex_digit_value(byte)
            if digit < 0:
                raise InvalidDigit(byte, position)
            digits.append(digit)
        return digits

    def read_hex_uint(self, terminator: bytes, max_digits: int = 8) -> int:
        """
        Read an unsigned hex integer ended by `terminator`.

        Raises:
            MissingHexLiteral: If there are no digits
            HexLiteralTooLarge: If there are more than `max_digits` digits
        """
        start = self.offset
        digits = self.read_hex_digits(terminator, max_digits)
        if not digits:
            raise MissingHexLiteral(start)
        if len(digits) > max_digits:
            raise HexLiteralTooLarge(len(digits), max_digits, start)
        value = 0
        for digit in digits:
            value = value * 16 + digit
        return value
