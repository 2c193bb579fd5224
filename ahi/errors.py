"""
Error types raised by the AHI/AHF codecs.

Every error derives from AhiError (itself a ValueError), so callers can catch
the base class at the decode/encode entry point, or a specific kind when they
care about it. Parse errors carry the byte offset of the offending token when
the reader knows it.
"""

from typing import Optional


def _show_byte(byte: int) -> str:
    if 0x20 <= byte <= 0x7E:
        return repr(chr(byte))
    return f"0x{byte:02X}"


class AhiError(ValueError):
    """Base exception for all AHI/AHF codec errors."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.message = message
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class UnexpectedToken(AhiError):
    """Raised when a literal byte sequence does not match the input."""

    def __init__(self, expected: bytes, actual: bytes, offset: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"expected {expected.decode('latin-1')!r}, found {actual.decode('latin-1')!r}",
            offset,
        )


class UnexpectedEndOfInput(AhiError):
    """Raised when the stream ends before an expected token."""

    def __init__(self, expected: str, offset: Optional[int] = None):
        self.expected = expected
        super().__init__(f"unexpected end of input while reading {expected}", offset)


class MissingDigits(AhiError):
    """Raised when an integer field has no digits before its terminator."""

    def __init__(self, offset: Optional[int] = None):
        super().__init__("missing integer field", offset)


class MisplacedSign(AhiError):
    """Raised when a minus sign follows a digit or appears twice."""

    def __init__(self, offset: Optional[int] = None):
        super().__init__("misplaced minus sign in integer field", offset)


class InvalidDigit(AhiError):
    """Raised for a byte that is not a digit where one was expected."""

    def __init__(self, byte: int, offset: Optional[int] = None):
        self.byte = byte
        super().__init__(f"invalid byte in integer field: {_show_byte(byte)}", offset)


class ValueTooLarge(AhiError):
    """Raised when an integer exceeds the range allowed for its field."""

    def __init__(self, value: int, limit: int, offset: Optional[int] = None):
        self.value = value
        self.limit = limit
        super().__init__(f"value {value} is out of range (limit {limit})", offset)


class NegativeNotAllowed(AhiError):
    """Raised when a count or dimension field is negative."""

    def __init__(self, value: int, offset: Optional[int] = None):
        self.value = value
        super().__init__(f"value must be nonnegative (was {value})", offset)


class MissingHexLiteral(AhiError):
    """Raised when a hex field has no digits."""

    def __init__(self, offset: Optional[int] = None):
        super().__init__("missing hex literal", offset)


class HexLiteralTooLarge(AhiError):
    """Raised when a hex field has more digits than allowed."""

    def __init__(self, digits: int, max_digits: int, offset: Optional[int] = None):
        self.digits = digits
        self.max_digits = max_digits
        super().__init__(
            f"hex literal is too large ({digits} digits, max {max_digits})", offset
        )


class TooManyPaletteDigits(AhiError):
    """Raised when a palette field has more than 8 hex digits."""

    def __init__(self, digits: int, offset: Optional[int] = None):
        self.digits = digits
        super().__init__(f"too many digits in palette field ({digits}, max 8)", offset)


class InvalidPixelCharacter(AhiError):
    """Raised for a pixel byte outside 0-9, A-F."""

    def __init__(self, byte: int, offset: Optional[int] = None):
        self.byte = byte
        super().__init__(f"invalid pixel character: {_show_byte(byte)}", offset)


class InvalidCharLiteralByte(AhiError):
    """Raised for a control or non-ASCII byte inside a quoted literal."""

    def __init__(self, byte: int, offset: Optional[int] = None):
        self.byte = byte
        super().__init__(f"invalid char literal byte: {_show_byte(byte)}", offset)


class InvalidEscape(AhiError):
    """Raised for an unknown backslash escape."""

    def __init__(self, byte: int, offset: Optional[int] = None):
        self.byte = byte
        super().__init__(f"invalid char escape: {_show_byte(byte)}", offset)


class InvalidUnicodeScalar(AhiError):
    """Raised when a \\u{...} escape is not a Unicode scalar value."""

    def __init__(self, value: int, offset: Optional[int] = None):
        self.value = value
        super().__init__(f"invalid unicode value: 0x{value:X}", offset)


class EmptyCharLiteral(AhiError):
    """Raised for ''."""

    def __init__(self, offset: Optional[int] = None):
        super().__init__("empty char literal", offset)


class ListIntegerOutOfRange(AhiError):
    """Raised when a metadata integer does not fit in a signed 16-bit value."""

    def __init__(self, value: int, offset: Optional[int] = None):
        self.value = value
        super().__init__(f"list integer value is out of range: {value}", offset)


class UnsupportedVersion(AhiError):
    """Raised for a format version this codec does not know."""

    def __init__(self, kind: str, version: int, offset: Optional[int] = None):
        self.kind = kind
        self.version = version
        super().__init__(f"unsupported {kind} version: {version}", offset)


class UnsupportedFlags(AhiError):
    """Raised when a version-1 header sets unknown flag bits."""

    def __init__(self, flags: int, offset: Optional[int] = None):
        self.flags = flags
        super().__init__(f"unsupported AHI flags: 0x{flags:X}", offset)


class DimensionMismatch(AhiError):
    """Raised when a version-0 write finds images of differing sizes."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            "images must all have the same dimensions "
            f"(found {actual[0]}x{actual[1]} instead of {expected[0]}x{expected[1]})"
        )


class FeatureRequiresVersion(AhiError):
    """Raised when a requested write version cannot express the collection."""

    def __init__(self, feature: str, version: int):
        self.feature = feature
        self.version = version
        super().__init__(f"{feature} cannot be written in AHI version {version}")


class GlyphHeightMismatch(AhiError):
    """Raised when a glyph's image height differs from the font's glyph height."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"glyph height must be {expected} (got an image of height {actual})"
        )


class PixelIndexError(AhiError, IndexError):
    """Raised for a (col, row) pair outside an image."""

    def __init__(self, col: int, row: int, width: int, height: int):
        self.col = col
        self.row = row
        super().__init__(
            f"pixel ({col}, {row}) is out of range for a {width}x{height} image"
        )
