"""
AHI - ASCII Hex Image and ASCII Hex Font codecs.

.ahi files hold a collection of 16-color images plus optional palettes;
.ahf files hold a bitmap font (a default glyph plus per-character glyphs).
Both are plain text, one hex digit per pixel, so they diff cleanly under
version control.
"""

__version__ = "0.1.0"

from ahi.collection import Collection, decode_collection, encode_collection, select_format
from ahi.errors import AhiError
from ahi.files import detect_format, read_ahf, read_ahi, write_ahf, write_ahi
from ahi.font import Font, Glyph, decode_font, encode_font
from ahi.image import Image
from ahi.palette import Palette

__all__ = [
    "AhiError",
    "Collection",
    "Font",
    "Glyph",
    "Image",
    "Palette",
    "decode_collection",
    "encode_collection",
    "select_format",
    "decode_font",
    "encode_font",
    "read_ahi",
    "write_ahi",
    "read_ahf",
    "write_ahf",
    "detect_format",
]
