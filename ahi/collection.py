"""
ASCII Hex Image (.ahi) collections: palettes plus images.

File format:

Version 0 (all images share one size, no palettes, tags or metadata):
    ahi0 w<width> h<height> n<num_images>

Version 1:
    ahi1 f<hex flags> p<num_palettes> i<num_images>[ w<width> h<height>]

    The global w/h fields are present only when FLAG_SIZES is clear.

Flags (version 1):
    bit 0 (FLAG_SIZES)     every image carries its own "w<width> h<height>" line
    bit 1 (FLAG_TAGS)      every image carries a quoted string tag line
    bit 2 (FLAG_METADATA)  every image carries a bracketed integer list line

Body:
    - If there are palettes: a blank line, then one line per palette
    - For each image: a blank line, then tag / metadata / size lines as
      selected by the flags (in that order), then the pixel rows

Example:
    ahi0 w2 h2 n2

    20
    5D

    E0
    0E

The writer always picks the lowest version and the smallest flag set that
can represent the collection, so the output is deterministic.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Tuple

from ahi.errors import (
    DimensionMismatch,
    FeatureRequiresVersion,
    UnsupportedFlags,
    UnsupportedVersion,
    ValueTooLarge,
)
from ahi.image import Image, read_grid, write_grid
from ahi.literals import format_int_list, format_quoted_string, read_int_list, read_quoted_string
from ahi.palette import Palette, decode_palette, encode_palette
from ahi.tokens import MAX_HEADER_VALUE, ByteSource, TokenReader

logger = logging.getLogger(__name__)

AHI_MAGIC = b"ahi"
SUPPORTED_AHI_VERSIONS = (0, 1)

FLAG_SIZES = 0x1
FLAG_TAGS = 0x2
FLAG_METADATA = 0x4
KNOWN_FLAGS = FLAG_SIZES | FLAG_TAGS | FLAG_METADATA


@dataclass
class Collection:
    """
    An ordered list of palettes and an ordered list of images.

    Palettes are not referenced by the images; they are lookup tables that
    travel alongside them.
    """
    palettes: List[Palette] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)

    @classmethod
    def read(cls, source: ByteSource) -> "Collection":
        return decode_collection(source)

    def write(self, sink: BinaryIO, version: Optional[int] = None) -> None:
        encode_collection(self, sink, version=version)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Collection":
        return decode_collection(data)

    def to_bytes(self, version: Optional[int] = None) -> bytes:
        out = io.BytesIO()
        encode_collection(self, out, version=version)
        return out.getvalue()


@dataclass(frozen=True)
class FormatParams:
    """Header parameters chosen for writing a collection."""
    version: int
    flags: int
    global_size: Optional[Tuple[int, int]]


def select_format(collection: Collection) -> FormatParams:
    """
    Pick the minimal format version and flags for a collection.

    Version 0 is used only when there are no palettes, no tags, no metadata,
    and every image has the same size (an empty image list counts as 0x0).
    Otherwise version 1 is used, with each flag set only if its feature is
    actually present.
    """
    sizes = {image.size for image in collection.images}
    if not collection.images:
        global_size: Optional[Tuple[int, int]] = (0, 0)
    elif len(sizes) == 1:
        global_size = next(iter(sizes))
    else:
        global_size = None
    any_tags = any(image.tag for image in collection.images)
    any_metadata = any(image.metadata for image in collection.images)

    if not collection.palettes and global_size is not None and not any_tags and not any_metadata:
        params = FormatParams(version=0, flags=0, global_size=global_size)
    else:
        flags = 0
        if global_size is None:
            flags |= FLAG_SIZES
        if any_tags:
            flags |= FLAG_TAGS
        if any_metadata:
            flags |= FLAG_METADATA
        params = FormatParams(version=1, flags=flags, global_size=global_size)
    logger.debug(
        "Selected AHI v%d flags=0x%X global_size=%s", params.version, params.flags, params.global_size
    )
    return params


def _check_header_value(value: int) -> int:
    if value > MAX_HEADER_VALUE:
        raise ValueTooLarge(value, MAX_HEADER_VALUE)
    return value


def _params_for_version(collection: Collection, version: Optional[int]) -> FormatParams:
    params = select_format(collection)
    if version is None or version == params.version:
        return params
    if version == 1:
        return FormatParams(version=1, flags=params.flags, global_size=params.global_size)
    if version == 0:
        # only reachable when select_format needed version 1
        if collection.palettes:
            raise FeatureRequiresVersion("palettes", 0)
        if any(image.tag for image in collection.images):
            raise FeatureRequiresVersion("image tags", 0)
        if any(image.metadata for image in collection.images):
            raise FeatureRequiresVersion("image metadata", 0)
        expected = collection.images[0].size
        for image in collection.images:
            if image.size != expected:
                raise DimensionMismatch(expected, image.size)
    raise UnsupportedVersion("AHI", version)


def encode_collection(collection: Collection, sink: BinaryIO, version: Optional[int] = None) -> None:
    """
    Write a collection to a binary sink.

    Args:
        collection: Palettes and images to write
        sink: Binary file-like object
        version: Force a format version (0 or 1). By default the minimal
                 version is chosen.

    Raises:
        DimensionMismatch: If version 0 is forced and image sizes differ
        FeatureRequiresVersion: If version 0 is forced and the collection
                                has palettes, tags or metadata
        ValueTooLarge: If a count or dimension exceeds 0xFFFF

    Nothing is written to `sink` when an error is raised.
    """
    params = _params_for_version(collection, version)
    out = io.BytesIO()
    num_images = _check_header_value(len(collection.images))

    if params.version == 0:
        width, height = params.global_size
        out.write(
            f"ahi0 w{_check_header_value(width)} h{_check_header_value(height)} n{num_images}\n".encode("ascii")
        )
    else:
        num_palettes = _check_header_value(len(collection.palettes))
        header = f"ahi1 f{params.flags:X} p{num_palettes} i{num_images}"
        if params.global_size is not None:
            width, height = params.global_size
            header += f" w{_check_header_value(width)} h{_check_header_value(height)}"
        out.write((header + "\n").encode("ascii"))

    if collection.palettes:
        out.write(b"\n")
        for palette in collection.palettes:
            out.write(encode_palette(palette))

    for image in collection.images:
        out.write(b"\n")
        if params.flags & FLAG_TAGS:
            out.write((format_quoted_string(image.tag) + "\n").encode("ascii"))
        if params.flags & FLAG_METADATA:
            out.write((format_int_list(image.metadata) + "\n").encode("ascii"))
        if params.flags & FLAG_SIZES:
            out.write(
                f"w{_check_header_value(image.width)} h{_check_header_value(image.height)}\n".encode("ascii")
            )
        out.write(write_grid(image.pixels))

    sink.write(out.getvalue())


def decode_collection(source: ByteSource) -> Collection:
    """
    Read a collection from bytes or a binary stream.

    Raises:
        AhiError: The first grammar violation found (see ahi.errors)
    """
    reader = TokenReader(source)
    reader.read_exactly(AHI_MAGIC)
    version_offset = reader.offset
    version = reader.read_decimal_uint(b" ")
    if version not in SUPPORTED_AHI_VERSIONS:
        raise UnsupportedVersion("AHI", version, version_offset)

    if version == 0:
        flags = 0
        num_palettes = 0
        reader.read_exactly(b"w")
        width = reader.read_decimal_uint(b" ")
        reader.read_exactly(b"h")
        height = reader.read_decimal_uint(b" ")
        reader.read_exactly(b"n")
        num_images = reader.read_decimal_uint(b"\n")
    else:
        reader.read_exactly(b"f")
        flags_offset = reader.offset
        flags = reader.read_hex_uint(b" ")
        if flags & ~KNOWN_FLAGS:
            raise UnsupportedFlags(flags, flags_offset)
        reader.read_exactly(b"p")
        num_palettes = reader.read_decimal_uint(b" ")
        reader.read_exactly(b"i")
        if flags & FLAG_SIZES:
            # no global size: a space here is an UnexpectedToken
            num_images = reader.read_decimal_uint(b"\n")
            width = height = 0
        else:
            num_images = reader.read_decimal_uint(b" ")
            reader.read_exactly(b"w")
            width = reader.read_decimal_uint(b" ")
            reader.read_exactly(b"h")
            height = reader.read_decimal_uint(b"\n")
    logger.debug(
        "AHI v%d header: flags=0x%X palettes=%d images=%d size=%dx%d",
        version, flags, num_palettes, num_images, width, height,
    )

    palettes = []
    if num_palettes > 0:
        reader.read_exactly(b"\n")
    for _ in range(num_palettes):
        palettes.append(decode_palette(reader))

    images = []
    for _ in range(num_images):
        reader.read_exactly(b"\n")
        tag = ""
        metadata: List[int] = []
        if flags & FLAG_TAGS:
            tag = read_quoted_string(reader)
            reader.read_exactly(b"\n")
        if flags & FLAG_METADATA:
            metadata = read_int_list(reader)
            reader.read_exactly(b"\n")
        if flags & FLAG_SIZES:
            reader.read_exactly(b"w")
            width = reader.read_decimal_uint(b" ")
            reader.read_exactly(b"h")
            height = reader.read_decimal_uint(b"\n")
        pixels = read_grid(reader, width, height)
        images.append(Image(pixels, tag=tag, metadata=metadata))

    return Collection(palettes=palettes, images=images)
