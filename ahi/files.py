"""
File-level helpers for .ahi and .ahf documents.
"""

from pathlib import Path
from typing import Optional, Union

from ahi.collection import AHI_MAGIC, Collection, decode_collection
from ahi.font import AHF_MAGIC, Font, decode_font

PathLike = Union[str, Path]


def read_ahi(path: PathLike) -> Collection:
    """
    Read a collection from an .ahi file.

    Raises:
        AhiError: If the file is not a valid AHI document
    """
    with open(Path(path), "rb") as f:
        return decode_collection(f)


def write_ahi(path: PathLike, collection: Collection, version: Optional[int] = None) -> Path:
    """
    Write a collection to an .ahi file, creating parent directories.

    The document is fully encoded before the file is opened, so an encoding
    error never leaves a truncated file behind.
    """
    path = Path(path)
    data = collection.to_bytes(version=version)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path


def read_ahf(path: PathLike) -> Font:
    """
    Read a font from an .ahf file.

    Raises:
        AhiError: If the file is not a valid AHF document
    """
    with open(Path(path), "rb") as f:
        return decode_font(f)


def write_ahf(path: PathLike, font: Font) -> Path:
    """Write a font to an .ahf file, creating parent directories."""
    path = Path(path)
    data = font.to_bytes()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path


def detect_format(data: bytes) -> Optional[str]:
    """Return "ahi", "ahf", or None based on the leading magic bytes."""
    if data.startswith(AHI_MAGIC):
        return "ahi"
    if data.startswith(AHF_MAGIC):
        return "ahf"
    return None
