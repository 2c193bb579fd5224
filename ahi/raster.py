"""
Raster bridge: AHI images to and from PNG files.

Export maps each pixel's color index through a palette to RGBA. Import does
the reverse, matching each RGBA value exactly against the palette; any fully
transparent pixel maps to the first palette slot whose alpha is 0.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

try:
    import cv2
    HAS_CV2 = True
except ImportError:
    HAS_CV2 = False

from ahi.color import NUM_COLORS
from ahi.files import read_ahi
from ahi.image import Image
from ahi.palette import Palette

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _require_cv2() -> None:
    if not HAS_CV2:
        raise ImportError("opencv-python is required for PNG conversion. Install with: pip install opencv-python")


def image_to_rgba(image: Image, palette: Optional[Palette] = None) -> np.ndarray:
    """
    Map an image through a palette.

    Returns:
        (height, width, 4) uint8 array in RGBA order
    """
    palette = palette or Palette.default()
    return palette.lookup(image.pixels)


def write_png(image: Image, path: PathLike, palette: Optional[Palette] = None) -> Path:
    """
    Write one image as an RGBA PNG.

    Args:
        image: Image to export
        path: Output .png path (parent directories are created)
        palette: Colors to use; defaults to the default palette

    Returns:
        Path to the written file

    Raises:
        ValueError: If the image has zero width or height (PNG cannot
                    represent it) or the file could not be encoded
    """
    _require_cv2()
    if image.width == 0 or image.height == 0:
        raise ValueError(f"cannot write a {image.width}x{image.height} image as PNG")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    bgra = cv2.cvtColor(image_to_rgba(image, palette), cv2.COLOR_RGBA2BGRA)
    if not cv2.imwrite(str(path), bgra):
        raise ValueError(f"Could not write image: {path}")
    logger.debug("Wrote %dx%d PNG to %s", image.width, image.height, path)
    return path


def export_collection(
    ahi_path: PathLike,
    output_dir: Optional[PathLike] = None,
    palette: Optional[Palette] = None,
) -> List[Path]:
    """
    Convert every image of an .ahi file to PNG.

    A file holding exactly one image becomes `<stem>.png`; otherwise image i
    becomes `<stem>.<i>.png`.

    Args:
        ahi_path: Input .ahi file
        output_dir: Where to put the PNGs; defaults to the input's directory
        palette: Colors to use; defaults to the default palette

    Returns:
        Paths of the written PNG files, in image order
    """
    ahi_path = Path(ahi_path)
    collection = read_ahi(ahi_path)
    out_dir = Path(output_dir) if output_dir is not None else ahi_path.parent
    stem = ahi_path.stem

    if len(collection.images) == 1:
        targets = [out_dir / f"{stem}.png"]
    else:
        targets = [out_dir / f"{stem}.{index}.png" for index in range(len(collection.images))]

    written = []
    for image, target in zip(collection.images, targets):
        written.append(write_png(image, target, palette))
    logger.info("Exported %d image(s) from %s", len(written), ahi_path)
    return written


def _load_rgba(path: Path) -> np.ndarray:
    data = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if data is None:
        raise ValueError(f"Could not read image: {path}")
    if data.dtype != np.uint8:
        raise ValueError(f"Only 8-bit images are supported (got {data.dtype}): {path}")
    if data.ndim == 2:
        return cv2.cvtColor(data, cv2.COLOR_GRAY2RGBA)
    channels = data.shape[2]
    if channels == 3:
        return cv2.cvtColor(data, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(data, cv2.COLOR_BGRA2RGBA)
    raise ValueError(f"Unsupported channel count {channels}: {path}")


def _pack(rgba: np.ndarray) -> np.ndarray:
    rgba = rgba.astype(np.uint32)
    return (rgba[..., 0] << 24) | (rgba[..., 1] << 16) | (rgba[..., 2] << 8) | rgba[..., 3]


def read_png(path: PathLike, palette: Optional[Palette] = None) -> Image:
    """
    Read a PNG and convert it to an image of palette indices.

    Args:
        path: Input image (anything OpenCV can read, 8 bits per channel)
        palette: Colors to match against; defaults to the default palette

    Returns:
        Image with the same width and height as the file

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a pixel's color is not in the palette
    """
    _require_cv2()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input image not found: {path}")
    palette = palette or Palette.default()
    rgba = _load_rgba(path)

    keys = _pack(rgba)
    slot_keys = _pack(palette.rgba)
    indices = np.full(keys.shape, -1, dtype=np.int16)
    # later slots first so the lowest matching slot wins
    for slot in reversed(range(NUM_COLORS)):
        indices[keys == slot_keys[slot]] = slot
    transparent_slots = np.flatnonzero(palette.rgba[:, 3] == 0)
    if transparent_slots.size:
        indices[rgba[..., 3] == 0] = transparent_slots[0]

    missing = np.argwhere(indices < 0)
    if missing.size:
        row, col = (int(v) for v in missing[0])
        color = tuple(int(v) for v in rgba[row, col])
        raise ValueError(f"pixel ({col}, {row}) has color {color}, which is not in the palette")
    logger.debug("Read %dx%d PNG from %s", rgba.shape[1], rgba.shape[0], path)
    return Image(indices.astype(np.uint8))
