"""
Pixel-level image transforms.

fill_rect and draw modify the target image in place; every other transform
returns a new Image and leaves its input untouched. Returned images keep the
source image's tag and metadata.
"""

import numpy as np

from ahi.color import NUM_COLORS
from ahi.image import Image


def _clamp(value: int, upper: int) -> int:
    return min(max(0, value), upper)


def _derived(image: Image, pixels: np.ndarray) -> Image:
    return Image(pixels, tag=image.tag, metadata=list(image.metadata))


def fill_rect(image: Image, x: int, y: int, width: int, height: int, color: int) -> None:
    """
    Set every pixel in a rectangle to `color`.

    The rectangle may extend past any edge of the image (or lie entirely
    outside it); only the overlapping part is filled.
    """
    if not 0 <= color < NUM_COLORS:
        raise ValueError(f"color index must be in 0..15, got {color}")
    if width < 0 or height < 0:
        raise ValueError(f"rectangle size must be nonnegative, got {width}x{height}")
    start_row = _clamp(y, image.height)
    end_row = _clamp(y + height, image.height)
    start_col = _clamp(x, image.width)
    end_col = _clamp(x + width, image.width)
    image.pixels[start_row:end_row, start_col:end_col] = color


def draw(dest: Image, src: Image, x: int, y: int) -> None:
    """
    Draw `src` onto `dest` with its top-left corner at (x, y).

    Color 0 in `src` is treated as transparent and leaves `dest` unchanged.
    Parts of `src` falling outside `dest` are clipped.
    """
    src_row = _clamp(-y, src.height)
    src_col = _clamp(-x, src.width)
    dest_row = _clamp(y, dest.height)
    dest_col = _clamp(x, dest.width)
    num_rows = min(src.height - src_row, dest.height - dest_row)
    num_cols = min(src.width - src_col, dest.width - dest_col)
    if num_rows <= 0 or num_cols <= 0:
        return
    patch = src.pixels[src_row:src_row + num_rows, src_col:src_col + num_cols]
    target = dest.pixels[dest_row:dest_row + num_rows, dest_col:dest_col + num_cols]
    mask = patch != 0
    target[mask] = patch[mask]


def flip_horz(image: Image) -> Image:
    """Mirror left to right."""
    return _derived(image, image.pixels[:, ::-1])


def flip_vert(image: Image) -> Image:
    """Mirror top to bottom."""
    return _derived(image, image.pixels[::-1, :])


def rotate_cw(image: Image) -> Image:
    """Rotate 90 degrees clockwise; width and height swap."""
    return _derived(image, np.rot90(image.pixels, k=-1))


def rotate_ccw(image: Image) -> Image:
    """Rotate 90 degrees counterclockwise; width and height swap."""
    return _derived(image, np.rot90(image.pixels, k=1))


def crop(image: Image, width: int, height: int) -> Image:
    """
    Resize the canvas to width x height, anchored at the top-left.

    Pixels past the new right/bottom edge are dropped; new area is filled
    with transparent (color 0) pixels.
    """
    result = _derived(image, np.zeros((height, width), dtype=np.uint8))
    draw(result, image, 0, 0)
    return result
