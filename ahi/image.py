"""
Images: rectangular grids of palette color indices.

Pixels are stored as a (height, width) uint8 numpy array, row-major, so
pixel (col, row) lives at pixels[row, col]. Zero-area images keep their
shape, e.g. a 0x3 glyph image is an array of shape (3, 0).

Grid text layout: one line per row, one pixel character per column, every
row (including the last) ended by a newline.
"""

from typing import List, Optional, Sequence

import numpy as np

from ahi.color import NUM_COLORS, decode_row, encode_rows
from ahi.errors import PixelIndexError
from ahi.palette import Palette
from ahi.tokens import TokenReader


class Image:
    """
    A single 16-color image, with an optional string tag and metadata.

    Args:
        pixels: 2D array-like of color indices, shape (height, width)
        tag: Free-form string; "" means no tag
        metadata: Signed 16-bit integers; empty means no metadata

    Example:
        >>> image = Image.new(2, 2)
        >>> image[0, 1] = 5
        >>> image.pixels.tolist()
        [[0, 0], [5, 0]]
    """

    def __init__(self, pixels, tag: str = "", metadata: Optional[Sequence[int]] = None):
        grid = np.array(pixels, dtype=np.int64)
        if grid.ndim != 2:
            raise ValueError(f"pixels must be a 2D grid, got shape {grid.shape}")
        if grid.size and (grid.min() < 0 or grid.max() >= NUM_COLORS):
            raise ValueError("pixel color indices must be in 0..15")
        self._pixels = grid.astype(np.uint8)
        self.tag = tag
        self.metadata: List[int] = [int(v) for v in metadata] if metadata is not None else []

    @classmethod
    def new(cls, width: int, height: int) -> "Image":
        """Create a fully transparent image of the given size."""
        if width < 0 or height < 0:
            raise ValueError(f"image size must be nonnegative, got {width}x{height}")
        return cls(np.zeros((height, width), dtype=np.uint8))

    @property
    def pixels(self) -> np.ndarray:
        """The (height, width) uint8 color index array (mutable in place)."""
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self):
        return (self.width, self.height)

    def _check_index(self, col: int, row: int) -> None:
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise PixelIndexError(col, row, self.width, self.height)

    def get_pixel(self, col: int, row: int) -> int:
        """Return the color at (col, row); raises PixelIndexError when outside."""
        self._check_index(col, row)
        return int(self._pixels[row, col])

    def set_pixel(self, col: int, row: int, color: int) -> None:
        """Set the color at (col, row); raises PixelIndexError when outside."""
        self._check_index(col, row)
        if not 0 <= color < NUM_COLORS:
            raise ValueError(f"color index must be in 0..15, got {color}")
        self._pixels[row, col] = color

    def __getitem__(self, index) -> int:
        col, row = index
        return self.get_pixel(col, row)

    def __setitem__(self, index, color: int) -> None:
        col, row = index
        self.set_pixel(col, row, color)

    def clear(self) -> None:
        """Set every pixel to transparent (color 0)."""
        self._pixels[:] = 0

    def copy(self) -> "Image":
        return Image(self._pixels, tag=self.tag, metadata=list(self.metadata))

    def rgba_data(self, palette: Optional[Palette] = None) -> bytes:
        """Return row-major RGBA bytes for the image under `palette`."""
        palette = palette or Palette.default()
        return palette.lookup(self._pixels).tobytes()

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self._pixels.shape == other._pixels.shape
            and bool(np.array_equal(self._pixels, other._pixels))
            and self.tag == other.tag
            and self.metadata == other.metadata
        )

    def __repr__(self) -> str:
        extras = ""
        if self.tag:
            extras += f", tag={self.tag!r}"
        if self.metadata:
            extras += f", metadata={self.metadata!r}"
        return f"Image({self.width}x{self.height}{extras})"


def read_grid(reader: TokenReader, width: int, height: int) -> np.ndarray:
    """
    Read `height` rows of `width` pixel characters, each ended by a newline.

    Returns:
        (height, width) uint8 array
    """
    rows = []
    for _ in range(height):
        start = reader.offset
        data = reader.read_bytes(width, "pixel row")
        rows.append(decode_row(data, start))
        reader.read_exactly(b"\n")
    if not rows:
        return np.zeros((0, width), dtype=np.uint8)
    return np.stack(rows)


def write_grid(pixels: np.ndarray) -> bytes:
    """Write a pixel grid as newline-terminated rows, top to bottom."""
    return encode_rows(pixels)
