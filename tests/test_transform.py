"""Tests for transform.py - pixel-level image transforms."""

import pytest

from ahi.image import Image
from ahi.transform import crop, draw, fill_rect, flip_horz, flip_vert, rotate_ccw, rotate_cw


def _sample():
    # 3 wide, 2 high
    return Image([[1, 2, 3], [4, 5, 6]], tag="s", metadata=[7])


class TestFillRect:
    """Test rectangle filling."""

    def test_inside(self):
        image = Image.new(4, 3)
        fill_rect(image, 1, 1, 2, 1, 9)
        assert image.pixels.tolist() == [[0, 0, 0, 0], [0, 9, 9, 0], [0, 0, 0, 0]]

    def test_clipped(self):
        """Parts outside the image are ignored."""
        image = Image.new(3, 3)
        fill_rect(image, -1, 2, 10, 10, 4)
        assert image.pixels.tolist() == [[0, 0, 0], [0, 0, 0], [4, 4, 4]]

    def test_entirely_outside(self):
        image = Image.new(2, 2)
        fill_rect(image, 5, 5, 2, 2, 4)
        assert image == Image.new(2, 2)

    def test_bad_color(self):
        with pytest.raises(ValueError):
            fill_rect(Image.new(2, 2), 0, 0, 1, 1, 16)


class TestDraw:
    """Test compositing."""

    def test_zero_is_transparent(self):
        dest = Image([[1, 1], [1, 1]])
        src = Image([[0, 2], [3, 0]])
        draw(dest, src, 0, 0)
        assert dest.pixels.tolist() == [[1, 2], [3, 1]]

    def test_offset_and_clipping(self):
        dest = Image.new(3, 3)
        src = Image([[5, 6], [7, 8]])
        draw(dest, src, 2, -1)
        assert dest.pixels.tolist() == [[0, 0, 7], [0, 0, 0], [0, 0, 0]]

    def test_fully_outside(self):
        dest = Image.new(2, 2)
        draw(dest, Image([[5]]), -3, 0)
        assert dest == Image.new(2, 2)


class TestFlipsAndRotations:
    """Test the copy-returning transforms."""

    def test_flip_horz(self):
        result = flip_horz(_sample())
        assert result.pixels.tolist() == [[3, 2, 1], [6, 5, 4]]
        assert result.tag == "s" and result.metadata == [7]

    def test_flip_vert(self):
        assert flip_vert(_sample()).pixels.tolist() == [[4, 5, 6], [1, 2, 3]]

    def test_rotate_cw(self):
        result = rotate_cw(_sample())
        assert result.size == (2, 3)
        assert result.pixels.tolist() == [[4, 1], [5, 2], [6, 3]]

    def test_rotate_ccw(self):
        result = rotate_ccw(_sample())
        assert result.size == (2, 3)
        assert result.pixels.tolist() == [[3, 6], [2, 5], [1, 4]]

    def test_rotations_invert(self):
        image = _sample()
        assert rotate_ccw(rotate_cw(image)) == image

    def test_input_untouched(self):
        image = _sample()
        flipped = flip_horz(image)
        flipped[0, 0] = 0
        assert image == _sample()


class TestCrop:
    """Test canvas resizing."""

    def test_shrink(self):
        assert crop(_sample(), 2, 1).pixels.tolist() == [[1, 2]]

    def test_grow(self):
        result = crop(_sample(), 4, 3)
        assert result.pixels.tolist() == [[1, 2, 3, 0], [4, 5, 6, 0], [0, 0, 0, 0]]

    def test_to_zero(self):
        assert crop(_sample(), 0, 2).size == (0, 2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
