"""Tests for files.py - file helpers and format detection."""

import os
import tempfile
from pathlib import Path

import pytest

import ahi
from ahi.collection import Collection
from ahi.errors import AhiError, ValueTooLarge
from ahi.files import detect_format, read_ahf, read_ahi, write_ahf, write_ahi
from ahi.font import Font, Glyph
from ahi.image import Image


class TestFileRoundTrip:
    """Test writing then reading files."""

    def test_ahi_round_trip(self):
        collection = Collection(images=[Image([[1, 2]], tag="a"), Image([[3]])])
        with tempfile.TemporaryDirectory() as tmp:
            path = write_ahi(Path(tmp) / "nested" / "sprites.ahi", collection)
            assert path.exists()
            assert read_ahi(str(path)) == collection

    def test_ahf_round_trip(self):
        font = Font.with_glyph_height(2)
        font.set_char_glyph("g", Glyph(Image([[1], [1]]), 1, 2))
        with tempfile.TemporaryDirectory() as tmp:
            path = write_ahf(os.path.join(tmp, "font.ahf"), font)
            assert read_ahf(path) == font

    def test_failed_write_leaves_no_file(self):
        """Encoding errors are raised before the file is created."""
        collection = Collection(images=[Image.new(0x10000, 1)])
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "big.ahi"
            with pytest.raises(ValueTooLarge):
                write_ahi(path, collection)
            assert not path.exists()

    def test_read_invalid(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.ahi"
            path.write_bytes(b"ahi0 w1 h1 n1\n\nZ\n")
            with pytest.raises(AhiError):
                read_ahi(path)


class TestDetectFormat:
    """Test magic-byte detection."""

    def test_detect(self):
        assert detect_format(b"ahi0 w0 h0 n0\n") == "ahi"
        assert detect_format(b"ahf0 h0 b0 n0\n") == "ahf"
        assert detect_format(b"\x89PNG") is None
        assert detect_format(b"") is None


class TestPackage:
    """Test the top-level package exports."""

    def test_exports(self):
        assert ahi.__version__
        for name in ahi.__all__:
            assert hasattr(ahi, name)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
