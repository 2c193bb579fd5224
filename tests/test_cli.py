"""Tests for cli.py - the ahi command."""

import tempfile
from pathlib import Path

import pytest

from ahi.cli import main
from ahi.collection import Collection
from ahi.files import read_ahi, write_ahf, write_ahi
from ahi.font import Font, Glyph
from ahi.image import Image
from ahi.palette import Palette


@pytest.fixture
def workdir():
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


def _write_sprites(path):
    collection = Collection(images=[Image([[1, 2]], tag="idle", metadata=[4]), Image([[3]])])
    return write_ahi(path, collection)


class TestInfo:
    """Test the info command."""

    def test_ahi(self, workdir, capsys):
        path = _write_sprites(workdir / "sprites.ahi")
        assert main(["info", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Format: AHI (canonical v1, flags 0x7)" in out
        assert "[0] 2x1 tag='idle' metadata=[4]" in out
        assert "[1] 1x1" in out

    def test_ahf(self, workdir, capsys):
        font = Font.with_glyph_height(1)
        font.set_char_glyph("a", Glyph(Image([[1]]), 0, 2))
        path = write_ahf(workdir / "font.ahf", font)
        assert main(["info", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Glyph height: 1" in out
        assert "'a': w1 l0 r2" in out

    def test_missing_file(self, workdir, capsys):
        assert main(["info", str(workdir / "nope.ahi")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_unknown_format(self, workdir, capsys):
        path = workdir / "x.txt"
        path.write_bytes(b"hello")
        assert main(["info", str(path)]) == 1
        assert "not an AHI or AHF file" in capsys.readouterr().err


class TestVerify:
    """Test the verify command."""

    def test_valid_and_canonical(self, workdir, capsys):
        path = _write_sprites(workdir / "sprites.ahi")
        assert main(["verify", "--strict", str(path)]) == 0
        assert "canonical" in capsys.readouterr().out

    def test_non_canonical(self, workdir, capsys):
        path = workdir / "v1.ahi"
        path.write_bytes(b"ahi1 f0 p0 i0 w0 h0\n")
        assert main(["verify", str(path)]) == 0
        assert main(["verify", "--strict", str(path)]) == 1
        assert "not canonical" in capsys.readouterr().out

    def test_invalid(self, workdir, capsys):
        path = workdir / "bad.ahi"
        path.write_bytes(b"ahi0 w1 h1 n1\n\nz\n")
        assert main(["verify", str(path)]) == 1
        assert "invalid pixel character" in capsys.readouterr().out


class TestNormalize:
    """Test the normalize command."""

    def test_rewrite(self, workdir):
        source = workdir / "v1.ahi"
        source.write_bytes(b"ahi1 f0 p0 i1 w1 h1\n\n5\n")
        output = workdir / "out.ahi"
        assert main(["normalize", str(source), "--output", str(output)]) == 0
        assert output.read_bytes() == b"ahi0 w1 h1 n1\n\n5\n"

    def test_force_version(self, workdir):
        source = workdir / "v0.ahi"
        source.write_bytes(b"ahi0 w1 h1 n1\n\n5\n")
        assert main(["normalize", str(source), "--version", "1"]) == 0
        assert source.read_bytes() == b"ahi1 f0 p0 i1 w1 h1\n\n5\n"

    def test_force_version_fails(self, workdir, capsys):
        path = _write_sprites(workdir / "sprites.ahi")
        assert main(["normalize", str(path), "--version", "0"]) == 1
        assert "cannot be written in AHI version 0" in capsys.readouterr().err


class TestPng:
    """Test the PNG commands."""

    def test_round_trip(self, workdir, capsys):
        pytest.importorskip("cv2", reason="opencv-python required")
        collection = Collection(images=[Image([[1, 2]]), Image([[3, 0]])])
        ahi_path = write_ahi(workdir / "walk.ahi", collection)
        assert main(["to-png", str(ahi_path), "--output-dir", str(workdir / "png")]) == 0
        pngs = [str(workdir / "png" / f"walk.{i}.png") for i in range(2)]
        output = workdir / "back.ahi"
        assert main(["from-png", *pngs, "--output", str(output), "--tags"]) == 0
        result = read_ahi(output)
        assert [image.tag for image in result.images] == ["walk.0", "walk.1"]
        assert [image.pixels.tolist() for image in result.images] == [[[1, 2]], [[3, 0]]]

    def test_palette_from(self, workdir):
        pytest.importorskip("cv2", reason="opencv-python required")
        palette = Palette.default().copy()
        palette.set(1, (1, 2, 3, 255))
        source = write_ahi(workdir / "pal.ahi", Collection(palettes=[palette], images=[Image([[1]])]))
        assert main(["to-png", str(source), "--palette", "0"]) == 0
        output = workdir / "out.ahi"
        assert main(["from-png", str(workdir / "pal.png"), "--output", str(output),
                     "--palette-from", str(source)]) == 0
        result = read_ahi(output)
        assert result.palettes == [palette]
        assert result.images[0].pixels.tolist() == [[1]]

    def test_bad_palette_index(self, workdir, capsys):
        path = _write_sprites(workdir / "sprites.ahi")
        assert main(["to-png", str(path), "--palette", "2"]) == 1
        assert "palette 2 does not exist" in capsys.readouterr().err


class TestMain:
    """Test top-level behaviour."""

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
