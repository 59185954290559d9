"""Tests for glyphdump.writer."""

import numpy as np
import pytest
from PIL import Image

from glyphdump.dispatch import RenderedGlyph
from glyphdump.errors import ImageWriteFailure
from glyphdump.writer import ImageWriter, bitmap_to_asciiart, glyph_filename


def _glyph(codepoint=0x41, size=4):
    bitmap = np.zeros((size, size, 4), dtype=np.uint8)
    bitmap[:, :, 1] = 255
    bitmap[1:3, 1:3, 3] = 255
    return RenderedGlyph(codepoint, bitmap)


def test_filename_is_hex_codepoint():
    assert glyph_filename(0x41) == "uni0041.png"
    assert glyph_filename(0x1F600) == "uni1F600.png"


def test_write_png(tmp_path):
    writer = ImageWriter(str(tmp_path / "nested" / "out"))
    path = writer.write(_glyph())
    assert path.endswith("uni0041.png")
    with Image.open(path) as image:
        assert image.mode == "RGBA"
        assert image.size == (4, 4)
        assert image.getpixel((0, 0)) == (0, 255, 0, 0)
        assert image.getpixel((1, 1)) == (0, 255, 0, 255)


def test_write_skipped_glyph_is_an_error(tmp_path):
    with pytest.raises(ValueError):
        ImageWriter(str(tmp_path)).write(RenderedGlyph(0x42, None))


def test_write_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    writer = ImageWriter(str(blocker))
    with pytest.raises(ImageWriteFailure) as exc_info:
        writer.write(_glyph(0x43))
    assert exc_info.value.codepoint == 0x43
    assert exc_info.value.path.endswith("uni0043.png")


def test_asciiart():
    alpha = np.array([[0, 10, 100], [200, 255, 0]], dtype=np.uint8)
    assert bitmap_to_asciiart(alpha) == "  --++\n**%%  \n"
