"""Write rendered glyphs as PNG files."""

import logging
import os

import numpy as np
from PIL import Image

from glyphdump.dispatch import RenderedGlyph
from glyphdump.errors import ImageWriteFailure

logger = logging.getLogger(__name__)


def glyph_filename(codepoint: int) -> str:
    return f"uni{codepoint:04X}.png"


class ImageWriter:
    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        self._prepared = False

    def _prepare(self):
        if not self._prepared:
            os.makedirs(self.output_dir, exist_ok=True)
            self._prepared = True

    def path_for(self, codepoint: int) -> str:
        return os.path.join(self.output_dir, glyph_filename(codepoint))

    def write(self, glyph: RenderedGlyph) -> str:
        if glyph.bitmap is None:
            raise ValueError(f"nothing to write for U+{glyph.codepoint:04X}")
        path = self.path_for(glyph.codepoint)
        try:
            self._prepare()
            Image.fromarray(glyph.bitmap).save(path, format="PNG")
        except (OSError, ValueError) as e:
            raise ImageWriteFailure(glyph.codepoint, path, e) from e
        logger.debug("wrote %s", path)
        return path


def _bitmap_value_to_str(x: int) -> str:
    if x == 255:
        return "%%"
    if x > 192:
        return "**"
    elif x > 64:
        return "++"
    elif x > 0:
        return "--"
    else:
        return "  "


def bitmap_to_asciiart(bitmap: np.ndarray) -> str:
    # bitmap: alpha channel, shape=(height, width)
    s = ""
    for i in range(bitmap.shape[0]):
        s += "".join(_bitmap_value_to_str(x) for x in bitmap[i]) + "\n"
    return s
