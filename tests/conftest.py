"""Shared fixtures: small TrueType fonts built with fontTools, and a fake font handle."""

import threading
import time

import numpy as np
import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphdump.errors import GlyphNotFound
from glyphdump.font import Outline

UNITS_PER_EM = 1000


def draw_ring(pen):
    # 600x600 square with a 200x200 hole in the middle
    pen.moveTo((100, 100))
    pen.lineTo((100, 700))
    pen.lineTo((700, 700))
    pen.lineTo((700, 100))
    pen.closePath()
    pen.moveTo((300, 300))
    pen.lineTo((500, 300))
    pen.lineTo((500, 500))
    pen.lineTo((300, 500))
    pen.closePath()


def draw_round(pen):
    # rounded square made of quadratic arcs
    pen.moveTo((500, 100))
    pen.qCurveTo((900, 100), (900, 500))
    pen.qCurveTo((900, 900), (500, 900))
    pen.qCurveTo((100, 900), (100, 500))
    pen.qCurveTo((100, 100), (500, 100))
    pen.closePath()


def draw_nothing(pen):
    pass


GLYPHS = {
    "space": (draw_nothing, 0),
    "A": (draw_ring, 100),
    "C": (draw_round, 100),
}


def build_font(path, cmap):
    """Write a TrueType font mapping `cmap` (codepoint -> glyph name) to `path`."""
    names = sorted(set(cmap.values()))
    glyph_order = [".notdef"] + names
    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap)
    glyphs = {}
    metrics = {}
    for name in glyph_order:
        draw, lsb = GLYPHS.get(name, (draw_nothing, 0))
        pen = TTGlyphPen(None)
        draw(pen)
        glyphs[name] = pen.glyph()
        metrics[name] = (1000, lsb)
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Glyphdump Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return str(path)


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    """Font with a space, 'A' and 'C' but no 'B'."""
    path = tmp_path_factory.mktemp("fonts") / "test.ttf"
    return build_font(path, {0x20: "space", 0x41: "A", 0x43: "C"})


@pytest.fixture(scope="session")
def only_a_font_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("fonts") / "only-a.ttf"
    return build_font(path, {0x41: "A"})


def square_outline(x0, y0, x1, y1, units_per_em=UNITS_PER_EM):
    contour = np.array([(x0, y0), (x0, y1), (x1, y1), (x1, y0)], dtype=np.float64)
    return Outline.from_contours([contour], units_per_em)


class FakeFont:
    """In-memory font handle; optionally sleeps so later codepoints finish first."""

    def __init__(self, outlines, *, delay=0.0):
        self.outlines = dict(outlines)
        self.delay = delay
        self.threads = set()
        self._lock = threading.Lock()

    def outline(self, codepoint):
        with self._lock:
            self.threads.add(threading.get_ident())
        if self.delay:
            # larger codepoints return sooner
            time.sleep(self.delay / (1 + codepoint % 16))
        if codepoint not in self.outlines:
            raise GlyphNotFound(codepoint)
        return self.outlines[codepoint]


@pytest.fixture
def fake_font():
    outlines = {cp: square_outline(0, 0, 100 + 10 * (cp % 7), 400) for cp in range(0x40, 0x60)}
    del outlines[0x42]
    del outlines[0x50]
    return FakeFont(outlines, delay=0.01)
