"""Render codepoints one by one or on a thread pool, always in ascending order."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

import numpy as np

from glyphdump.codepoints import merge_codepoints
from glyphdump.color import Color
from glyphdump.errors import GlyphNotFound
from glyphdump.raster import Scaling, colorize, rasterize

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RenderedGlyph:
    codepoint: int
    # RGBA, shape=(size, size, 4); None when the font has no glyph
    bitmap: Optional[np.ndarray]

    @property
    def skipped(self) -> bool:
        return self.bitmap is None


def render_glyph(font, codepoint: int, scaling: Scaling, color: Color) -> RenderedGlyph:
    try:
        outline = font.outline(codepoint)
    except GlyphNotFound:
        logger.warning("no glyph for U+%04X, skipping", codepoint)
        return RenderedGlyph(codepoint, None)
    coverage = rasterize(outline, scaling.scale(outline.metrics))
    return RenderedGlyph(codepoint, colorize(coverage, color))


class Dispatcher:
    def __init__(self, font, scaling: Scaling, color: Color):
        self.font = font
        self.scaling = scaling
        self.color = color

    def _render_one(self, codepoint: int) -> RenderedGlyph:
        return render_glyph(self.font, codepoint, self.scaling, self.color)

    def render(self, codepoints: Iterable[int]) -> Iterator[RenderedGlyph]:
        """Yield one `RenderedGlyph` per codepoint, in ascending codepoint order."""
        raise NotImplementedError


class SequentialDispatcher(Dispatcher):
    def render(self, codepoints: Iterable[int]) -> Iterator[RenderedGlyph]:
        for codepoint in merge_codepoints([codepoints]):
            yield self._render_one(codepoint)


class ParallelDispatcher(Dispatcher):
    def __init__(self, font, scaling: Scaling, color: Color, *, workers: Optional[int] = None):
        super().__init__(font, scaling, color)
        self.workers = workers if workers is not None else (os.cpu_count() or 1)

    def render(self, codepoints: Iterable[int]) -> Iterator[RenderedGlyph]:
        ordered = merge_codepoints([codepoints])
        logger.debug("rendering %d codepoints on %d workers", len(ordered), self.workers)
        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="glyphdump") as executor:
            # map() hands results back in submission order
            yield from executor.map(self._render_one, ordered)


def make_dispatcher(font, config) -> Dispatcher:
    if config.parallel:
        return ParallelDispatcher(font, config.scaling(), config.tint(), workers=config.workers)
    return SequentialDispatcher(font, config.scaling(), config.tint())
