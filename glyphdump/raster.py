"""Rasterize glyph outlines into coverage bitmaps and tint them."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from glyphdump.color import Color
from glyphdump.font import GlyphMetrics, Outline

SUPERSAMPLE = 4
# pixel rows rasterized per pass
BAND_ROWS = 16


def scale_for_size(metrics: GlyphMetrics, size: int) -> float:
    """Pixels per font unit so that the larger side of the glyph box spans `size` pixels."""
    if size <= 0:
        raise ValueError(f"size must be positive: {size}")
    return size / metrics.reference


def scale_for_factor(metrics: GlyphMetrics, factor: float) -> float:
    # native ratio is one pixel per font unit
    if factor <= 0.0:
        raise ValueError(f"scale factor must be positive: {factor}")
    return float(factor)


@dataclass(frozen=True)
class Scaling:
    """Either a target image size or an explicit scale factor, never both."""

    size: Optional[int] = None
    scale_factor: Optional[float] = None

    def __post_init__(self):
        if (self.size is None) == (self.scale_factor is None):
            raise ValueError("exactly one of size and scale_factor must be given")
        if self.size is not None and self.size <= 0:
            raise ValueError(f"size must be positive: {self.size}")
        if self.scale_factor is not None and self.scale_factor <= 0.0:
            raise ValueError(f"scale factor must be positive: {self.scale_factor}")

    def scale(self, metrics: GlyphMetrics) -> float:
        if self.size is not None:
            return scale_for_size(metrics, self.size)
        return scale_for_factor(metrics, self.scale_factor)


def canvas_size(metrics: GlyphMetrics, scale: float) -> int:
    return max(1, int(round(metrics.reference * scale)))


def _edges(outline: Outline, scale: float, side: int) -> np.ndarray:
    x_min, y_min, x_max, y_max = outline.metrics.bbox
    offset_x = (side - (x_max - x_min) * scale) / 2.0
    offset_y = (side - (y_max - y_min) * scale) / 2.0
    edges = []
    for contour in outline.contours:
        px = (contour[:, 0] - x_min) * scale + offset_x
        # font y axis points up, image rows go down
        py = (y_max - contour[:, 1]) * scale + offset_y
        points = np.stack([px, py], axis=1)
        edges.append(np.concatenate([points, np.roll(points, -1, axis=0)], axis=1))
    return np.concatenate(edges)


def _winding_numbers(edges: np.ndarray, width: int, first_row: int, row_count: int, supersample: int) -> np.ndarray:
    # edges[i] = (x0, y0, x1, y1) in pixel units; result has one entry per sample point
    # of the pixel rows first_row .. first_row + row_count - 1
    rows = row_count * supersample
    cols = width * supersample
    winding = np.zeros((rows, cols), dtype=np.int32)
    sample_y = first_row + (np.arange(rows) + 0.5) / supersample
    low = np.minimum(edges[:, 1], edges[:, 3])
    high = np.maximum(edges[:, 1], edges[:, 3])
    edges = edges[(low <= sample_y[-1]) & (high > sample_y[0])]
    if len(edges) == 0:
        return winding
    x0, y0, x1, y1 = edges.T
    low = np.minimum(y0, y1)
    high = np.maximum(y0, y1)
    crossing = (sample_y[:, None] >= low) & (sample_y[:, None] < high)
    row_index, edge_index = np.nonzero(crossing)

    ex0, ey0, ex1, ey1 = x0[edge_index], y0[edge_index], x1[edge_index], y1[edge_index]
    t = (sample_y[row_index] - ey0) / (ey1 - ey0)
    x_cross = ex0 + t * (ex1 - ex0)
    direction = np.where(ey1 > ey0, 1, -1).astype(np.int32)

    # a crossing at x_cross counts for every sample centre strictly to its left
    count = np.clip(np.ceil(x_cross * supersample - 0.5), 0, cols).astype(np.intp)
    diff = np.zeros((rows, cols + 1), dtype=np.int32)
    np.add.at(diff, (row_index, np.zeros_like(row_index)), direction)
    np.add.at(diff, (row_index, count), -direction)
    np.cumsum(diff[:, :cols], axis=1, dtype=np.int32, out=winding)
    return winding


def rasterize(outline: Outline, scale: float, *, supersample: int = SUPERSAMPLE) -> np.ndarray:
    """Render `outline` at `scale` pixels per font unit.

    Returns a square float32 array of coverage values in [0, 1]. The glyph
    box is centred in the square; pixels are filled with the nonzero winding
    rule, sampled on a `supersample` x `supersample` grid per pixel. Sample
    rows are processed `BAND_ROWS` pixel rows at a time.
    """
    side = canvas_size(outline.metrics, scale)
    coverage = np.zeros((side, side), dtype=np.float32)
    if outline.is_blank:
        return coverage
    edges = _edges(outline, scale, side)
    for first_row in range(0, side, BAND_ROWS):
        row_count = min(BAND_ROWS, side - first_row)
        winding = _winding_numbers(edges, side, first_row, row_count, supersample)
        inside = (winding != 0).reshape(row_count, supersample, side, supersample)
        coverage[first_row : first_row + row_count] = inside.mean(axis=(1, 3))
    return coverage


def colorize(coverage: np.ndarray, color: Color) -> np.ndarray:
    """RGBA uint8 bitmap with the tint as colour and the coverage as alpha."""
    if coverage.ndim != 2:
        raise ValueError(f"coverage must be 2-dimensional, got shape {coverage.shape}")
    height, width = coverage.shape
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[:, :, :3] = color.as_tuple()
    rgba[:, :, 3] = np.rint(np.clip(coverage, 0.0, 1.0) * 255.0).astype(np.uint8)
    return rgba
