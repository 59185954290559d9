"""Load glyph outlines from font files with FreeType."""

import io
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import freetype
import numpy as np

from glyphdump.errors import FontLoadFailure, GlyphNotFound

logger = logging.getLogger(__name__)

CURVE_STEPS = 16

_TAG_ON = 1
_TAG_CONIC = 0
_TAG_CUBIC = 2

_LOAD_FLAGS = freetype.FT_LOAD_NO_SCALE | freetype.FT_LOAD_NO_BITMAP

_FREETYPE_LOCK = threading.Lock()


@dataclass(frozen=True)
class GlyphMetrics:
    # bbox in font units: (x_min, y_min, x_max, y_max)
    bbox: Tuple[float, float, float, float]
    units_per_em: int

    @property
    def width(self) -> float:
        return self.bbox[2] - self.bbox[0]

    @property
    def height(self) -> float:
        return self.bbox[3] - self.bbox[1]

    @property
    def reference(self) -> float:
        """Dimension mapped onto the image side; the em square for blank glyphs."""
        extent = max(self.width, self.height)
        return extent if extent > 0 else float(self.units_per_em)


@dataclass(frozen=True, eq=False)
class Outline:
    # closed polygons in font units, y axis pointing up
    contours: Tuple[np.ndarray, ...]
    metrics: GlyphMetrics

    @classmethod
    def from_contours(cls, contours: Sequence[np.ndarray], units_per_em: int) -> "Outline":
        contours = tuple(np.asarray(c, dtype=np.float64).reshape(-1, 2) for c in contours if len(c) > 0)
        if contours:
            stacked = np.concatenate(contours)
            x_min, y_min = stacked.min(axis=0)
            x_max, y_max = stacked.max(axis=0)
            bbox = (float(x_min), float(y_min), float(x_max), float(y_max))
        else:
            bbox = (0.0, 0.0, 0.0, 0.0)
        return cls(contours=contours, metrics=GlyphMetrics(bbox=bbox, units_per_em=units_per_em))

    @property
    def is_blank(self) -> bool:
        return len(self.contours) == 0


def _midpoint(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return (a + b) * 0.5


def _quadratic(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, steps: int) -> np.ndarray:
    t = (np.arange(1, steps + 1) / steps)[:, None]
    mt = 1.0 - t
    return mt * mt * p0 + 2.0 * mt * t * p1 + t * t * p2


def _cubic(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, p3: np.ndarray, steps: int) -> np.ndarray:
    t = (np.arange(1, steps + 1) / steps)[:, None]
    mt = 1.0 - t
    return mt ** 3 * p0 + 3.0 * mt * mt * t * p1 + 3.0 * mt * t * t * p2 + t ** 3 * p3


def _point_kind(tag: int) -> int:
    # bit 0: on the curve; bit 1 (off-curve points only): cubic control
    if tag & 1:
        return _TAG_ON
    return _TAG_CUBIC if tag & 2 else _TAG_CONIC


def flatten_contour(
    points: Sequence[Tuple[float, float]], tags: Sequence[int], *, steps: int = CURVE_STEPS
) -> np.ndarray:
    """Flatten one FreeType contour (on, conic and cubic points) into a closed polygon."""
    pts = [np.asarray(p, dtype=np.float64) for p in points]
    kinds = [_point_kind(tag) for tag in tags]
    if _TAG_ON in kinds:
        first = kinds.index(_TAG_ON)
        pts = pts[first:] + pts[:first]
        kinds = kinds[first:] + kinds[:first]
    else:
        # only conic control points: start on the implied point between the last and the first
        pts = [_midpoint(pts[-1], pts[0])] + pts
        kinds = [_TAG_ON] + kinds
    pts.append(pts[0])
    kinds.append(_TAG_ON)

    current = pts[0]
    result: List[np.ndarray] = [current[None, :]]
    i = 1
    while i < len(pts):
        kind = kinds[i]
        if kind == _TAG_ON:
            current = pts[i]
            result.append(current[None, :])
            i += 1
        elif kind == _TAG_CONIC:
            control = pts[i]
            if kinds[i + 1] == _TAG_CONIC:
                end = _midpoint(control, pts[i + 1])
                i += 1
            else:
                end = pts[i + 1]
                i += 2
            result.append(_quadratic(current, control, end, steps))
            current = end
        else:
            if i + 2 >= len(pts):
                raise ValueError("truncated cubic segment in contour")
            control1, control2, end = pts[i], pts[i + 1], pts[i + 2]
            result.append(_cubic(current, control1, control2, end, steps))
            current = end
            i += 3
    return np.concatenate(result)


def _outline_contours(outline: "freetype.Outline") -> List[np.ndarray]:
    points = outline.points
    tags = outline.tags
    contours = []
    begin = 0
    for end in outline.contours:
        if end >= begin:
            contours.append(flatten_contour(points[begin : end + 1], tags[begin : end + 1]))
        begin = end + 1
    return contours


class FontHandle:
    """Read-only view of one face in a font file.

    The font bytes are read once and shared. Every glyph load mutates the
    face, so each thread lazily opens its own FreeType face on those bytes.
    FreeType faces share one library object, so they are only created and
    released while holding `_FREETYPE_LOCK`. `close()` releases them all;
    the handle reopens faces on demand afterwards.
    """

    def __init__(self, data: bytes, *, index: int = 0, path: Optional[str] = None):
        self._data = data
        self.index = index
        self.path = path if path is not None else "<memory>"
        # thread ident -> face
        self._faces: Dict[int, freetype.Face] = {}
        face = self._face()
        self.units_per_em: int = face.units_per_EM
        self.family_name = face.family_name.decode("utf-8", "replace") if face.family_name else None
        if not self.units_per_em:
            raise FontLoadFailure(f"{self.path}: not a scalable font")
        logger.debug("loaded %s (face %d, %d units/em)", self.path, index, self.units_per_em)

    @classmethod
    def open(cls, path: str, index: int = 0) -> "FontHandle":
        try:
            with open(path, "rb") as font_file:
                data = font_file.read()
        except OSError as e:
            raise FontLoadFailure(f"cannot read font file {path}: {e}") from e
        return cls(data, index=index, path=path)

    def __enter__(self) -> "FontHandle":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _face(self) -> freetype.Face:
        ident = threading.get_ident()
        face = self._faces.get(ident)
        if face is None:
            with _FREETYPE_LOCK:
                try:
                    face = freetype.Face(io.BytesIO(self._data), self.index)
                except freetype.FT_Exception as e:
                    raise FontLoadFailure(f"{self.path}: invalid font: {e}") from e
                self._faces[ident] = face
        return face

    @property
    def open_faces(self) -> int:
        return len(self._faces)

    def close(self) -> None:
        """Release every FreeType face opened by this handle."""
        with _FREETYPE_LOCK:
            faces = self._faces
            self._faces = {}
            count = len(faces)
            # dropping the last reference runs FT_Done_Face
            del faces
        logger.debug("released %d faces of %s", count, self.path)

    def codepoints(self) -> List[int]:
        """Every codepoint the character map covers, ascending."""
        face = self._face()
        return sorted({charcode for charcode, glyph_index in face.get_chars() if glyph_index != 0})

    def outline(self, codepoint: int) -> Outline:
        face = self._face()
        glyph_index = face.get_char_index(codepoint)
        if glyph_index == 0:
            raise GlyphNotFound(codepoint)
        try:
            face.load_glyph(glyph_index, _LOAD_FLAGS)
        except freetype.FT_Exception as e:
            logger.debug("failed to load glyph %d for U+%04X: %s", glyph_index, codepoint, e)
            raise GlyphNotFound(codepoint) from e
        return Outline.from_contours(_outline_contours(face.glyph.outline), self.units_per_em)
