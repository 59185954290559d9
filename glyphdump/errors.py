"""Errors raised while resolving, rendering and writing glyphs."""

from typing import Optional


class GlyphDumpError(Exception):
    pass


class InvalidRangeFormat(GlyphDumpError, ValueError):
    pass


class InvalidRangeOrder(GlyphDumpError, ValueError):
    def __init__(self, start: int, end: int):
        super().__init__(f"invalid range: start U+{start:04X} is greater than end U+{end:04X}")
        self.start = start
        self.end = end


class InvalidColor(GlyphDumpError, ValueError):
    pass


class FontLoadFailure(GlyphDumpError):
    pass


class GlyphNotFound(GlyphDumpError):
    def __init__(self, codepoint: int):
        super().__init__(f"glyph not defined for U+{codepoint:04X}")
        self.codepoint = codepoint


class ImageWriteFailure(GlyphDumpError):
    def __init__(self, codepoint: int, path: str, cause: Optional[BaseException] = None):
        message = f"could not write U+{codepoint:04X} to {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.codepoint = codepoint
        self.path = path


class InvalidConfig(GlyphDumpError, ValueError):
    pass
