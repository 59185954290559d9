"""Render the glyphs of a font file to PNG images."""

__version__ = "0.1.0"
