"""Command Line Interface."""

import argparse
import dataclasses
import logging
import os
import sys
from typing import List, Optional

from glyphdump.codepoints import (
    CodepointSet,
    find_codepoints,
    merge_codepoints,
    parse_bounds,
    resolve_ranges,
    str_to_codepoints,
)
from glyphdump.color import Color
from glyphdump.dispatch import make_dispatcher
from glyphdump.errors import GlyphDumpError, ImageWriteFailure
from glyphdump.font import FontHandle
from glyphdump.project import RenderConfig, dump_config, dump_manifest, load_config, new_manifest
from glyphdump.writer import ImageWriter, bitmap_to_asciiart

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_WRITE_FAILURE = 3

_LOG_FORMAT = "%(levelname)s: %(message)s"

_log_handler: Optional[logging.Handler] = None


def _setup_logging(verbose: bool, quiet: bool) -> None:
    global _log_handler
    package_logger = logging.getLogger("glyphdump")
    if verbose:
        package_logger.setLevel(logging.DEBUG)
    elif quiet:
        package_logger.setLevel(logging.ERROR)
    else:
        package_logger.setLevel(logging.INFO)
    # sys.stderr may have been replaced since the previous call
    if _log_handler is not None:
        package_logger.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(_log_handler)


def _args_to_config(args, base: RenderConfig) -> RenderConfig:
    changes = {}
    if args.font_file is not None:
        changes["font"] = args.font_file
    if args.font_index is not None:
        changes["font_index"] = args.font_index
    if args.output_dir is not None:
        changes["output_dir"] = args.output_dir
    if args.img_size is not None:
        changes.update(size=args.img_size, scale_factor=None)
    elif args.scale_factor is not None:
        changes.update(size=None, scale_factor=args.scale_factor)
    if args.color is not None:
        changes["color"] = Color.from_hex(args.color).to_hex()
    elif (args.color_red, args.color_green, args.color_blue) != (None, None, None):
        color = Color.from_channels(args.color_red, args.color_green, args.color_blue, default=base.tint())
        changes["color"] = color.to_hex()

    ranges: List[str] = list(args.unicode_range or [])
    if args.unicode_range_start is not None:
        ranges.append(parse_bounds(args.unicode_range_start, args.unicode_range_end).to_spec())
    if ranges or args.codepoint_set is not None or args.characters is not None:
        # an explicit selection on the command line replaces the one from the config file
        changes.update(ranges=ranges, codepoint_set=args.codepoint_set, characters=args.characters)

    if args.parallel:
        changes["parallel"] = True
    if args.workers is not None:
        changes["workers"] = args.workers
    return dataclasses.replace(base, **changes)


def resolve_selection(config: RenderConfig) -> Optional[CodepointSet]:
    """Codepoints selected by `config`, or None to render everything the font maps."""
    groups = []
    if config.ranges:
        groups.append(resolve_ranges(config.ranges))
    if config.codepoint_set is not None:
        groups.append(find_codepoints(config.codepoint_set))
    if config.characters is not None:
        groups.append(str_to_codepoints(config.characters))
    if not groups:
        return None
    return merge_codepoints(groups)


def _open(config: RenderConfig):
    # the selection is resolved before the font is touched, so range errors come first
    selection = resolve_selection(config)
    font = FontHandle.open(config.font, config.font_index)
    codepoints = font.codepoints() if selection is None else selection
    return font, codepoints


def preview(config: RenderConfig, *, file=None) -> int:
    if file is None:
        file = sys.stdout
    font, codepoints = _open(config)
    with font:
        for glyph in make_dispatcher(font, config).render(codepoints):
            if glyph.skipped:
                continue
            print(f"{chr(glyph.codepoint)} (U+{glyph.codepoint:04X})", file=file)
            print(bitmap_to_asciiart(glyph.bitmap[:, :, 3]), file=file)
    return EXIT_OK


def run(config: RenderConfig) -> int:
    """Render every selected glyph of `config.font` into `config.output_dir`.

    Invalid ranges and unreadable fonts raise before anything is rendered.
    Missing glyphs and failed writes are logged and recorded in the manifest.
    """
    font, codepoints = _open(config)
    logger.info("rendering %d codepoints from %s", len(codepoints), config.font)

    writer = ImageWriter(config.output_dir)
    manifest = new_manifest(config)
    with font:
        for glyph in make_dispatcher(font, config).render(codepoints):
            if glyph.skipped:
                manifest.skipped.append(glyph.codepoint)
                continue
            try:
                writer.write(glyph)
            except ImageWriteFailure as e:
                logger.warning("%s", e)
                manifest.failed.append(glyph.codepoint)
                continue
            manifest.written.append(glyph.codepoint)

    logger.info(
        "%d written, %d skipped, %d failed",
        len(manifest.written),
        len(manifest.skipped),
        len(manifest.failed),
    )
    try:
        os.makedirs(config.output_dir, exist_ok=True)
        dump_manifest(config.output_dir, manifest)
    except OSError as e:
        logger.error("could not write manifest to %s: %s", config.output_dir, e)
        return EXIT_WRITE_FAILURE
    return EXIT_OK if manifest.ok else EXIT_WRITE_FAILURE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glyphdump", description="Render the glyphs of a font file to PNG images.")
    parser.add_argument("-F", "--font-file", help="font file")
    parser.add_argument("-I", "--font-index", type=int, help="font index [default: 0]")
    parser.add_argument("-o", "--output-dir", help="output directory [default: out]")

    size_group = parser.add_mutually_exclusive_group()
    size_group.add_argument("-S", "--img-size", type=int, help="image size in pixels [default: 64]")
    size_group.add_argument("--scale-factor", type=float, help="pixels per font unit")

    parser.add_argument("--color", help="tint as #RRGGBB [default: #FFFFFF]")
    parser.add_argument("--color-red", type=int, help="red channel of the tint (0-255)")
    parser.add_argument("--color-green", type=int, help="green channel of the tint (0-255)")
    parser.add_argument("--color-blue", type=int, help="blue channel of the tint (0-255)")

    parser.add_argument(
        "-r",
        "--unicode-range",
        action="append",
        help="codepoint range like 0x41..0x5A, U+0041..U+005A or 65..90 (repeatable)",
    )
    parser.add_argument("--unicode-range-start", help="first codepoint of the range")
    parser.add_argument("--unicode-range-end", help="last codepoint of the range")
    parser.add_argument("-c", "--codepoint-set", help="codepoint set (ascii|latin-1|hiragana|katakana|kanji)")
    parser.add_argument("-s", "--characters", help="characters")

    parser.add_argument("-p", "--parallel", help="render on a thread pool", default=False, action="store_true")
    parser.add_argument("-j", "--workers", type=int, help="number of worker threads [default: CPU count]")

    parser.add_argument("--config", help="TOML config file")
    parser.add_argument("--dump-config", help="print the effective config and exit", action="store_true")
    parser.add_argument("--preview", help="print glyphs as ASCII art instead of writing images", action="store_true")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", help="show debug messages", action="store_true")
    verbosity.add_argument("-q", "--quiet", help="only show errors", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    channels = (args.color_red, args.color_green, args.color_blue)
    if args.color is not None and channels != (None, None, None):
        parser.error("--color cannot be combined with --color-red/--color-green/--color-blue")
    if (args.unicode_range_start is None) != (args.unicode_range_end is None):
        parser.error("--unicode-range-start and --unicode-range-end must be given together")
    _setup_logging(args.verbose, args.quiet)

    try:
        base = load_config(args.config) if args.config is not None else RenderConfig()
        config = _args_to_config(args, base)
        if args.dump_config:
            print(dump_config(config), end="")
            return EXIT_OK
        config.validate()
        if args.preview:
            return preview(config)
        return run(config)
    except GlyphDumpError as e:
        logger.error("%s", e)
        return EXIT_FATAL
