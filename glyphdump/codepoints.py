"""Resolve codepoint ranges and named codepoint sets."""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from glyphdump.errors import InvalidRangeFormat, InvalidRangeOrder

CodepointSet = Tuple[int, ...]

# endpoints must fit in 32 bits; expansion stops at the last Unicode scalar
MAX_ENDPOINT = 0xFFFFFFFF
MAX_CODEPOINT = 0x10FFFF

_HEX_RE = re.compile(r"(?:0x|u\+)([0-9a-f]+)", re.IGNORECASE)
_DEC_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CodepointRange:
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidRangeOrder(self.start, self.end)

    def __iter__(self):
        return iter(range(self.start, min(self.end, MAX_CODEPOINT) + 1))

    def to_spec(self) -> str:
        return f"U+{self.start:04X}..U+{self.end:04X}"


def parse_codepoint(text: str) -> int:
    """Parse `0x41`, `U+0041` or `65` into the same integer."""
    s = text.strip()
    m = _HEX_RE.fullmatch(s)
    if m is not None:
        value = int(m.group(1), 16)
    elif _DEC_RE.fullmatch(s):
        value = int(s, 10)
    else:
        raise InvalidRangeFormat(f"invalid codepoint: {text!r}")
    if value > MAX_ENDPOINT:
        raise InvalidRangeFormat(f"codepoint out of range: {text!r}")
    return value


def parse_range(text: str) -> CodepointRange:
    s = text.strip()
    if ".." in s:
        start, _, end = s.partition("..")
    elif "-" in s:
        start, _, end = s.partition("-")
    else:
        start = end = s
    return parse_bounds(start, end)


def parse_bounds(start: str, end: str) -> CodepointRange:
    return CodepointRange(parse_codepoint(start), parse_codepoint(end))


def resolve_ranges(specs: Iterable[str]) -> CodepointSet:
    """Union of every range in `specs`, ascending and deduplicated.

    All ranges are parsed before anything is expanded, so a malformed or
    reversed range fails fast regardless of its position.
    """
    ranges = [parse_range(spec) for spec in specs]
    return merge_codepoints(ranges)


def merge_codepoints(groups: Iterable[Iterable[int]]) -> CodepointSet:
    return tuple(sorted({codepoint for group in groups for codepoint in group}))


def str_to_codepoints(s: str) -> List[int]:
    return [ord(c) for c in s if not c.isspace()]


def ranges_to_codepoints(codepoint_ranges: List[Tuple[int, int]]) -> List[int]:
    # half-open ranges
    return [
        codepoint for codepoint_range in codepoint_ranges for codepoint in range(codepoint_range[0], codepoint_range[1])
    ]


ASCII_CODEPOINT_RANGES = [(0x21, 0x7F)]
LATIN_1_CODEPOINT_RANGES = [(0x21, 0x7F), (0xA1, 0x100)]
HIRAGANA_CODEPOINT_RANGES = [(0x3041, 0x3097)]
KATAKANA_CODEPOINT_RANGES = [(0x30A1, 0x30FB)]
KANJI_CODEPOINT_RANGES = [
    (0x3400, 0x4DC0),
    (0x4E00, 0xA000),
    (0xF900, 0xFB00),
    (0x20000, 0x30000),
]

CODEPOINT_RANGES_MAP: Dict[str, List[Tuple[int, int]]] = {
    "ascii": ASCII_CODEPOINT_RANGES,
    "latin_1": LATIN_1_CODEPOINT_RANGES,
    "hiragana": HIRAGANA_CODEPOINT_RANGES,
    "katakana": KATAKANA_CODEPOINT_RANGES,
    "kanji": KANJI_CODEPOINT_RANGES,
}


def find_codepoints(key: str, *, map: Optional[Dict[str, List[Tuple[int, int]]]] = None) -> CodepointSet:
    if map is None:
        map = CODEPOINT_RANGES_MAP
    ranges = map.get(key.replace("-", "_").lower())
    if ranges is None:
        raise InvalidRangeFormat(f"unknown codepoint set: {key} (choose from {', '.join(sorted(map))})")
    return merge_codepoints([ranges_to_codepoints(ranges)])
