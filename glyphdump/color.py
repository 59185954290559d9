"""Tint colour."""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from glyphdump.errors import InvalidColor

_HEX_COLOR_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self):
        for name, value in (("red", self.r), ("green", self.g), ("blue", self.b)):
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise InvalidColor(f"{name} channel must be an integer in 0..255, got {value!r}")

    @classmethod
    def from_hex(cls, s: str) -> "Color":
        m = _HEX_COLOR_RE.fullmatch(s.strip())
        if m is None:
            raise InvalidColor(f"expected a hex color string like #RRGGBB, got: {s!r}")
        return cls(*(int(group, 16) for group in m.groups()))

    @classmethod
    def from_channels(
        cls, r: Optional[int], g: Optional[int], b: Optional[int], *, default: Optional["Color"] = None
    ) -> "Color":
        """Build a colour from separate channels; missing ones come from `default`."""
        if default is None:
            default = WHITE
        return cls(
            default.r if r is None else r,
            default.g if g is None else g,
            default.b if b is None else b,
        )

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


WHITE = Color(255, 255, 255)
