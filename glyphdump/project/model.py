"""Configuration and manifest schema."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from serde import deserialize, field, serialize

from glyphdump.color import Color
from glyphdump.errors import InvalidColor, InvalidConfig
from glyphdump.raster import Scaling

DEFAULT_SIZE = 64


@deserialize
@serialize
@dataclass
class RenderConfig:
    font: Optional[str] = field(default=None, skip_if_default=True)
    font_index: int = 0
    output_dir: str = "out"
    size: Optional[int] = field(default=None, skip_if_default=True)
    scale_factor: Optional[float] = field(default=None, skip_if_default=True)
    color: str = "#FFFFFF"
    ranges: List[str] = field(default_factory=list)
    codepoint_set: Optional[str] = field(default=None, skip_if_default=True)
    characters: Optional[str] = field(default=None, skip_if_default=True)
    parallel: bool = False
    workers: Optional[int] = field(default=None, skip_if_default=True)

    def validate(self) -> None:
        if self.font is None:
            raise InvalidConfig("no font file given")
        if self.font_index < 0:
            raise InvalidConfig(f"font index must not be negative: {self.font_index}")
        if self.workers is not None and self.workers <= 0:
            raise InvalidConfig(f"workers must be positive: {self.workers}")
        self.scaling()
        self.tint()

    def scaling(self) -> Scaling:
        if self.size is None and self.scale_factor is None:
            return Scaling(size=DEFAULT_SIZE)
        try:
            return Scaling(size=self.size, scale_factor=self.scale_factor)
        except ValueError as e:
            raise InvalidConfig(str(e)) from e

    def tint(self) -> Color:
        try:
            return Color.from_hex(self.color)
        except InvalidColor as e:
            raise InvalidConfig(str(e)) from e


@deserialize
@serialize
@dataclass
class Manifest:
    font: str
    font_index: int
    color: str
    size: Optional[int]
    scale_factor: Optional[float]
    parallel: bool
    written: List[int]
    skipped: List[int]
    failed: List[int]
    update_time: Optional[float]

    @property
    def ok(self) -> bool:
        return not self.failed


def new_manifest(config: RenderConfig) -> Manifest:
    scaling = config.scaling()
    return Manifest(
        font=config.font,
        font_index=config.font_index,
        color=config.tint().to_hex(),
        size=scaling.size,
        scale_factor=scaling.scale_factor,
        parallel=config.parallel,
        written=[],
        skipped=[],
        failed=[],
        update_time=datetime.now().timestamp(),
    )
