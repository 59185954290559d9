"""Tests for glyphdump.project: TOML config and JSON manifest."""

import pytest
from serde.json import from_json

from glyphdump.errors import InvalidConfig
from glyphdump.project import Manifest, RenderConfig, dump_config, dump_manifest, load_config, new_manifest
from glyphdump.raster import Scaling


def test_load_config(tmp_path):
    path = tmp_path / "glyphdump.toml"
    path.write_text(
        'font = "fonts/test.ttf"\n'
        "size = 32\n"
        'color = "#00ff00"\n'
        'ranges = ["0x41..0x43", "U+0061"]\n'
        "parallel = true\n"
    )
    config = load_config(str(path))
    assert config.font == "fonts/test.ttf"
    assert config.font_index == 0
    assert config.output_dir == "out"
    assert config.ranges == ["0x41..0x43", "U+0061"]
    assert config.parallel
    assert config.workers is None
    config.validate()
    assert config.scaling() == Scaling(size=32)
    assert config.tint().to_hex() == "#00FF00"


def test_dump_config_roundtrip(tmp_path):
    config = RenderConfig(font="a.ttf", scale_factor=0.25, ranges=["0x41"], characters="xyz")
    text = dump_config(config)
    assert "size" not in text.replace("scale_factor", "")
    path = tmp_path / "dumped.toml"
    path.write_text(text)
    assert load_config(str(path)) == config


def test_default_scaling():
    assert RenderConfig(font="a.ttf").scaling() == Scaling(size=64)


@pytest.mark.parametrize(
    "config",
    [
        RenderConfig(),
        RenderConfig(font="a.ttf", size=32, scale_factor=1.0),
        RenderConfig(font="a.ttf", size=0),
        RenderConfig(font="a.ttf", scale_factor=-0.5),
        RenderConfig(font="a.ttf", color="green"),
        RenderConfig(font="a.ttf", workers=0),
        RenderConfig(font="a.ttf", font_index=-1),
    ],
)
def test_invalid_config(config):
    with pytest.raises(InvalidConfig):
        config.validate()


def test_load_invalid_config(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("size = [")
    with pytest.raises(InvalidConfig):
        load_config(str(path))
    with pytest.raises(InvalidConfig):
        load_config(str(tmp_path / "missing.toml"))


def test_manifest_roundtrip(tmp_path):
    manifest = new_manifest(RenderConfig(font="a.ttf", color="#123456"))
    manifest.written.extend([0x41, 0x43])
    manifest.skipped.append(0x42)
    assert manifest.ok
    assert manifest.size == 64
    assert manifest.scale_factor is None
    dump_manifest(str(tmp_path), manifest)
    loaded = from_json(Manifest, (tmp_path / "manifest.json").read_text())
    assert loaded == manifest
