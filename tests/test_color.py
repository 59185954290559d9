"""Tests for glyphdump.color."""

import pytest

from glyphdump.color import WHITE, Color
from glyphdump.errors import InvalidColor


def test_hex_and_channels_agree():
    assert Color.from_hex("#00FF7f") == Color(0, 255, 127)
    assert Color.from_hex("00ff7F") == Color.from_channels(0, 255, 127)
    assert Color(18, 52, 86).to_hex() == "#123456"
    assert Color.from_hex(Color(1, 2, 3).to_hex()) == Color(1, 2, 3)


def test_missing_channels_use_default():
    assert Color.from_channels(None, 128, None) == Color(255, 128, 255)
    assert Color.from_channels(10, None, None, default=Color(0, 0, 0)) == Color(10, 0, 0)
    assert Color.from_channels(None, None, None) == WHITE


@pytest.mark.parametrize("text", ["", "#FFF", "#GGGGGG", "#1234567", "red", "0x123456"])
def test_invalid_hex(text):
    with pytest.raises(InvalidColor):
        Color.from_hex(text)


@pytest.mark.parametrize("channels", [(256, 0, 0), (0, -1, 0), (0, 0, 1000)])
def test_channel_out_of_range(channels):
    with pytest.raises(InvalidColor):
        Color(*channels)
