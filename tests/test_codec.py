import pytest

from color_replace.codec import decode_color, encode_color, is_valid_color
from color_replace.errors import ColorDecodeError
from color_replace.matcher import match_pixel
from models import TRANSPARENT, ReplacementRule


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("#FF0000", (255, 0, 0, 255)),
        ("00ff7f", (0, 255, 127, 255)),
        ("#aBcDeF", (171, 205, 239, 255)),
        ("#000000", (0, 0, 0, 255)),
    ],
)
def test_decode_hex(spec, expected):
    assert decode_color(spec) == expected


def test_decode_transparent_sentinel():
    assert decode_color(TRANSPARENT) == (0, 0, 0, 0)
    assert decode_color(None) == (0, 0, 0, 0)
    # A cleared color input behaves like the sentinel
    assert decode_color("") == (0, 0, 0, 0)


@pytest.mark.parametrize(
    "spec", ["#FFF", "#FFFFFFF", "GGGGGG", "#12345G", "red", "#FF0000\n", " #FF0000", 0xFF0000]
)
def test_decode_rejects_invalid_specs(spec):
    with pytest.raises(ColorDecodeError):
        decode_color(spec)


def test_decode_error_is_value_error():
    with pytest.raises(ValueError):
        decode_color("nope")


def test_is_valid_color():
    assert is_valid_color("#123456")
    assert is_valid_color(TRANSPARENT)
    assert not is_valid_color("#12345")


def test_encode_color():
    assert encode_color((255, 0, 16)) == "#FF0010"
    assert encode_color((1, 2, 3, 255)) == "#010203"
    assert encode_color((1, 2, 3, 0)) == TRANSPARENT
    assert decode_color(encode_color((18, 52, 86, 255))) == (18, 52, 86, 255)


def test_empty_source_rule_acts_on_transparent_pixels():
    assert match_pixel((5, 5, 5, 0), [ReplacementRule("", "#00FF00", 0)]) == (0, 255, 0, 255)
