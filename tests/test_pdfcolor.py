import pytest

from pdfvector.pdfcolor import cmyk_to_hex, gray_to_hex, rgb_to_hex


@pytest.mark.parametrize(
    ("gray", "expected"),
    [
        (0, "#000000"),
        (1, "#ffffff"),
        (0.5, "#808080"),
        (0.2, "#333333"),
    ],
)
def test_gray_to_hex(gray, expected):
    assert gray_to_hex(gray) == expected


@pytest.mark.parametrize(
    ("rgb", "expected"),
    [
        ((1, 0, 0), "#ff0000"),
        ((0, 1, 0), "#00ff00"),
        ((0, 0, 1), "#0000ff"),
        ((2, -1, 0), "#ff0000"),
    ],
)
def test_rgb_to_hex(rgb, expected):
    assert rgb_to_hex(*rgb) == expected


@pytest.mark.parametrize(
    ("cmyk", "expected"),
    [
        ((0, 0, 0, 0), "#ffffff"),
        ((0, 0, 0, 1), "#000000"),
        ((1, 0, 0, 0), "#00ffff"),
        ((0, 1, 1, 0), "#ff0000"),
        ((0, 0, 0, 0.5), "#808080"),
    ],
)
def test_cmyk_to_hex(cmyk, expected):
    assert cmyk_to_hex(*cmyk) == expected
