import math

DEFAULT_COLOR = "#000000"


def _channel(x: float) -> int:
    """Scales a 0..1 component to 0..255, rounding halves up."""
    x = min(max(x, 0.0), 1.0)
    return int(math.floor(x * 255 + 0.5))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return f"#{_channel(r):02x}{_channel(g):02x}{_channel(b):02x}"


def gray_to_hex(gray: float) -> str:
    return rgb_to_hex(gray, gray, gray)


def cmyk_to_hex(c: float, m: float, y: float, k: float) -> str:
    k = min(max(k, 0.0), 1.0)
    return rgb_to_hex(
        (1 - min(max(c, 0.0), 1.0)) * (1 - k),
        (1 - min(max(m, 0.0), 1.0)) * (1 - k),
        (1 - min(max(y, 0.0), 1.0)) * (1 - k),
    )
