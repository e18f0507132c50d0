"""
Color assignment for recognized objects.

Each distinct object gets a hue spaced evenly around the color wheel according
to its registry index. Saturation is kept below 1 so colors stay light on a dark
viewer background.
"""

from typing import Tuple

DEFAULT_SATURATION = 0.7
DEFAULT_VALUE = 1.0


def hsv_to_rgb(hue: float, saturation: float, value: float) -> Tuple[float, float, float]:
    """
    Convert an HSV color to RGB using the 60 degree sector decomposition.

    See https://en.wikipedia.org/wiki/HSL_and_HSV#HSV_to_RGB

    Args:
        hue: Hue in degrees, expected in [0, 360)
        saturation: Saturation in [0, 1]
        value: Value in [0, 1]

    Returns:
        Tuple of (r, g, b), each in [0, 1]
    """
    chroma = value * saturation
    hue_prime = hue / 60.0
    x = chroma * (1.0 - abs(hue_prime % 2.0 - 1.0))

    r = g = b = 0.0
    if hue_prime < 1:
        r, g = chroma, x
    elif hue_prime < 2:
        r, g = x, chroma
    elif hue_prime < 3:
        g, b = chroma, x
    elif hue_prime < 4:
        g, b = x, chroma
    elif hue_prime < 5:
        r, b = x, chroma
    elif hue_prime < 6:
        r, b = chroma, x

    m = value - chroma
    return r + m, g + m, b + m


def hue_for(index: int, total: int) -> float:
    """
    Hue in degrees for the object with the given registry index.

    Args:
        index: Registry index of the object
        total: Current number of distinct objects in the registry

    Returns:
        Hue in degrees

    Raises:
        ValueError: If total is smaller than 1
    """
    if total < 1:
        raise ValueError(f"Cannot assign a hue with {total} distinct objects")
    return (360.0 / total) * index


def color_for(
    index: int,
    total: int,
    saturation: float = DEFAULT_SATURATION,
    value: float = DEFAULT_VALUE,
) -> Tuple[float, float, float]:
    """
    RGB color for the object with the given registry index.

    The hue depends on the current registry size, so colors of known objects
    shift when new objects are discovered.

    Args:
        index: Registry index of the object
        total: Current number of distinct objects in the registry
        saturation: HSV saturation
        value: HSV value

    Returns:
        Tuple of (r, g, b), each in [0, 1]
    """
    return hsv_to_rgb(hue_for(index, total), saturation, value)
