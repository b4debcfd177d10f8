"""Orientation and aspect-ratio helpers used for gallery layout."""

import math
from enum import Enum
from typing import Tuple

VERTICAL_THRESHOLD = 0.85
SQUARE_RANGE = (0.9, 1.1)


class Orientation(str, Enum):
    VERTICAL = "vertical"
    SQUARE = "square"
    HORIZONTAL = "horizontal"

    def __str__(self) -> str:
        return self.value


def classify(
    width: int,
    height: int,
    *,
    vertical_threshold: float = VERTICAL_THRESHOLD,
    square_range: Tuple[float, float] = SQUARE_RANGE,
) -> Orientation:
    """
    Classify by height/width ratio.

    The square band is inclusive on both ends; the vertical test is strict, so a
    ratio of exactly `vertical_threshold` is horizontal.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Dimensions must be positive, got {width}x{height}")

    ratio = height / width
    low, high = square_range
    if low <= ratio <= high:
        return Orientation.SQUARE
    if ratio > vertical_threshold:
        return Orientation.VERTICAL
    return Orientation.HORIZONTAL


def aspect_ratio(width: int, height: int) -> str:
    """Return "W:H" in lowest terms, e.g. 4000x3000 -> "4:3"."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Dimensions must be positive, got {width}x{height}")
    divisor = math.gcd(width, height)
    return f"{width // divisor}:{height // divisor}"
