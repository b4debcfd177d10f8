from __future__ import annotations

import math

import pytest

from photo_pipeline.orientation import Orientation, aspect_ratio, classify


@pytest.mark.parametrize(
    ("width", "height"),
    [(1000, 900), (1000, 1000), (1000, 1100), (1200, 1200), (100, 95), (100, 105)],
)
def test_square_band_is_inclusive(width: int, height: int) -> None:
    assert classify(width, height) is Orientation.SQUARE


def test_ratio_at_vertical_threshold_is_horizontal() -> None:
    assert classify(100, 85) is Orientation.HORIZONTAL


def test_ratio_between_threshold_and_square_band_is_vertical() -> None:
    # 0.85 < 0.88 < 0.9
    assert classify(100, 88) is Orientation.VERTICAL


def test_tall_and_wide_images() -> None:
    assert classify(3000, 3600) is Orientation.VERTICAL
    assert classify(4000, 3000) is Orientation.HORIZONTAL
    assert classify(2000, 6000) is Orientation.VERTICAL


def test_custom_thresholds() -> None:
    assert classify(100, 80, vertical_threshold=0.75) is Orientation.VERTICAL
    assert classify(100, 80, square_range=(0.8, 1.2)) is Orientation.SQUARE


def test_classify_rejects_zero_width() -> None:
    with pytest.raises(ValueError):
        classify(0, 100)


def test_orientation_serializes_as_plain_value() -> None:
    assert str(Orientation.SQUARE) == "square"
    assert Orientation("vertical") is Orientation.VERTICAL


@pytest.mark.parametrize(
    ("width", "height", "expected"),
    [(4000, 3000, "4:3"), (1200, 1200, "1:1"), (1920, 1080, "16:9"), (7, 5, "7:5"), (3000, 3600, "5:6")],
)
def test_aspect_ratio(width: int, height: int, expected: str) -> None:
    assert aspect_ratio(width, height) == expected


@pytest.mark.parametrize(("width", "height"), [(6000, 4000), (1234, 5678), (17, 51), (2500, 1875)])
def test_aspect_ratio_terms_are_coprime_and_proportional(width: int, height: int) -> None:
    w, h = (int(part) for part in aspect_ratio(width, height).split(":"))
    assert math.gcd(w, h) == 1
    assert width * h == height * w
