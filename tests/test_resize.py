from __future__ import annotations

import pytest

from photo_pipeline.resize import plan_resize


def test_landscape_is_clamped_to_max_width() -> None:
    plan = plan_resize(4000, 3000, 2500)
    assert plan.size == (2500, 1875)
    assert plan.resized


def test_portrait_is_clamped_to_max_height() -> None:
    plan = plan_resize(3000, 3600, 2500)
    assert plan.size == (2083, 2500)


def test_small_images_are_never_enlarged() -> None:
    plan = plan_resize(1200, 1200, 2500)
    assert plan.size == (1200, 1200)
    assert not plan.resized


def test_exactly_max_is_unchanged() -> None:
    assert plan_resize(2500, 1000, 2500).size == (2500, 1000)


def test_square_over_max() -> None:
    assert plan_resize(5000, 5000, 2500).size == (2500, 2500)


def test_none_keeps_size() -> None:
    assert plan_resize(9000, 10, None).size == (9000, 10)


def test_extreme_ratio_never_reaches_zero() -> None:
    plan = plan_resize(100000, 10, 2500)
    assert plan.size == (2500, 1)


@pytest.mark.parametrize(
    ("width", "height", "max_dimension"),
    [(6000, 4000, 2500), (4001, 2999, 2500), (333, 1000, 100), (12345, 6789, 1000), (2501, 2500, 2500)],
)
def test_limiting_side_matches_max_and_other_side_is_proportional(width: int, height: int, max_dimension: int) -> None:
    plan = plan_resize(width, height, max_dimension)
    assert max(plan.size) == max_dimension
    if width >= height:
        exact = height * max_dimension / width
        assert abs(plan.target_height - exact) <= 1
    else:
        exact = width * max_dimension / height
        assert abs(plan.target_width - exact) <= 1


def test_invalid_input() -> None:
    with pytest.raises(ValueError):
        plan_resize(0, 100, 2500)
    with pytest.raises(ValueError):
        plan_resize(5000, 100, 0)
