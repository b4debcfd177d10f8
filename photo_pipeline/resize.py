"""Resize planning: fit inside a square bounding box, never enlarge."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ResizePlan:
    source_width: int
    source_height: int
    target_width: int
    target_height: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.target_width, self.target_height)

    @property
    def resized(self) -> bool:
        return (self.target_width, self.target_height) != (self.source_width, self.source_height)


def plan_resize(width: int, height: int, max_dimension: int | None) -> ResizePlan:
    """
    Scale so the longer side equals max_dimension; the other side is rounded to
    the nearest pixel and clamped to at least 1. Images already inside the box,
    or a max_dimension of None, keep their size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Dimensions must be positive, got {width}x{height}")
    if max_dimension is None or max(width, height) <= max_dimension:
        return ResizePlan(width, height, width, height)
    if max_dimension < 1:
        raise ValueError(f"max_dimension must be positive, got {max_dimension}")

    if width >= height:
        new_w = max_dimension
        new_h = max(1, round(height * max_dimension / width))
    else:
        new_h = max_dimension
        new_w = max(1, round(width * max_dimension / height))
    return ResizePlan(width, height, new_w, new_h)
