from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from photo_pipeline.config import PipelineConfig


def write_image(path: Path, size: tuple[int, int], color=(40, 90, 160), fmt: str | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = "RGBA" if (fmt or "").upper() == "PNG" else "RGB"
    fill = (*color, 255) if mode == "RGBA" else color
    Image.new(mode, size, fill).save(path, format=fmt)
    return path


@pytest.fixture
def make_image() -> Callable[..., Path]:
    return write_image


@pytest.fixture
def small_config() -> PipelineConfig:
    # Small max dimension keeps synthesized test images cheap
    return PipelineConfig(max_dimension=200, quality=80)
