"""Rotate a single published photo in place."""

import io
import logging
from pathlib import Path

from PIL import Image

from photo_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from photo_pipeline.errors import ProbeError, SourceRootMissingError, TransformError
from photo_pipeline.pipeline import encode_jpeg, publish

logger = logging.getLogger(__name__)


def rotate_file(path, degrees: float = 90, config: PipelineConfig = DEFAULT_CONFIG) -> tuple:
    """
    Rotate counter-clockwise by `degrees` and atomically replace the file.
    JPEGs are re-encoded at config.quality; other formats keep their format.
    Returns the new (width, height).
    """
    path = Path(path)
    if not path.is_file():
        raise SourceRootMissingError(path, kind="file")

    try:
        im = Image.open(path)
    except OSError as e:
        raise ProbeError(path.name, str(e)) from e

    with im:
        try:
            fmt = im.format or "JPEG"
            rotated = im.rotate(degrees, resample=Image.Resampling.BICUBIC, expand=True)
            if fmt == "JPEG":
                data = encode_jpeg(rotated, config.quality, icc=im.info.get("icc_profile"))
            else:
                buffer = io.BytesIO()
                rotated.save(buffer, format=fmt)
                data = buffer.getvalue()
        except (OSError, ValueError) as e:
            raise TransformError(path.name, str(e)) from e

    publish(data, path)
    logger.info(f"Rotated {path.name} by {degrees} degrees -> {rotated.width}x{rotated.height}")
    return rotated.size
