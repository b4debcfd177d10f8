"""
pipeline.py — turn one original photo into one published JPEG.

probe -> classify -> plan -> resize (+ watermark) -> encode -> atomic publish

The destination is only ever replaced by os.replace() of a fully written and
fsync'ed temporary file that sits beside it, so an interrupted run leaves the
previous destination untouched.
"""

import io
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from PIL import Image

from photo_pipeline.config import BACKUP_SUFFIX, DEFAULT_CONFIG, TEMP_SUFFIX, PipelineConfig
from photo_pipeline.errors import ProbeError, PublishError, PipelineError, TransformError
from photo_pipeline.orientation import Orientation, aspect_ratio, classify
from photo_pipeline.resize import ResizePlan, plan_resize
from photo_pipeline.watermark import apply_watermark, compose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    byte_size: int
    format: str | None


@dataclass(frozen=True)
class ProcessingResult:
    filename: str
    orientation: Orientation
    aspect_ratio: str
    category: str | None
    original_size: Tuple[int, int]
    resized_size: Tuple[int, int]
    source: Path
    destination: Path
    original_bytes: int
    output_bytes: int

    ok = True


@dataclass(frozen=True)
class Failure:
    filename: str
    cause: str
    stage: str
    category: str | None = None

    ok = False


def format_mb(n: int) -> str:
    return f"{n / (1024 * 1024):.2f}MB"


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def temp_path_for(path: Path) -> Path:
    return path.with_name(path.name + TEMP_SUFFIX)


# --------- Steps ---------
def probe(path: Path) -> ImageMetadata:
    """Read dimensions and format from the file header."""
    try:
        with Image.open(path) as im:
            width, height = im.size
            fmt = im.format
        byte_size = path.stat().st_size
    except (OSError, Image.DecompressionBombError) as e:
        # UnidentifiedImageError is an OSError
        raise ProbeError(path.name, str(e)) from e
    if width <= 0 or height <= 0:
        raise ProbeError(path.name, f"invalid dimensions {width}x{height}")
    return ImageMetadata(width=width, height=height, byte_size=byte_size, format=fmt)


def encode_jpeg(im: Image.Image, quality: int, icc: bytes | None = None) -> bytes:
    """Encode as JPEG without EXIF; only the ICC profile is carried over."""
    if im.mode != "RGB":
        im = im.convert("RGB")

    # Don't use subsampling="keep" — it breaks after edits/compositing.
    save_kwargs = dict(quality=quality, optimize=True, progressive=True)
    if icc:
        save_kwargs["icc_profile"] = icc

    buffer = io.BytesIO()
    try:
        im.save(buffer, format="JPEG", **save_kwargs)
    except (OSError, ValueError):
        # Retry with safer defaults if the local encoder rejects a kwarg
        logger.debug("JPEG encoder rejected optimize/progressive, retrying with defaults")
        save_kwargs.pop("optimize", None)
        save_kwargs.pop("progressive", None)
        buffer = io.BytesIO()
        im.save(buffer, format="JPEG", **save_kwargs)
    return buffer.getvalue()


def render(source: Path, plan: ResizePlan, config: PipelineConfig) -> bytes:
    """Decode, resize to the plan, watermark if configured, encode as JPEG."""
    try:
        with Image.open(source) as im:
            im.load()
            icc = im.info.get("icc_profile")

            out_img = im.convert("RGBA") if config.watermark else im.convert("RGB")
            if out_img.size != plan.size:
                out_img = out_img.resize(plan.size, Image.Resampling.LANCZOS)

        if config.watermark:
            # Sized from the resized image, never the original
            spec = compose(plan.target_width, plan.target_height, config.brand_text, config.handle_text)
            out_img = apply_watermark(out_img, spec, font_path=config.font_path)

        return encode_jpeg(out_img, config.quality, icc=icc)
    except (OSError, ValueError, MemoryError, Image.DecompressionBombError) as e:
        raise TransformError(source.name, str(e) or e.__class__.__name__) from e


def ensure_backup(source: Path) -> bool:
    """Copy source to <source>.backup unless one already exists."""
    backup = backup_path_for(source)
    if backup.exists():
        return False
    try:
        shutil.copy2(source, backup)
    except OSError as e:
        raise PublishError(source.name, f"backup failed: {e}") from e
    return True


def publish(data: bytes, destination: Path) -> None:
    """Write bytes beside destination, then atomically rename over it."""
    tmp_path = temp_path_for(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, destination)
    except OSError as e:
        raise PublishError(destination.name, str(e)) from e
    finally:
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                logger.warning(f"Could not remove temporary file {tmp_path}")


def output_path_for_input(output_folder: Path, input_path: Path) -> Path:
    """Keep basename, normalize extension to .jpg."""
    return Path(output_folder) / f"{Path(input_path).stem}.jpg"


# --------- Pipeline ---------
class ImagePipeline:
    """One configured pipeline, reused for every file of a run."""

    def __init__(self, config: PipelineConfig = DEFAULT_CONFIG):
        config.validate()
        self.config = config

    def process(self, source, destination, category: str | None = None) -> ProcessingResult | Failure:
        source = Path(source)
        destination = Path(destination)
        try:
            return self._process(source, destination, category)
        except PipelineError as e:
            logger.error(f"Error processing {e.filename} ({e.stage}): {e.cause}")
            return Failure(filename=source.name, cause=e.cause, stage=e.stage, category=category)
        except Exception as e:
            logger.error(f"Unexpected error processing {source.name}: {e}", exc_info=True)
            return Failure(filename=source.name, cause=str(e), stage="unknown", category=category)

    def _process(self, source: Path, destination: Path, category: str | None) -> ProcessingResult:
        config = self.config
        meta = probe(source)
        orientation = classify(
            meta.width,
            meta.height,
            vertical_threshold=config.vertical_threshold,
            square_range=config.square_range,
        )
        ratio = aspect_ratio(meta.width, meta.height)
        label = f" [{category}]" if category else ""
        logger.info(
            f"Processing {source.name}{label}: {meta.width}x{meta.height} ({ratio}) "
            f"- {format_mb(meta.byte_size)}, {orientation.value}"
        )

        plan = plan_resize(meta.width, meta.height, config.max_dimension)
        data = render(source, plan, config)

        if config.backup and ensure_backup(source):
            logger.info(f"Backup created for {source.name}")
        publish(data, destination)

        logger.debug(
            f"{source.name}: {plan.target_width}x{plan.target_height} - {format_mb(len(data))}"
            f" (was {format_mb(meta.byte_size)})"
        )
        return ProcessingResult(
            filename=destination.name,
            orientation=orientation,
            aspect_ratio=ratio,
            category=category,
            original_size=(meta.width, meta.height),
            resized_size=plan.size,
            source=source,
            destination=destination,
            original_bytes=meta.byte_size,
            output_bytes=len(data),
        )


def process_image(source, destination, config: PipelineConfig = DEFAULT_CONFIG,
                  category: str | None = None) -> ProcessingResult | Failure:
    return ImagePipeline(config).process(source, destination, category)
