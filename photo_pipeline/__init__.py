"""Batch resize, watermark and publish photos for the gallery."""

from photo_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from photo_pipeline.orientation import Orientation, aspect_ratio, classify
from photo_pipeline.resize import ResizePlan, plan_resize
from photo_pipeline.watermark import WatermarkSpec, compose
from photo_pipeline.pipeline import Failure, ImageMetadata, ImagePipeline, ProcessingResult, process_image
from photo_pipeline.batch import BatchSummary, NoInput, run_batch, watermark_directory

__all__ = [
    "DEFAULT_CONFIG",
    "PipelineConfig",
    "Orientation",
    "aspect_ratio",
    "classify",
    "ResizePlan",
    "plan_resize",
    "WatermarkSpec",
    "compose",
    "Failure",
    "ImageMetadata",
    "ImagePipeline",
    "ProcessingResult",
    "process_image",
    "BatchSummary",
    "NoInput",
    "run_batch",
    "watermark_directory",
]
