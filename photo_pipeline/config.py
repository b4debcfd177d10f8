"""
config.py — processing defaults for the photo publish pipeline.

Every tunable lives on PipelineConfig. Values can be overridden through
PHOTO_* environment variables (see PipelineConfig.from_env) and, for a single
run, through CLI flags.
"""

import dataclasses
import os
from dataclasses import dataclass
from typing import Tuple

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".tiff", ".tif")
PUBLISHED_EXTENSIONS = (".jpg", ".jpeg")
BACKUP_SUFFIX = ".backup"
TEMP_SUFFIX = ".tmp"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class PipelineConfig:
    """Configurable processing parameters."""
    max_dimension: int | None = 2500                   # longest side after resize; None keeps size
    quality: int = 85                                  # JPEG quality (1-100)
    vertical_threshold: float = 0.85                   # height/width above this is vertical
    square_range: Tuple[float, float] = (0.9, 1.1)     # inclusive height/width band for square
    brand_text: str = "JEFFREY YANG PHOTOGRAPHY"
    handle_text: str = "@shotswithjeff"
    watermark: bool = True
    backup: bool = False                               # keep <file>.backup before mutation
    font_path: str | None = None
    categories: Tuple[str, ...] = ("nature", "cars")
    source_root: str = "public/photography/originals"
    publish_root: str = "public/photography"
    image_url_prefix: str = "/photography"

    def replace(self, **changes) -> "PipelineConfig":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, environ=None) -> "PipelineConfig":
        env = os.environ if environ is None else environ
        config = cls()
        changes = {}

        if "PHOTO_MAX_DIMENSION" in env:
            raw = env["PHOTO_MAX_DIMENSION"].strip()
            changes["max_dimension"] = int(raw) if raw and raw != "0" else None
        if "PHOTO_QUALITY" in env:
            changes["quality"] = int(env["PHOTO_QUALITY"])
        for key, field in (
            ("PHOTO_BRAND_TEXT", "brand_text"),
            ("PHOTO_HANDLE_TEXT", "handle_text"),
            ("PHOTO_FONT", "font_path"),
            ("PHOTO_SOURCE_ROOT", "source_root"),
            ("PHOTO_PUBLISH_ROOT", "publish_root"),
            ("PHOTO_IMAGE_URL_PREFIX", "image_url_prefix"),
        ):
            if key in env:
                changes[field] = env[key]
        if "PHOTO_CATEGORIES" in env:
            changes["categories"] = tuple(
                c.strip() for c in env["PHOTO_CATEGORIES"].split(",") if c.strip()
            )

        config = config.replace(**changes)
        config.validate()
        return config

    @staticmethod
    def log_level_from_env(environ=None) -> str:
        env = os.environ if environ is None else environ
        level = env.get("PHOTO_LOG_LEVEL", "WARNING").upper()
        return level if level in LOG_LEVELS else "WARNING"

    def validate(self) -> None:
        if self.max_dimension is not None and self.max_dimension < 1:
            raise ValueError(f"max_dimension must be positive, got {self.max_dimension}")
        if not 1 <= self.quality <= 100:
            raise ValueError(f"quality must be within 1..100, got {self.quality}")
        low, high = self.square_range
        if low > high:
            raise ValueError(f"square_range is inverted: {self.square_range}")


DEFAULT_CONFIG = PipelineConfig()
