"""
batch.py — sequential batch runs over a tree of originals.

Resize mode:      <source_root>/<category>/<file>  ->  <publish_root>/<stem>.jpg
Watermark mode:   <directory>/<file>.jpg watermarked in place, originals kept
                  as <file>.jpg.backup

Results are collected in a plain list owned by the run; every count in the
summary is derived from that list after the last file is done.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple

from photo_pipeline.config import (
    BACKUP_SUFFIX,
    DEFAULT_CONFIG,
    PUBLISHED_EXTENSIONS,
    SUPPORTED_EXTENSIONS,
    TEMP_SUFFIX,
    PipelineConfig,
)
from photo_pipeline.errors import SourceRootMissingError
from photo_pipeline.orientation import Orientation
from photo_pipeline.pipeline import Failure, ImagePipeline, ProcessingResult, output_path_for_input

logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    found: int
    results: List[ProcessingResult] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)
    skipped_categories: List[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def by_orientation(self) -> Dict[Orientation, int]:
        counts = Counter(r.orientation for r in self.results)
        return {o: counts.get(o, 0) for o in Orientation}

    @property
    def by_category(self) -> Dict[str, int]:
        return dict(Counter(r.category for r in self.results))


@dataclass(frozen=True)
class NoInput:
    """A run that found no images at all."""
    searched: Tuple[Path, ...]
    skipped_categories: Tuple[str, ...] = ()


def iter_images(root: Path, extensions: Iterable[str] = SUPPORTED_EXTENSIONS) -> Iterator[Path]:
    """Files directly inside root with a matching extension, sorted by name."""
    exts = {e.lower() for e in extensions}
    for p in sorted(root.iterdir()):
        if p.is_file() and p.suffix.lower() in exts:
            yield p


def _collect(pipeline: ImagePipeline, jobs: List[Tuple[Path, Path, str | None]],
             summary: BatchSummary) -> BatchSummary:
    for src, dst, category in jobs:
        outcome = pipeline.process(src, dst, category)
        if isinstance(outcome, Failure):
            summary.failures.append(outcome)
            print(f"FAIL: {src.name}: {outcome.cause}")
        else:
            summary.results.append(outcome)
            w, h = outcome.resized_size
            print(f"OK  : {src} -> {dst} ({w}x{h}, {outcome.orientation.value})")
    return summary


def run_batch(
    source_root,
    publish_root,
    categories: Iterable[str] | None = None,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> BatchSummary | NoInput:
    """Resize (and watermark) every category folder under source_root."""
    source_root = Path(source_root)
    publish_root = Path(publish_root)
    categories = list(config.categories if categories is None else categories)

    if not source_root.exists():
        source_root.mkdir(parents=True, exist_ok=True)
        logger.warning(f"Created directory: {source_root}; place original photos in category folders there")
        return NoInput(searched=tuple(source_root / c for c in categories), skipped_categories=tuple(categories))
    if not source_root.is_dir():
        raise SourceRootMissingError(source_root)

    planned: Dict[Path, Tuple[Path, Path, str | None]] = {}
    superseded: List[Failure] = []
    skipped: List[str] = []
    found = 0
    for category in categories:
        category_dir = source_root / category
        if not category_dir.is_dir():
            logger.info(f"Skipping {category}: {category_dir} does not exist")
            skipped.append(category)
            continue
        files = list(iter_images(category_dir))
        if not files:
            logger.info(f"Skipping {category}: no images in {category_dir}")
            skipped.append(category)
            continue

        print(f"Processing {category} ({len(files)} images)...")
        found += len(files)
        for src in files:
            dst = output_path_for_input(publish_root, src)
            if dst in planned:
                earlier, _, earlier_category = planned.pop(dst)
                logger.warning(f"{earlier} and {src} both publish to {dst.name}; only {src} is published")
                superseded.append(Failure(
                    filename=earlier.name,
                    cause=f"{dst.name} is overwritten by {category}/{src.name}",
                    stage="publish",
                    category=earlier_category,
                ))
            planned[dst] = (src, dst, category)

    jobs = list(planned.values())
    if not jobs:
        return NoInput(searched=tuple(source_root / c for c in categories), skipped_categories=tuple(skipped))

    publish_root.mkdir(parents=True, exist_ok=True)
    summary = BatchSummary(found=found, failures=superseded, skipped_categories=skipped)
    return _collect(ImagePipeline(config), jobs, summary)


def watermark_directory(directory, config: PipelineConfig = DEFAULT_CONFIG) -> BatchSummary | NoInput:
    """Watermark published JPEGs in place at their current size, keeping backups."""
    directory = Path(directory)
    if not directory.is_dir():
        raise SourceRootMissingError(directory)

    config = config.replace(max_dimension=None, watermark=True, backup=True)
    files = [
        p for p in iter_images(directory, PUBLISHED_EXTENSIONS)
        if not p.name.endswith((BACKUP_SUFFIX, TEMP_SUFFIX))
    ]
    if not files:
        return NoInput(searched=(directory,))

    print(f"Found {len(files)} photos")
    summary = BatchSummary(found=len(files))
    return _collect(ImagePipeline(config), [(p, p, directory.name) for p in files], summary)


def format_summary(summary: BatchSummary, categories: Iterable[str] | None = None) -> str:
    by_orientation = summary.by_orientation
    lines = [
        "Summary",
        "=======================",
        f"Total processed: {summary.processed}/{summary.found}",
    ]
    if summary.failures:
        lines.append(f"Failed: {len(summary.failures)}")
        lines += [f"  {f.filename} ({f.stage}): {f.cause}" for f in summary.failures]
    lines.append("By orientation:")
    lines += [
        f"  Horizontal: {by_orientation[Orientation.HORIZONTAL]}",
        f"  Vertical: {by_orientation[Orientation.VERTICAL]}",
        f"  Square: {by_orientation[Orientation.SQUARE]}",
    ]
    by_category = summary.by_category
    order = list(categories) if categories is not None else []
    order += [c for c in by_category if c not in order]
    if by_category:
        lines.append("By category:")
        lines += [f"  {c}: {by_category[c]}" for c in order if c in by_category]
    if summary.skipped_categories:
        lines.append(f"Skipped categories (missing or empty): {', '.join(summary.skipped_categories)}")
    return "\n".join(lines)


def format_no_input(outcome: NoInput) -> str:
    lines = ["No images found."]
    if outcome.searched:
        lines.append("   Add images to: " + " or ".join(f"{p}/" for p in outcome.searched))
    return "\n".join(lines)
