"""
manifest.py — draft gallery manifest entries, printed for a human to copy.

Nothing here writes the manifest; the output is plain text in the object
literal form used by the gallery's photos.ts.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from photo_pipeline.config import DEFAULT_CONFIG, PUBLISHED_EXTENSIONS, PipelineConfig
from photo_pipeline.errors import ProbeError, SourceRootMissingError
from photo_pipeline.orientation import classify
from photo_pipeline.pipeline import ProcessingResult, probe

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Your Photo Title"


@dataclass(frozen=True)
class ManifestDraft:
    id: str
    title: str
    category: str
    image_path: str
    orientation: str
    price: int | None = None
    dimensions: str | None = None
    available: bool = True


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def format_entry(draft: ManifestDraft, indent: str = "  ") -> str:
    fields = [
        f"id: {_quote(draft.id)}",
        f"title: {_quote(draft.title)}",
        f"category: {_quote(draft.category)}",
        f"imagePath: {_quote(draft.image_path)}",
    ]
    if draft.price is not None:
        fields.append(f"price: {draft.price}")
    if draft.dimensions is not None:
        fields.append(f"dimensions: {_quote(draft.dimensions)}")
    fields.append(f"orientation: {_quote(draft.orientation)}")
    fields.append(f"available: {'true' if draft.available else 'false'}")

    inner = indent * 2
    body = "".join(f"{inner}{field},\n" for field in fields)
    return f"{indent}{{\n{body}{indent}}}"


def image_path(filename: str, prefix: str) -> str:
    return f"{prefix.rstrip('/')}/{filename}"


def title_from_filename(filename: str) -> str:
    return Path(filename).stem.replace("_", " ")


def summary_snippets(
    results: Iterable[ProcessingResult],
    categories: Iterable[str],
    config: PipelineConfig = DEFAULT_CONFIG,
    per_category: int = 2,
) -> str:
    """Placeholder entries for the first few results of each category."""
    results = list(results)
    blocks = []
    for category in categories:
        picked = [r for r in results if r.category == category][:per_category]
        if not picked:
            continue
        lines = [f"// {category.upper()}"]
        for i, r in enumerate(picked, start=1):
            draft = ManifestDraft(
                id=f"{category}-{i}",
                title=PLACEHOLDER_TITLE,
                category=category,
                image_path=image_path(r.filename, config.image_url_prefix),
                orientation=r.orientation.value,
            )
            lines.append(format_entry(draft) + ",")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def draft_entries(
    publish_root,
    category: str,
    *,
    match: str | None = None,
    price: int | None = 150,
    dimensions: str | None = '16x20"',
    config: PipelineConfig = DEFAULT_CONFIG,
) -> List[ManifestDraft]:
    """Probe already-published files and describe them as manifest drafts."""
    root = Path(publish_root)
    if not root.is_dir():
        raise SourceRootMissingError(root)

    pattern = re.compile(match) if match else None
    files = [
        p for p in sorted(root.iterdir())
        if p.is_file()
        and p.suffix.lower() in PUBLISHED_EXTENSIONS
        and (pattern is None or pattern.search(p.name))
    ]

    drafts = []
    for p in files:
        try:
            meta = probe(p)
        except ProbeError as e:
            logger.error(f"Skipping {e.filename}: {e.cause}")
            continue
        orientation = classify(
            meta.width,
            meta.height,
            vertical_threshold=config.vertical_threshold,
            square_range=config.square_range,
        )
        drafts.append(ManifestDraft(
            id=f"{category}-{len(drafts) + 1}",
            title=title_from_filename(p.name),
            category=category,
            image_path=image_path(p.name, config.image_url_prefix),
            orientation=orientation.value,
            price=price,
            dimensions=dimensions,
        ))
    return drafts
