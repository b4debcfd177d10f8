"""
cli.py — command line entry point.

Usage examples:
  # Resize + watermark public/photography/originals/{nature,cars} -> public/photography
  photo-pipeline resize

  # Other folders and categories, no watermark
  photo-pipeline resize ./originals ./web --category travel --no-watermark

  # Watermark already published JPEGs in place (keeps *.backup copies)
  photo-pipeline watermark public/photography

  # Rotate one file 90° counter-clockwise
  photo-pipeline rotate public/photography/IMG_2610.jpg

  # Print draft manifest entries for published files
  photo-pipeline entries public/photography --category cars --match '^(IMG_1|R6__5)'
"""

import argparse
import logging
import re
import sys

from photo_pipeline.batch import NoInput, format_no_input, format_summary, run_batch, watermark_directory
from photo_pipeline.config import LOG_LEVELS, PipelineConfig
from photo_pipeline.errors import PipelineError, SourceRootMissingError
from photo_pipeline.manifest import draft_entries, format_entry, summary_snippets
from photo_pipeline.rotate import rotate_file

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad command line value; reported through argparse."""


def cmd_resize(args: argparse.Namespace, config: PipelineConfig) -> int:
    changes = {}
    if args.max_dimension is not None:
        changes["max_dimension"] = args.max_dimension
    if args.quality is not None:
        changes["quality"] = args.quality
    if args.no_watermark:
        changes["watermark"] = False
    config = config.replace(**changes)
    try:
        config.validate()
    except ValueError as e:
        raise UsageError(str(e)) from e

    source_root = args.source_root or config.source_root
    publish_root = args.publish_root or config.publish_root
    categories = args.category or list(config.categories)

    print("Photo Resize (Multi-Category)")
    print("=============================================")
    outcome = run_batch(source_root, publish_root, categories, config)
    if isinstance(outcome, NoInput):
        print(format_no_input(outcome))
        return 0

    print()
    print(format_summary(outcome, categories))
    print(f"\nDone! Your photos are ready in {publish_root}/")
    print("   Update the gallery manifest to add them.\n")
    snippets = summary_snippets(outcome.results, categories, config)
    if snippets:
        print("Sample manifest entries:\n")
        print(snippets)
    return 0


def cmd_watermark(args: argparse.Namespace, config: PipelineConfig) -> int:
    directory = args.directory or config.publish_root
    print("Adding Watermarks to Photos")
    print("================================")
    outcome = watermark_directory(directory, config)
    if isinstance(outcome, NoInput):
        print(f"No photos found in {directory}/")
        return 0

    print("================================")
    print(f"Complete! {outcome.processed}/{outcome.found} photos watermarked")
    print("\nOriginal files backed up as .backup")
    return 0


def cmd_rotate(args: argparse.Namespace, config: PipelineConfig) -> int:
    try:
        width, height = rotate_file(args.file, args.degrees, config)
    except PipelineError as e:
        logger.error(f"Error rotating {e.filename}: {e.cause}")
        return 1
    print(f"OK  : {args.file} rotated {args.degrees}° counter-clockwise ({width}x{height})")
    return 0


def cmd_entries(args: argparse.Namespace, config: PipelineConfig) -> int:
    publish_root = args.publish_root or config.publish_root
    if args.match:
        try:
            re.compile(args.match)
        except re.error as e:
            raise UsageError(f"invalid --match pattern {args.match!r}: {e}") from e
    drafts = draft_entries(
        publish_root,
        args.category,
        match=args.match,
        price=args.price,
        dimensions=args.dimensions,
        config=config,
    )
    print(",\n".join(format_entry(d) for d in drafts))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resize, watermark and publish photos for the gallery.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Logging level (default: PHOTO_LOG_LEVEL or WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("resize", help="Resize and watermark a category tree of originals")
    p.add_argument("source_root", nargs="?", help="Folder holding one sub-folder per category")
    p.add_argument("publish_root", nargs="?", help="Folder the published JPEGs are written to")
    p.add_argument("--category", action="append", help="Category to process (repeatable)")
    p.add_argument("--max-dimension", type=int, default=None, help="Longest side in pixels (default: 2500)")
    p.add_argument("--quality", type=int, default=None, help="JPEG save quality (1-100, default: 85)")
    p.add_argument("--no-watermark", action="store_true", help="Resize only")
    p.set_defaults(func=cmd_resize)

    p = sub.add_parser("watermark", help="Watermark published JPEGs in place, keeping backups")
    p.add_argument("directory", nargs="?", help="Folder of published JPEGs")
    p.set_defaults(func=cmd_watermark)

    p = sub.add_parser("rotate", help="Rotate one image in place")
    p.add_argument("file", help="Image to rotate")
    p.add_argument("--degrees", type=float, default=90, help="Counter-clockwise angle (default: 90)")
    p.set_defaults(func=cmd_rotate)

    p = sub.add_parser("entries", help="Print draft manifest entries for published photos")
    p.add_argument("publish_root", nargs="?", help="Folder of published JPEGs")
    p.add_argument("--category", default="cars", help="Category written into each entry")
    p.add_argument("--match", default=None, help="Only files whose name matches this regex")
    p.add_argument("--price", type=int, default=150)
    p.add_argument("--dimensions", default='16x20"')
    p.set_defaults(func=cmd_entries)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = PipelineConfig.from_env()
    except ValueError as e:
        parser.error(f"invalid PHOTO_* environment setting: {e}")

    level_name = args.log_level or PipelineConfig.log_level_from_env()
    logging.basicConfig(
        level=getattr(logging, level_name),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        return args.func(args, config)
    except UsageError as e:
        parser.error(str(e))
    except SourceRootMissingError as e:
        logger.critical(f"Fatal: {e}")
        return 2
    except Exception as e:
        logger.critical(f"Fatal: Unexpected error: {e}", exc_info=True)
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
