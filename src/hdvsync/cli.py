"""
Command-line interface for hdvsync.

Usage:
  hdvsync /Volumes/Tape/MyMovie/00_0001_2007-08-06_165555    # Sync sidecar
  hdvsync --dry-run CLIP                                    # Show what would change
  hdvsync --inspect CLIP                                    # Decode the index only
  hdvsync --digest CLIP                                     # Print the index digest
  hdvsync -o report.json CLIP...                            # JSON export
"""

from __future__ import annotations

import argparse
import sys

from pydantic import BaseModel

from hdvsync._version import __version__
from hdvsync.config import get_config
from hdvsync.digest import make_legacy_digest
from hdvsync.errors import ClipNotFound, HDVError
from hdvsync.formatters import (
    format_index,
    format_json,
    format_json_list,
    format_quiet,
    format_sync,
)
from hdvsync.handler import inspect_clip, sync_clip
from hdvsync.locator import context_from_path
from hdvsync.log import configure_logging, get_logger

logger = get_logger(component="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdvsync",
        description="Keep Sony HDV clip XMP sidecars in sync with their .IDX index files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Clip paths:
  A logical clip path .../MyMovie/00_0001_2007-08-06_165555, or any file in
  .../MyMovie/VIDEO/HVR/ belonging to the clip.

Modes:
  (default)    Sync the sidecar, writing it only when something changed
  --dry-run    Report what would change without writing
  --inspect    Decode and show the index record only
  --digest     Print the legacy digest of the clip's index record

Write mode:
  --safe       Write a temp file and rename it over the sidecar (default)
  --fast       Rewrite the sidecar in place

Examples:
  hdvsync MyMovie/00_0001_2007-08-06_165555
  hdvsync --inspect MyMovie/VIDEO/HVR/00_0001_2007-08-06_165555.M2T
  hdvsync -q --fast MyMovie/00_0001_*
        """,
    )
    parser.add_argument("clips", nargs="+", help="Clip path(s)")
    parser.add_argument("-o", "--output", help="Save report to JSON file")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    parser.add_argument("--log-json", action="store_true", help="Log as JSON lines")

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("--dry-run", action="store_true", help="Do not write sidecars")
    mode_group.add_argument("--inspect", action="store_true", help="Decode the index only")
    mode_group.add_argument("--digest", action="store_true", help="Print the index digest")

    write_group = parser.add_mutually_exclusive_group()
    write_group.add_argument(
        "--safe", dest="safe", action="store_true", default=None, help="Safe update"
    )
    write_group.add_argument(
        "--fast", dest="safe", action="store_false", help="In-place update"
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument("-q", "--quiet", action="store_true", help="One line per clip")
    output_group.add_argument("--json", action="store_true", help="JSON output")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for hdvsync CLI."""
    args = build_parser().parse_args(argv)

    config = get_config()
    level = "INFO" if args.verbose else config.logging.level
    configure_logging(level, json_output=args.log_json or config.logging.format == "json")

    results: list[BaseModel] = []
    errors = 0

    for clip in args.clips:
        try:
            if args.digest:
                context = context_from_path(clip)
                digest = make_legacy_digest(context.root_path, context.clip_name)
                print(f"{digest or '-'}  {context.clip_name}")
                continue

            if args.inspect:
                context = context_from_path(clip)
                decoded = inspect_clip(clip)
                results.append(decoded)
                if args.json:
                    print(format_json(decoded))
                else:
                    print(format_index(context.clip_name, decoded))
                continue

            result = sync_clip(clip, safe=args.safe, dry_run=args.dry_run, config=config)
            results.append(result)
            if args.quiet:
                print(format_quiet(result))
            elif args.json:
                print(format_json(result))
            else:
                print(format_sync(result))
                print()

        except ClipNotFound as e:
            print(f"Error: not a Sony HDV clip: {e}", file=sys.stderr)
            errors += 1
        except HDVError as e:
            print(f"Error processing {clip}: {e}", file=sys.stderr)
            logger.error("clip_failed", clip=clip, error=str(e))
            errors += 1

    # JSON export
    if args.output and results:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(format_json_list(results))
        print(f"Report saved to: {args.output}")

    return 1 if errors > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
