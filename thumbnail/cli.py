#!/usr/bin/env python3
"""
Command-line interface for thumbnail.

    thumbnail --dst out --ratio 0.3
    thumbnail --src photos --dst out --width 800 --height 600 --recursive

Exit codes:
    0  every file converted
    1  setup error (missing source, unusable destination, bad config)
    2  usage error (missing/conflicting/invalid arguments)
    3  the walk finished with failed files, or was aborted
"""

import argparse
import sys
from typing import List, Optional

import yaml

from thumbnail.pipeline.controller import run_thumbnails
from thumbnail.pipeline.params import SetupError, UsageError, resolve_config
from thumbnail.pipeline.resize import make_resizer
from thumbnail.utils.settings import load_config

EXIT_OK = 0
EXIT_SETUP_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_PARTIAL_FAILURE = 3


def build_parser() -> argparse.ArgumentParser:
    # -h is taken by --height, so help is long-form only
    parser = argparse.ArgumentParser(
        prog="thumbnail",
        description=(
            "Resize every .jpg/.jpeg under a source folder into a destination "
            "folder with the same sub-folder structure."
        ),
        add_help=False,
    )

    parser.add_argument(
        "-s",
        "--src",
        help="Input folder (default: the current folder).",
    )
    parser.add_argument(
        "-d",
        "--dst",
        help="Output folder, created if missing.",
    )
    parser.add_argument(
        "-r",
        "--ratio",
        help="Scale factor, e.g. 0.3 for 30%%. Cannot be combined with --width/--height.",
    )
    parser.add_argument(
        "-w",
        "--width",
        help="Target width in pixels (use together with --height).",
    )
    parser.add_argument(
        "-h",
        "--height",
        help="Target height in pixels (use together with --width).",
    )
    parser.add_argument(
        "-R",
        "--recursive",
        action="store_true",
        help="Also convert images in sub-folders.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a config.yaml (default: $THUMBNAIL_CONFIG or the project config.yaml).",
    )
    parser.add_argument(
        "--help",
        action="help",
        help="Show this help message and exit.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_config(args.config)
        resize_fn = make_resizer(settings)
        config = resolve_config(
            src_arg=args.src,
            dst_arg=args.dst,
            width_arg=args.width,
            height_arg=args.height,
            ratio_arg=args.ratio,
            recursive=args.recursive,
        )
    except UsageError as e:
        print(f"[ERROR] {e}\n", file=sys.stderr)
        parser.print_help(sys.stderr)
        return EXIT_USAGE_ERROR
    except (SetupError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    summary = run_thumbnails(config, settings, resize_fn=resize_fn)

    return EXIT_OK if summary.ok else EXIT_PARTIAL_FAILURE


if __name__ == "__main__":
    sys.exit(main())
