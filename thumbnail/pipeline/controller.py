#!/usr/bin/env python3
"""
thumbnail.pipeline.controller

High-level controller for one thumbnail run:

    resolved ScanConfig + settings  ->  walk  ->  totals

Argument checking happens before this point (thumbnail.pipeline.params);
the controller only reports and drives the walk.
"""

from typing import Optional

from thumbnail.pipeline.params import ScanConfig
from thumbnail.pipeline.resize import ResizeFn, make_resizer
from thumbnail.pipeline.walker import WalkSummary, walk


def run_thumbnails(
    config: ScanConfig,
    settings: dict,
    resize_fn: Optional[ResizeFn] = None,
) -> WalkSummary:
    resize_cfg = settings.get("resize", {})

    print("\n================== Thumbnail Run Start ==================\n")
    print("Configuration:")
    print(f"  source      = {config.source_root}")
    print(f"  destination = {config.dest_root}")
    print(f"  mode        = {config.mode}")
    print(f"  recursive   = {config.recursive}")
    print(f"  quality     = {resize_cfg.get('quality')}")
    print(f"  resample    = {resize_cfg.get('resample')}")
    print()

    if resize_fn is None:
        resize_fn = make_resizer(settings)
    summary = walk(config, resize_fn=resize_fn, settings=settings)

    print()
    print(f"[Thumbnail] Converted : {summary.converted}")
    print(f"[Thumbnail] Failed    : {len(summary.failures)}")
    if summary.converted == 0 and not summary.failures:
        print("[Thumbnail] WARNING: No .jpg/.jpeg files found under the source folder.")
    if summary.fatal is not None:
        print("\n================== Run Aborted ==================\n")
    else:
        print("\n================== Run Complete ==================\n")
    return summary
