#!/usr/bin/env python3
"""
thumbnail.pipeline.walker

Walk the source tree and write a resized copy of every JPEG into the
destination tree, at the same relative path:

    <source_root>/a/b/c.jpg   ->   <dest_root>/a/b/c.jpg

Depth:
  - max_depth = 1     only files directly inside source_root
  - max_depth = None  the whole subtree

Files are handled one at a time. Each file ends up as one of:

  Converted           resized copy written
  Skip                not a .jpg/.jpeg, nothing done, nothing printed
  RecoverableFailure  folder creation or resize failed, walk continues

If listing a folder fails, the walk stops and the summary carries a
FatalFailure. Files written up to that point stay where they are.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from thumbnail.pipeline.params import ScanConfig
from thumbnail.pipeline.resize import ResizeFn, make_resizer

JPEG_EXTS = (".jpg", ".jpeg")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Converted:
    source: Path
    destination: Path


@dataclass(frozen=True)
class Skip:
    source: Path


@dataclass(frozen=True)
class RecoverableFailure:
    source: Path
    destination: Path
    reason: str


@dataclass(frozen=True)
class FatalFailure:
    reason: str


FileResult = Union[Converted, Skip, RecoverableFailure]


@dataclass
class WalkSummary:
    converted: int = 0
    skipped: int = 0
    failures: List[RecoverableFailure] = field(default_factory=list)
    fatal: Optional[FatalFailure] = None

    @property
    def ok(self) -> bool:
        return not self.failures and self.fatal is None

    def record(self, result: FileResult) -> None:
        if isinstance(result, Converted):
            self.converted += 1
        elif isinstance(result, Skip):
            self.skipped += 1
        else:
            self.failures.append(result)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def is_eligible(path: Path) -> bool:
    return path.name.lower().endswith(JPEG_EXTS)


def mirror_path(source_root: Path, dest_root: Path, file: Path) -> Path:
    return dest_root / file.relative_to(source_root)


def _dir_key(path: Path) -> tuple:
    st = path.stat()
    return st.st_dev, st.st_ino


def iter_tree_files(
    root: Path,
    max_depth: Optional[int],
    follow_symlinks: bool = True,
    sort_entries: bool = True,
    exclude: Iterable[Path] = (),
) -> Iterator[Path]:
    """
    Lazily yield the files under root, at most max_depth levels down
    (None = no limit).

    Folders already on the current descent path are not entered again
    (symlink loops). Folders in `exclude` are never entered.
    OSError from listing a folder is not caught here.
    """
    excluded = {Path(p) for p in exclude}

    def _walk(folder: Path, depth: int, ancestors: frozenset) -> Iterator[Path]:
        entries = list(folder.iterdir())
        if sort_entries:
            entries.sort(key=lambda p: p.name)

        for entry in entries:
            if entry.is_symlink() and not follow_symlinks:
                continue

            if entry.is_dir():
                if max_depth is not None and depth >= max_depth:
                    continue
                if entry in excluded:
                    continue
                key = _dir_key(entry)
                if key in ancestors:
                    print(f"[Thumbnail] Symlink loop, not descending: {entry}")
                    continue
                yield from _walk(entry, depth + 1, ancestors | {key})
            elif entry.is_file():
                yield entry

    yield from _walk(root, 1, frozenset({_dir_key(root)}))


# ---------------------------------------------------------------------------
# Walk
# ---------------------------------------------------------------------------

def process_file(config: ScanConfig, file: Path, resize_fn: ResizeFn) -> FileResult:
    if not is_eligible(file):
        return Skip(file)

    dst = mirror_path(config.source_root, config.dest_root, file)

    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return RecoverableFailure(file, dst, f"cannot create folder {dst.parent}: {e}")

    try:
        resize_fn(file, dst, config.mode)
    except OSError as e:
        return RecoverableFailure(file, dst, str(e))

    return Converted(file, dst)


def _nested_dest(config: ScanConfig) -> List[Path]:
    """
    The destination root, if it lives inside the source tree, spelled
    the way the walk will reach it from source_root.
    """
    try:
        rel = config.dest_root.resolve().relative_to(config.source_root.resolve())
    except ValueError:
        return []
    return [config.source_root / rel]


def walk(
    config: ScanConfig,
    resize_fn: Optional[ResizeFn] = None,
    settings: Optional[dict] = None,
) -> WalkSummary:
    """
    Process every file under config.source_root, one after another.

    resize_fn defaults to the Pillow resizer built from `settings`.
    """
    settings = settings or {}
    walk_cfg = settings.get("walk", {})
    if resize_fn is None:
        resize_fn = make_resizer(settings)

    files = iter_tree_files(
        config.source_root,
        config.max_depth,
        follow_symlinks=bool(walk_cfg.get("follow_symlinks", True)),
        sort_entries=bool(walk_cfg.get("sort_entries", True)),
        exclude=_nested_dest(config),
    )

    summary = WalkSummary()
    while True:
        try:
            file = next(files)
        except StopIteration:
            break
        except OSError as e:
            summary.fatal = FatalFailure(f"cannot read folder: {e}")
            print(f"[ERROR] Walk aborted, {summary.fatal.reason}", file=sys.stderr)
            break

        result = process_file(config, file, resize_fn)
        summary.record(result)

        if isinstance(result, Converted):
            rel = os.path.relpath(result.source, config.source_root)
            print(f"[Resize] {rel} -> {result.destination}")
        elif isinstance(result, RecoverableFailure):
            print(
                f"[ERROR] Resize failed: {result.reason}\n"
                f"        src: {result.source}\n"
                f"        dst: {result.destination}",
                file=sys.stderr,
            )

    return summary
