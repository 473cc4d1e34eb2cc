#!/usr/bin/env python3
"""
thumbnail.pipeline.params

Turn the raw command-line strings into one immutable ScanConfig.

Rules:
  - --dst is required, --src defaults to the current folder
  - exactly one resize mode:
        --width + --height   -> Dimensions
        --ratio              -> Ratio
    (a lone --width or --height counts as "not given")
  - --recursive lifts the depth limit, otherwise only the direct
    children of the source folder are visited

Usage problems are checked before the filesystem is touched, and the
destination folder is only created once everything else is valid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

UNBOUNDED = None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ParameterError(Exception):
    """Base class for everything that stops a run before the walk starts."""


class UsageError(ParameterError):
    pass


class SetupError(ParameterError):
    pass


class MissingDestination(UsageError):
    pass


class InvalidDimensions(UsageError):
    pass


class InvalidRatio(UsageError):
    pass


class ConflictingResizeMode(UsageError):
    pass


class MissingResizeMode(UsageError):
    pass


class SourceNotFound(SetupError):
    pass


class DestinationNotDirectory(SetupError):
    pass


class DestinationCreateFailed(SetupError):
    pass


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height} px"


@dataclass(frozen=True)
class Ratio:
    factor: float

    def __str__(self) -> str:
        return f"x{self.factor:g}"


ResizeMode = Union[Dimensions, Ratio]


@dataclass(frozen=True)
class ScanConfig:
    source_root: Path
    dest_root: Path
    max_depth: Optional[int]
    mode: ResizeMode

    @property
    def recursive(self) -> bool:
        return self.max_depth is UNBOUNDED


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------

def _absolute(arg: str) -> Path:
    return Path(arg).expanduser().absolute()


def _check_source(src_arg: Optional[str]) -> Path:
    source_root = _absolute(src_arg) if src_arg is not None else Path.cwd().absolute()
    if not source_root.is_dir():
        raise SourceNotFound(f"Source folder does not exist: {source_root}")
    return source_root


def _prepare_destination(dest_root: Path) -> None:
    if dest_root.exists():
        if not dest_root.is_dir():
            raise DestinationNotDirectory(
                f"Destination is not a folder: {dest_root}"
            )
        return
    try:
        dest_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DestinationCreateFailed(
            f"Could not create destination folder {dest_root}: {e}"
        ) from e


def resolve_roots(src_arg: Optional[str], dst_arg: Optional[str]) -> Tuple[Path, Path]:
    """
    Validate the source folder and make sure the destination folder exists.

    Returns (source_root, dest_root), both absolute.
    """
    if dst_arg is None:
        raise MissingDestination("A destination folder (--dst) is required.")

    source_root = _check_source(src_arg)
    dest_root = _absolute(dst_arg)
    _prepare_destination(dest_root)
    return source_root, dest_root


def _parse_dimension(name: str, value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise InvalidDimensions(f"{name} must be an integer, got {value!r}.") from None
    if parsed <= 0:
        raise InvalidDimensions(f"{name} must be positive, got {parsed}.")
    return parsed


def _parse_ratio(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        raise InvalidRatio(f"ratio must be a number, got {value!r}.") from None
    if not math.isfinite(parsed) or parsed <= 0:
        raise InvalidRatio(f"ratio must be a positive number, got {value!r}.")
    return parsed


def resolve_mode(
    width_arg: Optional[str],
    height_arg: Optional[str],
    ratio_arg: Optional[str],
) -> ResizeMode:
    has_pair = width_arg is not None and height_arg is not None
    has_ratio = ratio_arg is not None

    if has_pair and has_ratio:
        raise ConflictingResizeMode(
            "Width/height and ratio cannot be given at the same time."
        )
    if has_pair:
        return Dimensions(
            width=_parse_dimension("width", width_arg),
            height=_parse_dimension("height", height_arg),
        )
    if has_ratio:
        return Ratio(factor=_parse_ratio(ratio_arg))
    raise MissingResizeMode("Give either --width and --height, or --ratio.")


def resolve_depth(recursive: bool) -> Optional[int]:
    return UNBOUNDED if recursive else 1


def resolve_config(
    src_arg: Optional[str],
    dst_arg: Optional[str],
    width_arg: Optional[str] = None,
    height_arg: Optional[str] = None,
    ratio_arg: Optional[str] = None,
    recursive: bool = False,
) -> ScanConfig:
    """
    Build the ScanConfig for one run, or raise a ParameterError.

    Order matters: usage errors first, then the source check, and the
    destination folder is created last.
    """
    if dst_arg is None:
        raise MissingDestination("A destination folder (--dst) is required.")

    mode = resolve_mode(width_arg, height_arg, ratio_arg)
    max_depth = resolve_depth(recursive)
    source_root, dest_root = resolve_roots(src_arg, dst_arg)

    return ScanConfig(
        source_root=source_root,
        dest_root=dest_root,
        max_depth=max_depth,
        mode=mode,
    )
