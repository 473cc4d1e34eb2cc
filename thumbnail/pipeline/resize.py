#!/usr/bin/env python3
"""
thumbnail.pipeline.resize

Resize a single JPEG with Pillow.

Two modes, chosen once per run:

  - Dimensions(width, height):
      fit the image inside a width x height box (aspect ratio kept),
      or stretch to the exact box when resize.keep_aspect is false

  - Ratio(factor):
      scale both sides by the factor (0.3 -> 30%)

Behavior is tuned by config.yaml -> resize.*:

  quality      JPEG quality of the written file
  resample     nearest | bilinear | bicubic | lanczos
  keep_aspect  see above
  keep_exif    copy the source EXIF block into the output

Anything that goes wrong reading or writing surfaces as OSError.
"""

from pathlib import Path
from typing import Callable, Tuple

from PIL import Image, ImageOps

from thumbnail.pipeline.params import Dimensions, Ratio, ResizeMode

RESAMPLE_FILTERS = {
    "nearest": Image.NEAREST,
    "bilinear": Image.BILINEAR,
    "bicubic": Image.BICUBIC,
    "lanczos": Image.LANCZOS,
}

# Pillow can write these modes to JPEG as they are
JPEG_MODES = {"RGB", "L", "CMYK"}

ResizeFn = Callable[[Path, Path, ResizeMode], None]


def get_resample_filter(name: str) -> int:
    try:
        return RESAMPLE_FILTERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown resample filter {name!r}, "
            f"expected one of: {', '.join(RESAMPLE_FILTERS)}"
        ) from None


def target_size(
    size: Tuple[int, int], mode: ResizeMode, keep_aspect: bool = True
) -> Tuple[int, int]:
    """
    Output size for an image of `size` under `mode`. Never below 1x1.
    """
    w, h = size

    if isinstance(mode, Ratio):
        return max(1, round(w * mode.factor)), max(1, round(h * mode.factor))

    if isinstance(mode, Dimensions):
        if not keep_aspect:
            return mode.width, mode.height
        scale = min(mode.width / w, mode.height / h)
        return max(1, round(w * scale)), max(1, round(h * scale))

    raise TypeError(f"Unsupported resize mode: {mode!r}")


def resize_image(
    src: Path,
    dst: Path,
    mode: ResizeMode,
    quality: int = 85,
    resample: str = "lanczos",
    keep_aspect: bool = True,
    keep_exif: bool = True,
) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Resize src into dst (JPEG). dst's parent folder must already exist.

    Returns ((old_w, old_h), (new_w, new_h)).
    """
    resample_filter = get_resample_filter(resample)

    try:
        return _resize_to(src, dst, mode, quality, resample_filter, keep_aspect, keep_exif)
    except (SyntaxError, ValueError, Image.DecompressionBombError) as e:
        # Pillow reports some broken inputs (bad EXIF, bombs) outside OSError
        raise OSError(f"{src}: {e}") from e


def _resize_to(src, dst, mode, quality, resample_filter, keep_aspect, keep_exif):
    with Image.open(src) as im:
        exif = im.info.get("exif") if keep_exif else None

        # Respect camera orientation before measuring
        im = ImageOps.exif_transpose(im)
        if im.mode not in JPEG_MODES:
            im = im.convert("RGB")

        old_size = im.size
        new_size = target_size(old_size, mode, keep_aspect=keep_aspect)
        if new_size != old_size:
            im = im.resize(new_size, resample_filter)

        save_kwargs = {"quality": quality}
        if exif:
            # Orientation was applied above, drop the tag from the copy
            exif_data = Image.Exif()
            exif_data.load(exif)
            exif_data.pop(0x0112, None)
            save_kwargs["exif"] = exif_data.tobytes()

        im.save(dst, "JPEG", **save_kwargs)

    return old_size, new_size


def make_resizer(settings: dict) -> ResizeFn:
    """
    Bind the resize.* settings, giving the (src, dst, mode) callable the
    walker expects.
    """
    resize_cfg = settings.get("resize", {})
    quality = int(resize_cfg.get("quality", 85))
    resample = str(resize_cfg.get("resample", "lanczos"))
    keep_aspect = bool(resize_cfg.get("keep_aspect", True))
    keep_exif = bool(resize_cfg.get("keep_exif", True))

    if not 1 <= quality <= 95:
        raise ValueError(f"resize.quality must be between 1 and 95, got {quality}")
    get_resample_filter(resample)

    def _resize(src: Path, dst: Path, mode: ResizeMode) -> None:
        resize_image(
            src,
            dst,
            mode,
            quality=quality,
            resample=resample,
            keep_aspect=keep_aspect,
            keep_exif=keep_exif,
        )

    return _resize
