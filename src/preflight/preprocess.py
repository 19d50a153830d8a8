from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Mapping

from PIL import Image, ImageFilter, ImageOps

from .contracts import PreprocessOptions


def resolve_preprocess_options(raw: Any = None) -> PreprocessOptions | None:
    """
    None or False disables preprocessing; True selects the default pipeline;
    a mapping overrides defaults field by field.
    """

    if raw is None or raw is False:
        return None
    if raw is True:
        return PreprocessOptions()
    if not isinstance(raw, Mapping):
        raise ValueError("preprocess options must be a mapping, True, False or None")

    known = {f.name for f in fields(PreprocessOptions)}
    for key in raw:
        if key not in known:
            raise ValueError(f"unknown preprocess option: {key}")
    return replace(PreprocessOptions(), **dict(raw))


def _resize_to_width(img: Image.Image, width: int) -> Image.Image:
    height = max(1, round(img.height * width / img.width))
    return img.resize((width, height), resample=Image.Resampling.LANCZOS)


def _lut(fn) -> list[int]:
    return [min(255, max(0, int(round(fn(v))))) for v in range(256)]


def preprocess_image(img: Image.Image, options: PreprocessOptions) -> Image.Image:
    """
    Enhance a decoded image for OCR. Returns a new 8-bit grayscale image;
    the input is left untouched.
    """

    out = ImageOps.exif_transpose(img).convert("L")

    if options.max_width is not None and out.width > options.max_width:
        out = _resize_to_width(out, options.max_width)

    if options.median:
        out = out.filter(ImageFilter.MedianFilter(size=3))

    if options.contrast is not None and options.contrast != 1:
        factor = options.contrast
        offset = -128 * (factor - 1)  # keeps mid-gray fixed
        out = out.point(_lut(lambda v: v * factor + offset))

    if options.normalize:
        out = ImageOps.autocontrast(out, cutoff=1)

    if options.threshold is not None:
        cut = options.threshold
        out = out.point(_lut(lambda v: 255 if v >= cut else 0))

    if options.sharpen:
        out = out.filter(ImageFilter.UnsharpMask(radius=0.8, percent=60, threshold=2))

    if options.zoom is not None and options.zoom > 1:
        target = max(1, round(out.width * options.zoom))
        if options.max_width is not None:
            target = min(target, options.max_width)
        if target != out.width:
            out = _resize_to_width(out, target)

    return out
