from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from image_quality.contracts import RasterBuffer
from image_quality.raster import fit_inside

from .contracts import PreprocessOptions
from .preprocess import preprocess_image


def load_raster(
    image_file: Path, *, max_edge: int | None = None, preprocess: PreprocessOptions | None = None
) -> RasterBuffer:
    """
    Decode an image file into an 8-bit grayscale raster, optionally enhanced
    by `preprocess` before it is bounded by `max_edge`.

    Raises OSError (including PIL.UnidentifiedImageError) when the file is
    missing or cannot be decoded, and PIL.Image.DecompressionBombError when
    it exceeds Pillow's pixel limit.
    """

    with Image.open(image_file) as img:
        if preprocess is not None:
            gray = preprocess_image(img, preprocess)
        else:
            gray = img.convert("L")

    if max_edge is not None:
        target = fit_inside(gray.width, gray.height, max_edge)
        if target != gray.size:
            gray = gray.resize(target, resample=Image.Resampling.LANCZOS)

    return RasterBuffer.from_array(np.asarray(gray, dtype=np.uint8))
