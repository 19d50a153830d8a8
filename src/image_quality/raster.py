from __future__ import annotations

from PIL import Image

from .contracts import RasterBuffer


def fit_inside(width: int, height: int, max_edge: int) -> tuple[int, int]:
    """
    Dimensions of (width, height) scaled down to fit a max_edge square.

    Aspect ratio is preserved and images are never enlarged.
    """

    if width <= 0 or height <= 0:
        return (max(width, 0), max(height, 0))
    scale = min(max_edge / width, max_edge / height, 1.0)
    if scale >= 1.0:
        return (width, height)
    return (max(1, round(width * scale)), max(1, round(height * scale)))


def working_copy(raster: RasterBuffer, *, max_edge: int) -> RasterBuffer:
    """
    Bounded-resolution copy of a raster for the brightness and framing analyzers.

    Rasters that already fit are returned as-is (the engine never writes to
    them). Larger rasters are resampled with Lanczos filtering.
    """

    if not raster.is_well_formed():
        return RasterBuffer(width=0, height=0, data=b"")

    target = fit_inside(raster.width, raster.height, max_edge)
    if target == (raster.width, raster.height):
        return raster

    img = Image.frombytes("L", (raster.width, raster.height), raster.data[: raster.width * raster.height])
    resized = img.resize(target, resample=Image.Resampling.LANCZOS)
    return RasterBuffer(width=resized.width, height=resized.height, data=resized.tobytes())
