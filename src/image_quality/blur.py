from __future__ import annotations

import numpy as np

from .contracts import RasterBuffer


def laplacian_variance(raster: RasterBuffer) -> float:
    """
    Focus score: population variance of the 4-neighbour Laplacian
    (-4*center + up + down + left + right) over interior pixels.

    Near zero for flat or defocused content, large for sharp edges and text.
    Rasters narrower or shorter than 3 pixels score 0.
    """

    if raster.width < 3 or raster.height < 3:
        return 0.0

    px = raster.to_array().astype(np.int32)
    lap = (
        px[:-2, 1:-1]
        + px[2:, 1:-1]
        + px[1:-1, :-2]
        + px[1:-1, 2:]
        - 4 * px[1:-1, 1:-1]
    )

    count = lap.size
    # Integer sums are exact; |lap| <= 1020 so lap**2 fits in int32.
    total = int(lap.sum(dtype=np.int64))
    total_sq = int(np.square(lap).sum(dtype=np.int64))

    mean = total / count
    return total_sq / count - mean * mean
