from __future__ import annotations

import numpy as np

from .config import BrightnessOptions
from .contracts import BrightnessMetrics, BrightnessResult, RasterBuffer


def analyze_brightness(working: RasterBuffer, options: BrightnessOptions) -> BrightnessResult:
    """
    Mean luminance plus dark/bright sample fractions of the working raster.

    Checks run in a fixed priority order (mean low, mean high, too many dark
    samples, too many bright samples); the first match is the only tag.
    """

    total = working.width * working.height
    if total <= 0 or not working.is_well_formed():
        return BrightnessResult(reason="brightness_unavailable", metrics=None)

    px = working.to_array()
    mean = int(px.sum(dtype=np.int64)) / total
    dark_percent = int(np.count_nonzero(px <= options.dark_threshold)) / total
    bright_percent = int(np.count_nonzero(px >= options.bright_threshold)) / total

    reason: str | None = None
    if options.min_mean is not None and mean < options.min_mean:
        reason = f"brightness_mean_low:{mean:.2f}"
    elif options.max_mean is not None and mean > options.max_mean:
        reason = f"brightness_mean_high:{mean:.2f}"
    elif options.max_dark_percent is not None and dark_percent > options.max_dark_percent:
        reason = f"brightness_too_dark_pixels:{dark_percent:.3f}"
    elif options.max_bright_percent is not None and bright_percent > options.max_bright_percent:
        reason = f"brightness_too_bright_pixels:{bright_percent:.3f}"

    return BrightnessResult(
        reason=reason,
        metrics=BrightnessMetrics(
            mean=mean,
            dark_percent=dark_percent,
            bright_percent=bright_percent,
        ),
    )
