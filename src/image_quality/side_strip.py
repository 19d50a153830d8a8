from __future__ import annotations

import numpy as np

from .config import SideStripOptions
from .contracts import SideStripMetrics, SideStripResult
from .density import average_density, round_half_up


def detect_side_strip(
    column_counts: np.ndarray, width: int, height: int, options: SideStripOptions
) -> SideStripResult:
    """
    Look for a sliver of an adjacent page along the right edge.

    Candidate boundary columns sit one band width inside the right margin
    offset. A column whose own density clears `boundary_threshold` is a
    boundary when the bands on both sides carry content and the right band is
    at least `min_right_to_left_ratio` as dense as the left one. The first
    qualifying column (left to right) wins.
    """

    if not options.enabled:
        return SideStripResult(detected=False, metrics=None)

    band_width = max(1, round_half_up(width * options.band_ratio))
    min_boundary_offset = max(1, round_half_up(width * options.min_boundary_offset_ratio))
    start = max(0, width - band_width - min_boundary_offset)
    end = max(0, width - min_boundary_offset)

    for x in range(start, end):
        density = float(column_counts[x]) / height
        if density < options.boundary_threshold:
            continue

        left_mean = average_density(column_counts, max(0, x - band_width), max(0, x - 1), height)
        right_mean = average_density(
            column_counts, min(width - 1, x + 1), min(width - 1, x + band_width), height
        )
        ratio = right_mean / left_mean if left_mean > 0 else 0.0
        if (
            left_mean >= options.content_threshold
            and right_mean >= options.content_threshold
            and ratio >= options.min_right_to_left_ratio
        ):
            return SideStripResult(
                detected=True,
                metrics=SideStripMetrics(
                    detected=True,
                    boundary_column=x,
                    boundary_density=density,
                    left_avg=left_mean,
                    right_avg=right_mean,
                    right_to_left_ratio=ratio,
                    band_width=band_width,
                ),
            )

    return SideStripResult(
        detected=False,
        metrics=SideStripMetrics(
            detected=False,
            boundary_column=None,
            boundary_density=0.0,
            left_avg=0.0,
            right_avg=0.0,
            right_to_left_ratio=0.0,
            band_width=band_width,
        ),
    )
