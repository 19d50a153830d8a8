from __future__ import annotations

import math

import numpy as np


def round_half_up(value: float) -> int:
    """
    Round halves up for non-negative sizes (2.5 -> 3).
    """

    return int(math.floor(value + 0.5))


def average_density(column_counts: np.ndarray, start: int, end: int, height: int) -> float:
    """
    Mean edge density (edge pixels / height) over columns start..end inclusive.

    An empty range yields 0.
    """

    if start > end or height <= 0:
        return 0.0
    segment = column_counts[start : end + 1]
    if segment.size == 0:
        return 0.0
    return float(int(segment.sum()) / height / segment.size)
