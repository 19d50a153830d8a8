from __future__ import annotations

from .config import SizeTierOptions
from .contracts import SizeTier, SizeTierResult


def classify_size_tier(short_edge: int | None, options: SizeTierOptions | None = None) -> SizeTierResult:
    """
    Grade the short edge (min of width, height) against the tier cut-offs.

    Exactly one of reason / warning / neither is produced.
    """

    opts = options or SizeTierOptions()
    if not short_edge or short_edge <= 0:
        return SizeTierResult(tier=SizeTier.UNKNOWN, reason="size_unavailable")

    if short_edge < opts.reject_below:
        return SizeTierResult(tier=SizeTier.REJECT, reason=f"size_too_small:{short_edge}")
    if short_edge < opts.warn_below:
        return SizeTierResult(tier=SizeTier.WARN, warning=f"size_low:{short_edge}")
    if short_edge >= opts.excellent_at:
        return SizeTierResult(tier=SizeTier.EXCELLENT)
    return SizeTierResult(tier=SizeTier.PASS)
