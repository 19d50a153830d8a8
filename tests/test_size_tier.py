from __future__ import annotations

import unittest

from image_quality.config import SizeTierOptions
from image_quality.contracts import SizeTier
from image_quality.size_tier import classify_size_tier

_TIER_RANK = {
    SizeTier.UNKNOWN: 0,
    SizeTier.REJECT: 1,
    SizeTier.WARN: 2,
    SizeTier.PASS: 3,
    SizeTier.EXCELLENT: 4,
}


class TestSizeTier(unittest.TestCase):
    def test_missing_short_edge_is_unavailable(self) -> None:
        for short_edge in (0, None, -10):
            r = classify_size_tier(short_edge, SizeTierOptions())
            self.assertEqual(r.tier, SizeTier.UNKNOWN)
            self.assertEqual(r.reason, "size_unavailable")
            self.assertIsNone(r.warning)

    def test_tier_boundaries_with_defaults(self) -> None:
        opts = SizeTierOptions()

        r = classify_size_tier(999, opts)
        self.assertEqual((r.tier, r.reason, r.warning), (SizeTier.REJECT, "size_too_small:999", None))

        r = classify_size_tier(1000, opts)
        self.assertEqual((r.tier, r.reason, r.warning), (SizeTier.WARN, None, "size_low:1000"))

        r = classify_size_tier(1500, opts)
        self.assertEqual((r.tier, r.reason, r.warning), (SizeTier.PASS, None, None))

        r = classify_size_tier(2499, opts)
        self.assertEqual(r.tier, SizeTier.PASS)

        r = classify_size_tier(2500, opts)
        self.assertEqual((r.tier, r.reason, r.warning), (SizeTier.EXCELLENT, None, None))

    def test_at_most_one_of_reason_or_warning(self) -> None:
        opts = SizeTierOptions(reject_below=10, warn_below=20, excellent_at=30)
        for short_edge in range(0, 40):
            r = classify_size_tier(short_edge, opts)
            self.assertFalse(r.reason is not None and r.warning is not None, short_edge)

    def test_shrinking_short_edge_never_raises_the_tier(self) -> None:
        opts = SizeTierOptions(reject_below=50, warn_below=80, excellent_at=120)
        previous_rank = None
        for short_edge in range(200, -1, -1):
            rank = _TIER_RANK[classify_size_tier(short_edge, opts).tier]
            if previous_rank is not None:
                self.assertLessEqual(rank, previous_rank, short_edge)
            previous_rank = rank


if __name__ == "__main__":
    unittest.main()
