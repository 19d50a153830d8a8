from __future__ import annotations

import dataclasses
import unittest

from image_quality.config import (
    BrightnessOptions,
    DocumentOptions,
    QualityOptions,
    SideStripOptions,
    SizeTierOptions,
    resolve_quality_options,
)


class TestResolveQualityOptions(unittest.TestCase):
    def test_none_and_false_give_defaults(self) -> None:
        self.assertEqual(resolve_quality_options(None), QualityOptions())
        self.assertEqual(resolve_quality_options(False), QualityOptions())
        self.assertEqual(resolve_quality_options(), QualityOptions())

    def test_defaults(self) -> None:
        opts = QualityOptions()
        self.assertEqual(opts.size_tiers, SizeTierOptions(reject_below=1000, warn_below=1500, excellent_at=2500))
        self.assertEqual(opts.blur_threshold, 120.0)
        self.assertEqual(opts.blur_guard.min_edge_pixel_ratio, 0.01)
        self.assertEqual(opts.blur_guard.min_coverage, 0.1)
        self.assertFalse(opts.brightness_rejects)
        self.assertTrue(opts.document.enabled)
        self.assertTrue(opts.document.multiple.enabled)
        self.assertFalse(opts.document.side_strip.enabled)
        self.assertEqual(opts.working_size, 512)

    def test_number_sets_blur_threshold(self) -> None:
        opts = resolve_quality_options(75)
        self.assertEqual(opts.blur_threshold, 75.0)
        self.assertEqual(opts.brightness, BrightnessOptions())

    def test_true_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            resolve_quality_options(True)

    def test_brightness_can_be_disabled(self) -> None:
        self.assertIsNone(resolve_quality_options({"brightness": False}).brightness)
        self.assertIsNone(resolve_quality_options({"brightness": None}).brightness)

    def test_partial_brightness_keeps_other_defaults(self) -> None:
        opts = resolve_quality_options({"brightness": {"min_mean": 40}})
        self.assertEqual(opts.brightness.min_mean, 40)
        self.assertEqual(opts.brightness.max_mean, 200.0)
        self.assertEqual(opts.brightness.dark_threshold, 30)

    def test_size_tiers_can_be_disabled_or_overlaid(self) -> None:
        self.assertIsNone(resolve_quality_options({"size_tiers": None}).size_tiers)
        opts = resolve_quality_options({"size_tiers": {"reject_below": 800}})
        self.assertEqual(opts.size_tiers, SizeTierOptions(reject_below=800))

    def test_document_toggles(self) -> None:
        self.assertFalse(resolve_quality_options({"document": False}).document.enabled)

        opts = resolve_quality_options({"document": {"multiple": False}})
        self.assertTrue(opts.document.enabled)
        self.assertFalse(opts.document.multiple.enabled)
        self.assertEqual(opts.document.multiple.component_step, 4)

    def test_side_strip_overlay(self) -> None:
        opts = resolve_quality_options(
            {"document": {"min_coverage": 0.4, "side_strip": {"enabled": True, "band_ratio": 0.1}}}
        )
        self.assertEqual(opts.document.min_coverage, 0.4)
        self.assertEqual(opts.document.max_coverage, DocumentOptions().max_coverage)
        self.assertEqual(opts.document.side_strip, SideStripOptions(enabled=True, band_ratio=0.1))

    def test_blur_guard_overlay(self) -> None:
        opts = resolve_quality_options({"blur_guard": {"min_coverage": None}})
        self.assertIsNone(opts.blur_guard.min_coverage)
        self.assertEqual(opts.blur_guard.min_edge_pixel_ratio, 0.01)

    def test_none_and_false_disable_every_section_alike(self) -> None:
        for off in (None, False):
            opts = resolve_quality_options(
                {
                    "size_tiers": off,
                    "brightness": off,
                    "blur_guard": off,
                    "document": {"side_strip": off, "multiple": off},
                }
            )
            self.assertIsNone(opts.size_tiers)
            self.assertIsNone(opts.brightness)
            self.assertIsNone(opts.blur_guard.min_edge_pixel_ratio)
            self.assertIsNone(opts.blur_guard.min_coverage)
            self.assertTrue(opts.document.enabled)
            self.assertFalse(opts.document.side_strip.enabled)
            self.assertFalse(opts.document.multiple.enabled)

            self.assertFalse(resolve_quality_options({"document": off}).document.enabled)

    def test_explicit_none_side_strip_is_not_ignored(self) -> None:
        opts = resolve_quality_options({"document": {"side_strip": None}})
        self.assertFalse(opts.document.side_strip.enabled)
        # Absent keys keep the defaults.
        self.assertTrue(resolve_quality_options({"document": {}}).document.multiple.enabled)

    def test_unknown_keys_are_rejected_with_their_path(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown quality option: blur"):
            resolve_quality_options({"blur": 10})
        with self.assertRaisesRegex(ValueError, "unknown quality option: document.multiple.nope"):
            resolve_quality_options({"document": {"multiple": {"nope": 1}}})
        with self.assertRaisesRegex(ValueError, "unknown quality option: brightness.mean"):
            resolve_quality_options({"brightness": {"mean": 1}})

    def test_defaults_are_not_mutated(self) -> None:
        raw = {"blur_threshold": 10, "document": {"side_strip": {"enabled": True}}}
        resolve_quality_options(raw)
        self.assertEqual(raw, {"blur_threshold": 10, "document": {"side_strip": {"enabled": True}}})
        self.assertEqual(resolve_quality_options(None), QualityOptions())
        self.assertFalse(QualityOptions().document.side_strip.enabled)

    def test_options_are_immutable(self) -> None:
        opts = resolve_quality_options(None)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            opts.blur_threshold = 1.0  # type: ignore[misc]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            opts.document.enabled = False  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
