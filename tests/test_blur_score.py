from __future__ import annotations

import unittest

import numpy as np

from image_quality.blur import laplacian_variance
from image_quality.contracts import RasterBuffer


class TestLaplacianVariance(unittest.TestCase):
    def test_flat_raster_scores_zero(self) -> None:
        for value in (0, 128, 255):
            raster = RasterBuffer(width=40, height=30, data=bytes([value]) * (40 * 30))
            self.assertEqual(laplacian_variance(raster), 0.0)

    def test_rasters_smaller_than_3x3_score_zero(self) -> None:
        for width, height in ((0, 0), (1, 1), (2, 2), (2, 10), (10, 2)):
            raster = RasterBuffer(width=width, height=height, data=bytes([200]) * (width * height))
            self.assertEqual(laplacian_variance(raster), 0.0)

    def test_single_bright_pixel_matches_hand_computation(self) -> None:
        # Interior is 3x3: center response -1020, four neighbours +255, corners 0.
        # mean 0, E[L^2] = (1020^2 + 4 * 255^2) / 9 = 144500
        px = np.zeros((5, 5), dtype=np.uint8)
        px[2, 2] = 255
        self.assertAlmostEqual(laplacian_variance(RasterBuffer.from_array(px)), 144500.0)

    def test_linear_ramp_has_no_second_derivative(self) -> None:
        ramp = np.tile((np.arange(64) * 2).astype(np.uint8), (48, 1))
        self.assertEqual(laplacian_variance(RasterBuffer.from_array(ramp)), 0.0)

    def test_sharp_stripes_score_higher_than_soft_ones(self) -> None:
        xs = np.arange(64)
        sharp = np.tile(np.where((xs // 2) % 2 == 0, 255, 0).astype(np.uint8), (64, 1))
        soft = np.tile((127 + 40 * np.sin(xs / 8.0)).astype(np.uint8), (64, 1))
        self.assertGreater(
            laplacian_variance(RasterBuffer.from_array(sharp)),
            laplacian_variance(RasterBuffer.from_array(soft)),
        )


if __name__ == "__main__":
    unittest.main()
