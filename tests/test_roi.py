"""Tests for roi and visualize helpers."""
from __future__ import annotations

import numpy as np

from roi import clamp_point, clamp_roi, crop_roi, roi_area, roi_from_corners, scale_roi
from visualize import draw_time, format_time


class TestRoi:
    def test_clamp_point(self):
        assert clamp_point((-5, 3), 100, 50) == (0, 3)
        assert clamp_point((150, 80), 100, 50) == (99, 49)

    def test_corners_any_order(self):
        assert roi_from_corners((10, 20), (30, 50)) == (10, 20, 20, 30)
        assert roi_from_corners((30, 50), (10, 20)) == (10, 20, 20, 30)
        assert roi_from_corners((30, 20), (10, 50)) == (10, 20, 20, 30)

    def test_corners_zero_area(self):
        assert roi_area(roi_from_corners((10, 10), (10, 40))) == 0

    def test_scale_to_source(self):
        # display at 0.5 -> source is 2x
        assert scale_roi((10, 15, 20, 30), 1 / 0.5) == (20, 30, 40, 60)
        assert scale_roi((10, 15, 20, 30), 1.0) == (10, 15, 20, 30)

    def test_clamp_roi(self):
        assert clamp_roi((-5, -5, 20, 20), 100, 100) == (0, 0, 15, 15)
        assert clamp_roi((90, 95, 20, 20), 100, 100) == (90, 95, 10, 5)
        assert roi_area(clamp_roi((150, 10, 20, 20), 100, 100)) == 0

    def test_crop(self):
        frame = np.arange(100, dtype=np.uint8).reshape(10, 10)
        crop = crop_roi(frame, (2, 3, 4, 5))
        assert crop.shape == (5, 4)
        assert crop[0, 0] == 32


class TestTimer:
    def test_format_time(self):
        assert format_time(0, 30.0) == "0:00"
        assert format_time(90 * 30, 30.0) == "1:30"
        assert format_time(100, 0.0) == "0:00"

    def test_draw_time_paints(self):
        frame = np.zeros((60, 120, 3), dtype=np.uint8)
        draw_time(frame, 300, 25.0)
        assert frame.any()
