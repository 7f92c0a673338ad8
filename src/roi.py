from typing import Tuple

import numpy as np

ROI = Tuple[int, int, int, int]   # (x, y, w, h)
Point = Tuple[int, int]


def clamp_point(p: Point, w: int, h: int) -> Point:
    """Keep a point within a w x h image."""
    x, y = p
    x = max(0, min(w - 1, int(x)))
    y = max(0, min(h - 1, int(y)))
    return x, y


def roi_from_corners(p1: Point, p2: Point) -> ROI:
    # Drag can go in any direction
    x0, x1 = sorted((int(p1[0]), int(p2[0])))
    y0, y1 = sorted((int(p1[1]), int(p2[1])))
    return (x0, y0, x1 - x0, y1 - y0)


def scale_roi(roi: ROI, factor: float) -> ROI:
    # Scale corners rather than width/height so rounding can't eat the box
    x, y, w, h = roi
    x0, y0 = int(x * factor), int(y * factor)
    x1, y1 = int((x + w) * factor), int((y + h) * factor)
    return (x0, y0, x1 - x0, y1 - y0)


def clamp_roi(roi: ROI, w: int, h: int) -> ROI:
    x, y, rw, rh = roi
    x0 = max(0, min(x, w))
    y0 = max(0, min(y, h))
    x1 = max(x0, min(x + rw, w))
    y1 = max(y0, min(y + rh, h))
    return (x0, y0, x1 - x0, y1 - y0)


def roi_area(roi: ROI) -> int:
    _, _, w, h = roi
    return max(0, w) * max(0, h)


def crop_roi(frame: np.ndarray, roi: ROI) -> np.ndarray:
    x, y, w, h = roi
    return frame[y:y+h, x:x+w]
