"""Shared fixtures for the retro-scorer test suite."""
from __future__ import annotations

from typing import List, Optional

import cv2
import numpy as np
import pytest


class ListSource:
    """In-memory stand-in for VideoSource; None entries simulate failed reads."""

    def __init__(self, frames: List[Optional[np.ndarray]]) -> None:
        self.frames = frames
        self.reads: List[int] = []

    def read_at(self, index: int) -> Optional[np.ndarray]:
        self.reads.append(index)
        if index < 0 or index >= len(self.frames):
            return None
        return self.frames[index]


def square_frame(x: int = 40, y: int = 40, size: int = 20, shape=(100, 100)) -> np.ndarray:
    """Dark BGR frame with a bright square at (x, y)."""
    gray = np.zeros(shape, dtype=np.uint8)
    gray[y:y + size, x:x + size] = 255
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


@pytest.fixture
def bright_square_frame() -> np.ndarray:
    return square_frame()


@pytest.fixture
def static_source() -> ListSource:
    """31 identical frames (a selection plus 30 following) with the square at (40, 40)."""
    return ListSource([square_frame() for _ in range(31)])


@pytest.fixture
def noise_frame() -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
