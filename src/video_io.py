from __future__ import annotations

from typing import Optional

import cv2
import numpy as np
from loguru import logger


def open_video(path: str) -> cv2.VideoCapture:
    cap = cv2.VideoCapture(path)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open video: {path}")
    return cap


def get_fps(cap: cv2.VideoCapture, fps_fallback: float = 30.0) -> float:
    fps = cap.get(cv2.CAP_PROP_FPS)
    return fps if fps and fps > 1e-3 else fps_fallback


def get_frame_size(cap: cv2.VideoCapture) -> tuple[int, int]:
    w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
    h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    return w, h


def get_frame_count(cap: cv2.VideoCapture) -> int:
    return int(cap.get(cv2.CAP_PROP_FRAME_COUNT))


class VideoSource:
    """
    Frame-indexed random access over a video file.

    The player keeps one of these for playback and the scoring session a
    second one for look-ahead reads, so seeking ahead never moves playback.
    """

    def __init__(self, path: str, fps_fallback: float = 30.0) -> None:
        self.path = path
        self.cap = open_video(path)
        self.fps = get_fps(self.cap, fps_fallback)
        self.frame_count = get_frame_count(self.cap)
        self.frame_size = get_frame_size(self.cap)  # (w, h)

    @property
    def position(self) -> int:
        """Index of the frame the next read() returns."""
        return int(self.cap.get(cv2.CAP_PROP_POS_FRAMES))

    def seek(self, index: int) -> None:
        index = max(0, min(int(index), max(self.frame_count - 1, 0)))
        self.cap.set(cv2.CAP_PROP_POS_FRAMES, index)

    def read(self) -> Optional[np.ndarray]:
        ok, frame = self.cap.read()
        if not ok or frame is None or frame.size == 0:
            return None
        return frame

    def read_at(self, index: int) -> Optional[np.ndarray]:
        if index < 0 or (self.frame_count > 0 and index >= self.frame_count):
            logger.debug("Frame {} outside 0..{}", index, self.frame_count - 1)
            return None
        self.cap.set(cv2.CAP_PROP_POS_FRAMES, index)
        return self.read()

    def duration_seconds(self) -> float:
        return self.frame_count / self.fps if self.fps else 0.0

    def release(self) -> None:
        self.cap.release()

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, *exc) -> None:
        self.release()
