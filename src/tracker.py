# src/tracker.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

import cv2
import numpy as np
from loguru import logger

from roi import ROI, Point, crop_roi
from scorer import DEFAULT_BLUR, score_region

DIFF_METHODS = (cv2.TM_SQDIFF, cv2.TM_SQDIFF_NORMED)


class FrameSource(Protocol):
    def read_at(self, index: int) -> Optional[np.ndarray]: ...


@dataclass
class TrackResult:
    start_index: int
    scores: List[Optional[int]] = field(default_factory=list)  # one per offset, None = no frame
    matches: List[Optional[ROI]] = field(default_factory=list)
    failed_frames: List[int] = field(default_factory=list)

    @property
    def frames(self) -> int:
        return len(self.scores)

    @property
    def scored(self) -> int:
        return sum(1 for s in self.scores if s is not None)

    @property
    def partial(self) -> bool:
        return bool(self.failed_frames)

    @property
    def max_score(self) -> Optional[int]:
        valid = [s for s in self.scores if s is not None]
        return max(valid) if valid else None


def match_template(frame: np.ndarray, patch: np.ndarray, method: int = cv2.TM_CCORR_NORMED) -> Point:
    """Top-left corner of the best match of patch inside frame."""
    res = cv2.matchTemplate(frame, patch, method)
    _, _, min_loc, max_loc = cv2.minMaxLoc(res)
    # SQDIFF is a distance, everything else a similarity
    return min_loc if method in DIFF_METHODS else max_loc


def _same_layout(frame: np.ndarray, patch: np.ndarray) -> np.ndarray:
    if frame.ndim == patch.ndim:
        return frame
    if patch.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)


def track_forward(
    source: FrameSource,
    start_index: int,
    patch: np.ndarray,
    frames: int = 30,
    method: int = cv2.TM_CCORR_NORMED,
    blur_kernel: Tuple[int, int] = DEFAULT_BLUR,
) -> TrackResult:
    """
    Match the original patch in frames start_index .. start_index+frames-1
    and score each match.

    The patch is never re-templated, so the match can drift if the sign's
    appearance changes sharply. Frames that can't be read are recorded in
    failed_frames and get no score.
    """
    ph, pw = patch.shape[:2]
    result = TrackResult(start_index=start_index)

    for i in range(frames):
        idx = start_index + i
        img = source.read_at(idx)
        if img is None:
            logger.warning("Fail to grab frame {} (offset {})", idx, i)
            result.scores.append(None)
            result.matches.append(None)
            result.failed_frames.append(idx)
            continue

        img = _same_layout(img, patch)
        h, w = img.shape[:2]
        if h < ph or w < pw:
            logger.warning("Frame {} is {}x{}, smaller than the {}x{} patch", idx, w, h, pw, ph)
            result.scores.append(None)
            result.matches.append(None)
            result.failed_frames.append(idx)
            continue

        x, y = match_template(img, patch, method)
        match_roi: ROI = (x, y, pw, ph)
        score = score_region(crop_roi(img, match_roi), blur_kernel)
        logger.debug("Frame {}: match at ({}, {}) score {}", idx, x, y, score)

        result.scores.append(score)
        result.matches.append(match_roi)

    if result.partial:
        logger.warning(
            "Tracking scored {}/{} frames; failed: {}",
            result.scored, result.frames, result.failed_frames,
        )
    return result
