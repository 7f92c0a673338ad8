# src/session.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger

from config import Config
from roi import ROI, clamp_roi, crop_roi, roi_area
from scorer import score_region_with_overlay
from tracker import FrameSource, TrackResult, track_forward


@dataclass
class RetroScore:
    frame_index: int
    roi: ROI               # source-resolution coords
    instant: int
    max_score: int         # max(instant, best tracked score)
    tracked: TrackResult
    marked: Optional[np.ndarray] = None  # crop with mask outline, for display

    @property
    def partial(self) -> bool:
        return self.tracked.partial


class ScoringSession:
    """
    Scores a selection and the frames after it.

    Owns the look-ahead frame source; playback keeps its own handle so
    nothing here moves the player's position.
    """

    def __init__(self, source: FrameSource, cfg: Config) -> None:
        self.source = source
        self.cfg = cfg

    def score_selection(self, frame_index: int, roi: ROI) -> RetroScore:
        frame = self.source.read_at(frame_index)
        if frame is None:
            raise RuntimeError(f"Fail to grab the current frame ({frame_index})")

        h, w = frame.shape[:2]
        roi_now = clamp_roi(roi, w, h)
        if roi_area(roi_now) == 0:
            raise ValueError(f"Invalid crop: {roi} -> {roi_now}")

        # copy so the patch outlives the decoded frame buffer
        patch = crop_roi(frame, roi_now).copy()
        instant, marked = score_region_with_overlay(patch, self.cfg.blur_kernel)
        logger.info("Frame {} ROI {} instant score {}", frame_index, roi_now, instant)

        # the selection frame is scored above; track the frames after it
        tracked = track_forward(
            self.source,
            frame_index + 1,
            patch,
            frames=self.cfg.track_frames,
            method=self.cfg.match_method,
            blur_kernel=self.cfg.blur_kernel,
        )
        best = tracked.max_score
        max_score = instant if best is None else max(instant, best)

        return RetroScore(
            frame_index=frame_index,
            roi=roi_now,
            instant=instant,
            max_score=max_score,
            tracked=tracked,
            marked=marked,
        )
