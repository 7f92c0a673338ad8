# src/player.py
from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from config import Config
from roi import ROI, Point, clamp_point, roi_area, roi_from_corners, scale_roi
from session import RetroScore, ScoringSession
from video_io import VideoSource
from visualize import draw_selection, draw_time

WINDOW = "Video"
TARGET_WINDOW = "Target"
TRACKBAR = "Played(%)"

KEY_ESC = 27
# waitKeyEx arrow codes differ per backend (Win32, GTK, Cocoa)
KEYS_LEFT = {2424832, 65361, 63234}
KEYS_RIGHT = {2555904, 65363, 63235}


class Selection:
    """Mouse-drag rectangle in display coordinates."""

    def __init__(self) -> None:
        self.enabled = False
        self.bounds: Tuple[int, int] = (0, 0)  # displayed frame (w, h)
        self.reset()

    def reset(self) -> None:
        self.dragging = False
        self.selected = False
        self.p1: Optional[Point] = None
        self.p2: Optional[Point] = None

    def on_mouse(self, event: int, x: int, y: int, flags: int = 0, param=None) -> None:
        if not self.enabled:
            return

        if event == cv2.EVENT_LBUTTONDOWN:
            self.dragging = True
            self.selected = False
            self.p1 = (x, y)
            self.p2 = (x, y)
        elif event == cv2.EVENT_MOUSEMOVE and self.dragging:
            self.p2 = (x, y)
        elif event == cv2.EVENT_LBUTTONUP and self.dragging:
            self.dragging = False
            self.selected = True
            w, h = self.bounds
            self.p1 = clamp_point(self.p1, w, h)
            self.p2 = clamp_point((x, y), w, h)

    def roi(self) -> Optional[ROI]:
        if self.p1 is None or self.p2 is None:
            return None
        return roi_from_corners(self.p1, self.p2)


def display_scale_for(frame: np.ndarray, cfg: Config) -> float:
    return cfg.display_scale if frame.shape[0] > cfg.max_display_height else 1.0


def print_score(result: RetroScore) -> None:
    print("Instant Retro-score:", result.instant)
    print("Max Retro-score:", result.max_score)
    if result.partial:
        print(f"  (scored {result.tracked.scored}/{result.tracked.frames} following frames)")
    print()


class Player:
    """
    Playback window with pause, seek and drag-to-score.

    Two handles on the same file: playback reads sequentially, the
    session seeks ahead for tracking without disturbing playback.
    """

    def __init__(
        self,
        cfg: Config,
        playback: Optional[VideoSource] = None,
        lookahead: Optional[VideoSource] = None,
    ) -> None:
        self.cfg = cfg
        if playback is None:
            playback = VideoSource(cfg.video_path, cfg.fps_assumed)
        self.playback = playback
        if lookahead is None:
            try:
                lookahead = VideoSource(cfg.video_path, cfg.fps_assumed)
            except RuntimeError:
                self.playback.release()
                raise
        self.lookahead = lookahead
        self.session = ScoringSession(self.lookahead, cfg)
        self.selection = Selection()
        self.paused = False
        self._frame: Optional[np.ndarray] = None
        self._syncing_trackbar = False

    def close(self) -> None:
        self.playback.release()
        self.lookahead.release()
        cv2.destroyAllWindows()

    def _seek(self, index: float) -> None:
        self.playback.seek(int(index))
        self._frame = None

    def _on_trackbar(self, slider: int) -> None:
        if self._syncing_trackbar:
            return
        self._seek(slider * self.playback.frame_count / 100)

    def _sync_trackbar(self) -> None:
        count = self.playback.frame_count
        slider = int(100 * self.playback.position / count) if count else 0
        self._syncing_trackbar = True
        try:
            cv2.setTrackbarPos(TRACKBAR, WINDOW, slider)
        finally:
            self._syncing_trackbar = False

    def _score_selection(self, scale: float) -> None:
        self.selection.selected = False
        roi_disp = self.selection.roi()
        if roi_disp is None or roi_area(roi_disp) == 0:
            logger.warning("Invalid crop: {}", roi_disp)
            return

        roi_src = scale_roi(roi_disp, 1.0 / scale)
        # playback position is one past the frame on screen
        frame_index = self.playback.position - 1
        logger.info("ROI: {} (source {}) at frame {}", roi_disp, roi_src, frame_index)

        try:
            result = self.session.score_selection(frame_index, roi_src)
        except (RuntimeError, ValueError) as e:
            logger.error("{}", e)
            return

        if result.marked is not None:
            cv2.imshow(TARGET_WINDOW, result.marked)
        print_score(result)

    def _handle_key(self, key: int) -> bool:
        """Returns False when the player should quit."""
        if key == KEY_ESC:
            return False
        if key in (ord("p"), ord("P")):
            self.paused = not self.paused
            self.selection.reset()
        elif key in KEYS_LEFT:
            self._seek(self.playback.position - self.cfg.step_seconds * self.playback.fps)
        elif key in KEYS_RIGHT:
            self._seek(self.playback.position + self.cfg.step_seconds * self.playback.fps)
        return True

    def run(self) -> None:
        cv2.namedWindow(WINDOW, cv2.WINDOW_AUTOSIZE)
        cv2.createTrackbar(TRACKBAR, WINDOW, 0, 100, self._on_trackbar)
        cv2.setMouseCallback(WINDOW, self.selection.on_mouse)

        count = self.playback.frame_count
        while True:
            pos = self.playback.position
            if pos >= count - 1:
                print("Reached the end of video file")
                cv2.waitKey()
                break

            if not self.paused or self._frame is None:
                self._frame = self.playback.read()
                self.selection.reset()
                if self._frame is None:
                    logger.warning("Reached an empty frame at frame {}/{}", pos, count)
                    if self.playback.position <= pos:
                        self.playback.seek(pos + 1)
                    continue

            scale = display_scale_for(self._frame, self.cfg)
            if scale != 1.0:
                display = cv2.resize(self._frame, None, fx=scale, fy=scale)
            else:
                display = self._frame.copy()

            draw_time(display, self.playback.position, self.playback.fps)
            self._sync_trackbar()

            self.selection.enabled = self.paused
            if self.paused:
                self.selection.bounds = (display.shape[1], display.shape[0])
                if self.selection.p1 is not None and self.selection.p2 is not None:
                    draw_selection(display, self.selection.p1, self.selection.p2)
                if self.selection.selected:
                    self._score_selection(scale)

            cv2.imshow(WINDOW, display)

            key = cv2.waitKeyEx(10)
            if key != -1 and not self._handle_key(key):
                break
