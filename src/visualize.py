import cv2
import numpy as np

from roi import Point

GREEN = (0, 255, 0)
YELLOW = (0, 255, 255)
WHITE = (255, 255, 255)


def draw_selection(frame: np.ndarray, p1: Point, p2: Point) -> None:
    cv2.rectangle(frame, p1, p2, GREEN, 1)


def format_time(frame_idx: int, fps: float) -> str:
    secs = int(frame_idx / fps) if fps else 0
    return f"{secs // 60}:{secs % 60:02d}"


def draw_time(frame: np.ndarray, frame_idx: int, fps: float) -> None:
    text = format_time(frame_idx, fps)
    (_, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
    cv2.putText(frame, text, (0, th), cv2.FONT_HERSHEY_SIMPLEX, 0.5, WHITE, 1, cv2.LINE_8)


def overlay_edges(img: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Copy of img with the mask boundary painted yellow."""
    marked = img.copy()
    if marked.ndim == 2:
        marked = cv2.cvtColor(marked, cv2.COLOR_GRAY2BGR)
    edges = cv2.Canny(mask, 0.25, 0.75)
    marked[edges != 0] = YELLOW
    return marked
