from dataclasses import dataclass
from typing import Tuple

import cv2


@dataclass(frozen=True)
class Config:
    video_path: str

    # Large frames are shown downscaled; selections get mapped back by 1/scale
    display_scale: float = 0.5
    max_display_height: int = 810  # 1080 * 0.75

    # Forward tracking
    track_frames: int = 30
    match_method: int = cv2.TM_CCORR_NORMED

    # Gaussian kernel (w, h) before Otsu, both odd
    blur_kernel: Tuple[int, int] = (25, 75)

    # Arrow keys jump this many seconds
    step_seconds: float = 10.0
    fps_assumed: float = 30.0
