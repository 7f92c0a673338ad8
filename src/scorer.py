from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from visualize import overlay_edges

DEFAULT_BLUR: Tuple[int, int] = (25, 75)


def to_gray(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    if img.shape[2] == 1:
        return img[:, :, 0]
    # frames come from cv2 decoders, so channel 0 is blue
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def otsu_mask(gray: np.ndarray, blur_kernel: Tuple[int, int] = DEFAULT_BLUR) -> np.ndarray:
    """
    Foreground mask of a grayscale crop.

    The wide blur flattens sign texture so Otsu splits the bright sign
    plateau from its surroundings instead of splitting legend from face.
    """
    blur = cv2.GaussianBlur(gray, blur_kernel, 0)
    _, mask = cv2.threshold(blur, 0, 255, cv2.THRESH_BINARY | cv2.THRESH_OTSU)
    return mask


def _check_region(img: np.ndarray) -> None:
    if img is None or img.size == 0 or img.shape[0] == 0 or img.shape[1] == 0:
        shape = None if img is None else img.shape
        raise ValueError(f"Cannot score a zero-area region (shape={shape})")


def masked_mean(gray: np.ndarray, mask: np.ndarray) -> int:
    # cv2.mean over an empty mask is not meaningful
    if cv2.countNonZero(mask) == 0:
        return 0
    return int(cv2.mean(gray, mask=mask)[0])


def score_region_with_overlay(
    img: np.ndarray,
    blur_kernel: Tuple[int, int] = DEFAULT_BLUR,
) -> Tuple[int, np.ndarray]:
    """Score plus a copy of the crop with the mask outline drawn for the operator."""
    _check_region(img)
    gray = to_gray(img)
    mask = otsu_mask(gray, blur_kernel)
    return masked_mean(gray, mask), overlay_edges(img, mask)


def score_region(img: np.ndarray, blur_kernel: Tuple[int, int] = DEFAULT_BLUR) -> int:
    """
    Retro-score of a cropped region: mean grayscale intensity under the
    Otsu foreground mask, in 0..255.

    Raises ValueError for an empty crop.
    """
    _check_region(img)
    gray = to_gray(img)
    return masked_mean(gray, otsu_mask(gray, blur_kernel))
