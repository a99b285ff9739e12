"""Eye Aspect Ratio"""
from __future__ import annotations

from typing import Sequence

import numpy as np

# MediaPipe FaceMesh のランドマーク番号（p1..p6 の順）
LEFT_EYE_INDICES = (33, 160, 158, 133, 153, 144)
RIGHT_EYE_INDICES = (362, 385, 387, 263, 373, 380)

Point = Sequence[float]


def eye_aspect_ratio(eye_points: Sequence[Point]) -> float:
    """
    Eye Aspect Ratio を計算

        (||p2 - p6|| + ||p3 - p5||) / (2 * ||p1 - p4||)

    Args:
        eye_points: 目の輪郭 6 点（p1..p6 の順）

    Returns:
        float: EAR。目を閉じるほど小さくなる
    """
    if len(eye_points) != 6:
        raise ValueError(f"Eye aspect ratio needs 6 points, got {len(eye_points)}")

    pts = np.asarray(eye_points, dtype=float)[:, :2]
    vertical_1 = np.linalg.norm(pts[1] - pts[5])
    vertical_2 = np.linalg.norm(pts[2] - pts[4])
    horizontal = np.linalg.norm(pts[0] - pts[3])

    if horizontal == 0:
        return 0.0
    return float((vertical_1 + vertical_2) / (2.0 * horizontal))


def average_ear(landmarks: Sequence[Point]) -> float:
    """左右の目の EAR 平均"""
    if len(landmarks) <= max(RIGHT_EYE_INDICES):
        raise ValueError(
            f"Face mesh needs at least {max(RIGHT_EYE_INDICES) + 1} landmarks, got {len(landmarks)}"
        )

    left = eye_aspect_ratio([landmarks[i] for i in LEFT_EYE_INDICES])
    right = eye_aspect_ratio([landmarks[i] for i in RIGHT_EYE_INDICES])
    return (left + right) / 2.0
