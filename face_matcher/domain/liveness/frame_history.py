"""Frame History"""
from __future__ import annotations

import io
from collections import deque
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
from PIL import Image

DEFAULT_MAX_HISTORY = 15
MIN_SAMPLES = 5
MOTION_THRESHOLD_PX = 3.0
TEXTURE_THRESHOLD = 0.01
LUMINANCE_SAMPLE_SIZE = (100, 100)
CENTER_BOX_RATIO = 0.4

# Rec.601 luma
_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


@dataclass(frozen=True)
class FaceSample:
    """1 フレーム分の顔サンプル"""

    center_x: float
    center_y: float
    luminance: float
    ear: float | None = None


def frame_luminance(image_data: bytes) -> float:
    """
    フレームの平均輝度を [0, 1] で返す

    100x100 に縮小した RGB 画像の Rec.601 輝度平均。
    """
    with Image.open(io.BytesIO(image_data)) as image:
        rgb = image.convert("RGB").resize(LUMINANCE_SAMPLE_SIZE)
        pixels = np.asarray(rgb, dtype=float)
    return float((pixels @ _LUMA_WEIGHTS).mean() / 255.0)


def face_center(
    landmarks: Sequence[Sequence[float]], width: int, height: int
) -> tuple[float, float]:
    """正規化ランドマークのバウンディングボックス中心（ピクセル）"""
    if not landmarks:
        raise ValueError("No landmarks")

    pts = np.asarray(landmarks, dtype=float)[:, :2]
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    return ((min_x + max_x) / 2 * width, (min_y + max_y) / 2 * height)


def is_centered(center_x: float, center_y: float, width: int, height: int) -> bool:
    """顔の中心がフレーム中央の 40% ボックス内にあるか"""
    box_w = width * CENTER_BOX_RATIO
    box_h = height * CENTER_BOX_RATIO
    left = (width - box_w) / 2
    top = (height - box_h) / 2
    return left < center_x < left + box_w and top < center_y < top + box_h


class FrameHistory:
    """
    直近フレームの履歴

    顔中心の移動量と輝度の揺らぎから、写真や静止画面による
    なりすましを弾くための簡易ヒューリスティックを提供する。
    """

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY):
        if max_size < 2:
            raise ValueError("History must hold at least 2 samples")
        self._samples: deque[FaceSample] = deque(maxlen=max_size)

    def add(self, sample: FaceSample) -> None:
        self._samples.append(sample)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[FaceSample]:
        return iter(self._samples)

    def _pairs(self) -> Iterator[tuple[FaceSample, FaceSample]]:
        samples = list(self._samples)
        return zip(samples, samples[1:])

    def average_movement(self) -> float:
        """連続フレーム間の顔中心の平均移動量（ピクセル）"""
        if len(self._samples) < 2:
            return 0.0
        distances = [
            float(np.hypot(curr.center_x - prev.center_x, curr.center_y - prev.center_y))
            for prev, curr in self._pairs()
        ]
        return sum(distances) / len(distances)

    def max_luminance_variation(self) -> float:
        """連続フレーム間の輝度差の最大値"""
        return max(
            (abs(curr.luminance - prev.luminance) for prev, curr in self._pairs()),
            default=0.0,
        )

    def motion_detected(self) -> bool:
        if len(self._samples) < MIN_SAMPLES:
            return False
        return self.average_movement() > MOTION_THRESHOLD_PX

    def texture_change_detected(self) -> bool:
        if len(self._samples) < MIN_SAMPLES:
            return False
        return self.max_luminance_variation() > TEXTURE_THRESHOLD
