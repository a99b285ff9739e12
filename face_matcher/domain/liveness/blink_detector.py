"""Blink Detector"""
from __future__ import annotations

EAR_CLOSE_THRESHOLD = 0.2
EAR_OPEN_THRESHOLD = 0.27


class BlinkDetector:
    """
    ヒステリシス付きまばたき検出

    EAR が close 閾値を下回った後に open 閾値を上回ったとき、
    1 回のまばたきとして検出する。
    """

    def __init__(
        self,
        close_threshold: float = EAR_CLOSE_THRESHOLD,
        open_threshold: float = EAR_OPEN_THRESHOLD,
    ):
        if close_threshold >= open_threshold:
            raise ValueError("close_threshold must be below open_threshold")
        self.close_threshold = close_threshold
        self.open_threshold = open_threshold
        self._closing = False
        self.blink_count = 0

    @property
    def eyes_closed(self) -> bool:
        return self._closing

    def update(self, ear: float) -> bool:
        """
        EAR を 1 フレーム分入力

        Returns:
            bool: このフレームでまばたきが完了したか
        """
        if not self._closing and ear < self.close_threshold:
            self._closing = True
            return False

        if self._closing and ear > self.open_threshold:
            self._closing = False
            self.blink_count += 1
            return True

        return False

    def reset(self) -> None:
        self._closing = False
