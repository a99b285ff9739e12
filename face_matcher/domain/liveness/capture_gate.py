"""Capture Gate"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .blink_detector import BlinkDetector
from .eye_aspect_ratio import average_ear
from .frame_history import FaceSample, FrameHistory, face_center, is_centered


class GateAction(str, Enum):
    """フレームごとの判定結果"""

    NO_FACE = "no_face"
    CENTER_FACE = "center_face"
    START_VERIFICATION = "start_verification"
    VERIFYING = "verifying"
    AWAITING_BLINK = "awaiting_blink"
    BLINK_IGNORED = "blink_ignored"
    CAPTURE = "capture"
    CAPTURED = "captured"


@dataclass(frozen=True)
class FrameObservation:
    """1 フレーム分の観測値"""

    width: int
    height: int
    luminance: float
    landmarks: Sequence[Sequence[float]] | None = None

    @property
    def has_face(self) -> bool:
        return bool(self.landmarks)


@dataclass
class CaptureGate:
    """
    撮影ゲート（状態機械）

    顔が中央に収まるとサーバ側の生体確認を 1 度だけ開始し、
    確認済みの状態でまばたきが完了したフレームで撮影を確定する。

    フラグ:
    - verifying: サーバ確認が進行中（二重起動しない）
    - verified: サーバ確認とテクスチャ変化の両方を満たした
    - captured: 撮影済み（以降のフレームは無視）
    """

    history: FrameHistory = field(default_factory=FrameHistory)
    blink_detector: BlinkDetector = field(default_factory=BlinkDetector)
    verifying: bool = False
    verified: bool = False
    captured: bool = False

    def observe(self, frame: FrameObservation) -> GateAction:
        """フレームを 1 枚処理し、次に取るべきアクションを返す"""
        if self.captured:
            return GateAction.CAPTURED

        if not frame.has_face:
            return GateAction.NO_FACE

        center_x, center_y = face_center(frame.landmarks, frame.width, frame.height)
        ear = average_ear(frame.landmarks)
        self.history.add(
            FaceSample(
                center_x=center_x,
                center_y=center_y,
                luminance=frame.luminance,
                ear=ear,
            )
        )

        if not is_centered(center_x, center_y, frame.width, frame.height):
            self.verified = False
            return GateAction.CENTER_FACE

        if not self.verified and not self.verifying:
            self.verifying = True
            return GateAction.START_VERIFICATION

        if self.blink_detector.update(ear):
            if not self.verified:
                return GateAction.BLINK_IGNORED
            self.captured = True
            return GateAction.CAPTURE

        return GateAction.VERIFYING if self.verifying else GateAction.AWAITING_BLINK

    def resolve_verification(self, server_live: bool) -> bool:
        """
        サーバ側の生体確認結果を反映

        サーバが live と判定し、かつ輝度の揺らぎが検出された場合のみ確認済みとする。
        """
        self.verifying = False
        if server_live and self.history.texture_change_detected():
            self.verified = True
            return True

        self.verified = False
        self.blink_detector.reset()
        return False
