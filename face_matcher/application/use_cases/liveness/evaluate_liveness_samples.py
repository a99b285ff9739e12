"""Evaluate Liveness Samples Use Case"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from face_matcher.domain.liveness import (
    CaptureGate,
    FrameHistory,
    FrameObservation,
    GateAction,
)

logger = structlog.get_logger()


class InvalidSampleError(ValueError):
    """不正なサンプルエラー"""

    pass


@dataclass
class LivenessSampleInput:
    """1 フレーム分のサンプル入力DTO"""

    luminance: float
    landmarks: Sequence[Sequence[float]] | None = None


@dataclass
class EvaluateLivenessSamplesInput:
    """サンプル評価入力DTO"""

    width: int
    height: int
    samples: list[LivenessSampleInput]
    server_live: bool | None = None
    history_size: int = 15


@dataclass
class EvaluateLivenessSamplesOutput:
    """サンプル評価出力DTO"""

    motion_detected: bool
    texture_change_detected: bool
    blink_count: int
    centered: bool
    verified: bool
    captured: bool
    actions: list[GateAction] = field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return {
            "motionDetected": self.motion_detected,
            "textureChangeDetected": self.texture_change_detected,
            "blinkCount": self.blink_count,
            "centered": self.centered,
            "verified": self.verified,
            "captured": self.captured,
            "actions": [a.value for a in self.actions],
        }


class EvaluateLivenessSamplesUseCase:
    """
    ランドマークサンプル評価 ユースケース

    ブラウザの FaceMesh が出力したランドマークと輝度の系列を
    撮影ゲートに順に通し、動き・輝度変化・まばたきを判定する。

    server_live が与えられた場合、確認開始のフレームでその結果を反映する。
    """

    async def execute(
        self, input_data: EvaluateLivenessSamplesInput
    ) -> EvaluateLivenessSamplesOutput:
        if input_data.width <= 0 or input_data.height <= 0:
            raise InvalidSampleError("Frame width and height must be positive")

        gate = CaptureGate(history=FrameHistory(max_size=input_data.history_size))
        actions: list[GateAction] = []

        for index, sample in enumerate(input_data.samples):
            try:
                action = gate.observe(
                    FrameObservation(
                        width=input_data.width,
                        height=input_data.height,
                        luminance=sample.luminance,
                        landmarks=sample.landmarks,
                    )
                )
            except ValueError as e:
                raise InvalidSampleError(f"Sample {index}: {e}") from e
            actions.append(action)

            if action == GateAction.START_VERIFICATION and input_data.server_live is not None:
                gate.resolve_verification(input_data.server_live)

        output = EvaluateLivenessSamplesOutput(
            motion_detected=gate.history.motion_detected(),
            texture_change_detected=gate.history.texture_change_detected(),
            blink_count=gate.blink_detector.blink_count,
            centered=bool(actions) and actions[-1] not in (GateAction.NO_FACE, GateAction.CENTER_FACE),
            verified=gate.verified,
            captured=gate.captured,
            actions=actions,
        )

        logger.info(
            "liveness_samples_evaluated",
            sample_count=len(input_data.samples),
            motion_detected=output.motion_detected,
            texture_change_detected=output.texture_change_detected,
            blink_count=output.blink_count,
            captured=output.captured,
        )
        return output
