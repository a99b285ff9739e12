"""Check Frame Liveness Use Case"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from PIL import Image

from face_matcher.application.ports.gateways import IFaceComparisonGateway
from face_matcher.application.use_cases.verification.compare_faces import (
    InvalidUploadError,
    MissingInputError,
)
from face_matcher.domain.liveness import frame_luminance

logger = structlog.get_logger()


@dataclass
class CheckFrameLivenessOutput:
    """単一フレーム生体確認出力DTO"""

    is_live: bool
    face_count: int
    confidence: float
    eyes_open: bool
    luminance: float

    def to_response(self) -> dict[str, Any]:
        return {
            "isLive": self.is_live,
            "faceCount": self.face_count,
            "confidence": round(self.confidence, 2),
            "eyesOpen": self.eyes_open,
            "luminance": self.luminance,
        }


class CheckFrameLivenessUseCase:
    """
    単一フレーム生体確認 ユースケース

    ブラウザが顔を中央に捉えた時点のフレームを受け取り、
    顔がちょうど 1 つ、十分な信頼度で、目が開いているかを確認する。
    """

    def __init__(
        self,
        face_comparison_gateway: IFaceComparisonGateway,
        min_confidence: float = 90.0,
        max_upload_bytes: int = 10 * 1024 * 1024,
    ):
        self._face_comparison_gateway = face_comparison_gateway
        self.min_confidence = min_confidence
        self.max_upload_bytes = max_upload_bytes

    async def execute(self, image: bytes | None) -> CheckFrameLivenessOutput:
        if not image:
            raise MissingInputError("Frame image (image) is required")
        if len(image) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise InvalidUploadError(f"File size too large. Maximum is {limit_mb}MB.")

        # 途中で切れた画像は OSError（UnidentifiedImageError もそのサブクラス）
        try:
            luminance = frame_luminance(image)
        except (OSError, Image.DecompressionBombError) as e:
            raise InvalidUploadError("Invalid image format. Please use JPEG or PNG.") from e

        detection = await self._face_comparison_gateway.detect_faces(image)
        is_live = (
            detection.face_count == 1
            and detection.confidence >= self.min_confidence
            and detection.eyes_open
        )

        logger.info(
            "frame_liveness_checked",
            face_count=detection.face_count,
            confidence=detection.confidence,
            eyes_open=detection.eyes_open,
            is_live=is_live,
        )
        return CheckFrameLivenessOutput(
            is_live=is_live,
            face_count=detection.face_count,
            confidence=detection.confidence,
            eyes_open=detection.eyes_open,
            luminance=luminance,
        )
