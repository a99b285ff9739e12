"""Liveness Session Result Value Object"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_MIN_CONFIDENCE = 90.0


class LivenessStatus(str, Enum):
    """Face Liveness セッションステータス"""

    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class LivenessSessionResult:
    """
    Face Liveness セッション結果（値オブジェクト）

    Rekognition GetFaceLivenessSessionResults の要約。
    """

    session_id: str
    status: LivenessStatus
    confidence: float = 0.0
    reference_image: bytes | None = None
    audit_image_count: int = 0

    def passed(self, min_confidence: float = DEFAULT_MIN_CONFIDENCE) -> bool:
        """生体判定に合格したか"""
        return self.status == LivenessStatus.SUCCEEDED and self.confidence >= min_confidence

    @property
    def has_reference_image(self) -> bool:
        return bool(self.reference_image)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> LivenessSessionResult:
        """Rekognition のレスポンスから生成"""
        reference = response.get("ReferenceImage") or {}
        return cls(
            session_id=response.get("SessionId", ""),
            status=LivenessStatus(response["Status"]),
            confidence=float(response.get("Confidence") or 0.0),
            reference_image=reference.get("Bytes"),
            audit_image_count=len(response.get("AuditImages") or []),
        )
