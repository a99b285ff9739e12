"""Get Liveness Result Use Case"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

import structlog

from face_matcher.application.ports.gateways import ILivenessGateway
from face_matcher.domain.verification import LivenessSessionResult

logger = structlog.get_logger()


def _json_safe(value: Any) -> Any:
    """bytes を base64 文字列に置き換える"""
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


@dataclass
class GetLivenessResultOutput:
    """セッション結果出力DTO"""

    raw: dict[str, Any]
    result: LivenessSessionResult
    passed: bool

    def to_response(self) -> dict[str, Any]:
        return {**_json_safe(self.raw), "passed": self.passed}


class GetLivenessResultUseCase:
    """Face Liveness セッション結果取得 ユースケース"""

    def __init__(self, liveness_gateway: ILivenessGateway, min_confidence: float = 90.0):
        self._liveness_gateway = liveness_gateway
        self.min_confidence = min_confidence

    async def execute(self, session_id: str) -> GetLivenessResultOutput:
        raw, result = await self._liveness_gateway.get_session_results(session_id)
        passed = result.passed(self.min_confidence)
        logger.info(
            "liveness_verdict",
            session_id=session_id,
            status=result.status.value,
            confidence=result.confidence,
            passed=passed,
        )
        return GetLivenessResultOutput(raw=raw, result=result, passed=passed)
