"""Get Candidate Details Use Case"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from face_matcher.application.ports.gateways import ICandidateGateway
from face_matcher.domain.verification import PpoNumber

logger = structlog.get_logger()


@dataclass
class GetCandidateDetailsInput:
    """受給者情報取得入力DTO"""

    ppo_number: str | None


@dataclass
class GetCandidateDetailsOutput:
    """受給者情報取得出力DTO"""

    aadhaar_photo_url: str
    data: dict[str, Any] = field(default_factory=dict)
    message: str | None = None


class GetCandidateDetailsUseCase:
    """
    受給者情報取得 ユースケース

    1. PPO 番号を検証
    2. Aadhaar 照会サービスから受給者情報を取得
    """

    def __init__(self, candidate_gateway: ICandidateGateway):
        self._candidate_gateway = candidate_gateway

    async def execute(self, input_data: GetCandidateDetailsInput) -> GetCandidateDetailsOutput:
        """ユースケースを実行"""
        ppo_number = PpoNumber(input_data.ppo_number)
        logger.info("get_candidate_details_started", ppo_number=str(ppo_number))

        details = await self._candidate_gateway.get_candidate_details(ppo_number)

        return GetCandidateDetailsOutput(
            aadhaar_photo_url=details.normalized_photo_url,
            data=details.data,
            message=details.message,
        )
