"""Create Liveness Session Use Case"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from face_matcher.application.ports.gateways import (
    ICredentialsGateway,
    ILivenessGateway,
    TemporaryCredentials,
)
from face_matcher.application.single_flight import SingleFlight

logger = structlog.get_logger()


@dataclass
class CreateLivenessSessionInput:
    """セッション作成入力DTO"""

    client_key: str | None = None


@dataclass
class CreateLivenessSessionOutput:
    """セッション作成出力DTO"""

    session_id: str
    region: str
    credentials: TemporaryCredentials

    def to_response(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "region": self.region,
            "identity": self.credentials.to_identity(),
        }


class CreateLivenessSessionUseCase:
    """
    Face Liveness セッション作成 ユースケース

    1. Rekognition で Face Liveness セッションを作成
    2. ブラウザ用の一時認証情報を発行

    クライアントキーが指定された場合、同じクライアントからの
    並行リクエストは 1 つのセッションに集約する。
    """

    def __init__(
        self,
        liveness_gateway: ILivenessGateway,
        credentials_gateway: ICredentialsGateway,
        region: str,
        single_flight: SingleFlight[CreateLivenessSessionOutput] | None = None,
        token_duration_seconds: int = 900,
    ):
        self._liveness_gateway = liveness_gateway
        self._credentials_gateway = credentials_gateway
        self.region = region
        self._single_flight = single_flight or SingleFlight("create_liveness_session")
        self.token_duration_seconds = token_duration_seconds

    async def execute(
        self, input_data: CreateLivenessSessionInput
    ) -> CreateLivenessSessionOutput:
        """ユースケースを実行"""
        if not input_data.client_key:
            return await self._create()
        return await self._single_flight.run(input_data.client_key, self._create)

    async def _create(self) -> CreateLivenessSessionOutput:
        session_id = await self._liveness_gateway.create_session()
        credentials = await self._credentials_gateway.get_session_token(
            duration_seconds=self.token_duration_seconds
        )
        logger.info("liveness_session_ready", session_id=session_id)
        return CreateLivenessSessionOutput(
            session_id=session_id,
            region=self.region,
            credentials=credentials,
        )
