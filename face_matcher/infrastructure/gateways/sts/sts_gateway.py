"""STS Gateway Implementation"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from face_matcher.application.ports.gateways import ICredentialsGateway, TemporaryCredentials

logger = structlog.get_logger()


class CredentialsIssueError(Exception):
    """一時認証情報の発行エラー"""

    pass


def to_iso_timestamp(value: datetime) -> str:
    """ミリ秒精度・末尾 Z の UTC 表記（ブラウザの Date.toISOString と同じ形式）"""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StsGateway(ICredentialsGateway):
    """
    STS Gateway

    ブラウザの Face Liveness ウィジェットが Rekognition に
    直接接続するための一時認証情報を発行する。
    """

    def __init__(self, region: str = "us-east-1", client: Any = None):
        self.region = region
        self._client = client or boto3.client("sts", region_name=region)

    async def get_session_token(self, duration_seconds: int = 900) -> TemporaryCredentials:
        log = logger.bind(duration_seconds=duration_seconds)
        log.info("session_token_started")

        try:
            response = self._client.get_session_token(DurationSeconds=duration_seconds)
        except (ClientError, BotoCoreError) as e:
            log.error("session_token_failed", error=str(e))
            raise CredentialsIssueError("Failed to issue temporary credentials") from e

        credentials = response["Credentials"]
        expiration = credentials["Expiration"]
        if isinstance(expiration, datetime):
            expiration = to_iso_timestamp(expiration)

        log.info("session_token_issued", expiration=expiration)
        return TemporaryCredentials(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials["SessionToken"],
            expiration=expiration,
        )
