"""Rekognition Gateway Implementation"""
from __future__ import annotations

from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from face_matcher.application.ports.gateways import (
    FaceDetection,
    IFaceComparisonGateway,
    ILivenessGateway,
)
from face_matcher.domain.verification import LivenessSessionResult

logger = structlog.get_logger()


class RekognitionError(Exception):
    """Rekognition 呼び出しエラー"""

    status_code = 500
    default_message = "Face comparison service error"

    def __init__(self, message: str | None = None, code: str | None = None):
        super().__init__(message or self.default_message)
        self.code = code


class InvalidImageFormatError(RekognitionError):
    """画像形式が不正"""

    status_code = 400
    default_message = "Invalid image format. Please use JPEG or PNG."


class ImageTooLargeError(RekognitionError):
    """画像サイズ超過"""

    status_code = 400
    default_message = "Image is too large. Maximum size is 5MB."


class InvalidS3ObjectError(RekognitionError):
    """S3 オブジェクトが不正"""

    status_code = 400
    default_message = "Invalid S3 object."


class LivenessSessionError(Exception):
    """Face Liveness セッションエラー"""

    pass


_ERROR_CODE_MAP: dict[str, type[RekognitionError]] = {
    "InvalidImageFormatException": InvalidImageFormatError,
    "ImageTooLargeException": ImageTooLargeError,
    "InvalidS3ObjectException": InvalidS3ObjectError,
}


def translate_client_error(error: ClientError) -> RekognitionError:
    """botocore の ClientError をドメインのエラーに変換"""
    code = error.response.get("Error", {}).get("Code", "")
    error_class = _ERROR_CODE_MAP.get(code)
    if error_class is not None:
        return error_class(code=code)
    return RekognitionError(error.response.get("Error", {}).get("Message") or str(error), code=code)


def build_client_config(
    max_attempts: int = 3,
    connect_timeout: float = 5.0,
    read_timeout: float = 30.0,
) -> Config:
    return Config(
        retries={"max_attempts": max_attempts, "mode": "standard"},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )


class RekognitionGateway(IFaceComparisonGateway, ILivenessGateway):
    """
    Rekognition Gateway

    Amazon Rekognition を使用した顔照合・顔検出・Face Liveness サービス。
    """

    def __init__(
        self,
        region: str = "us-east-1",
        config: Config | None = None,
        client: Any = None,
    ):
        self.region = region
        self._client = client or boto3.client(
            "rekognition",
            region_name=region,
            config=config or build_client_config(),
        )

    async def compare_faces(
        self,
        source_image: bytes,
        target_image: bytes,
        similarity_threshold: float = 50.0,
    ) -> float | None:
        """
        2 枚の画像の顔を照合

        Args:
            source_image: 参照画像（Aadhaar 写真）
            target_image: 照合対象（撮影画像）
            similarity_threshold: CompareFaces の SimilarityThreshold

        Returns:
            float | None: 最上位一致の類似度。一致なしは None
        """
        log = logger.bind(
            source_size=len(source_image),
            target_size=len(target_image),
            similarity_threshold=similarity_threshold,
        )
        log.info("compare_faces_started")

        try:
            response = self._client.compare_faces(
                SourceImage={"Bytes": source_image},
                TargetImage={"Bytes": target_image},
                SimilarityThreshold=similarity_threshold,
            )
        except ClientError as e:
            log.error("compare_faces_failed", error=str(e))
            raise translate_client_error(e) from e
        except BotoCoreError as e:
            log.error("compare_faces_failed", error=str(e))
            raise RekognitionError(str(e)) from e

        matches = response.get("FaceMatches") or []
        if not matches:
            log.info("compare_faces_no_match")
            return None

        similarity = float(matches[0]["Similarity"])
        log.info("compare_faces_completed", similarity=similarity)
        return similarity

    async def detect_faces(self, image: bytes) -> FaceDetection:
        """
        画像内の顔を検出

        Args:
            image: 画像データ

        Returns:
            FaceDetection: 顔の数と先頭の顔の信頼度・開眼状態
        """
        log = logger.bind(size=len(image))
        log.info("detect_faces_started")

        try:
            response = self._client.detect_faces(
                Image={"Bytes": image},
                Attributes=["ALL"],
            )
        except ClientError as e:
            log.error("detect_faces_failed", error=str(e))
            raise translate_client_error(e) from e
        except BotoCoreError as e:
            log.error("detect_faces_failed", error=str(e))
            raise RekognitionError(str(e)) from e

        faces = response.get("FaceDetails") or []
        log.info("detect_faces_completed", face_count=len(faces))

        if not faces:
            return FaceDetection(face_count=0)

        first = faces[0]
        return FaceDetection(
            face_count=len(faces),
            confidence=float(first.get("Confidence", 0.0)),
            eyes_open=bool(first.get("EyesOpen", {}).get("Value", False)),
            details=faces,
        )

    async def create_session(self) -> str:
        """Face Liveness セッションを作成"""
        log = logger.bind(region=self.region)
        log.info("liveness_session_create_started")

        try:
            response = self._client.create_face_liveness_session()
        except (ClientError, BotoCoreError) as e:
            log.error("liveness_session_create_failed", error=str(e))
            raise LivenessSessionError("Failed to create liveness session") from e

        session_id = response.get("SessionId")
        if not session_id:
            log.error("liveness_session_create_failed", error="missing SessionId")
            raise LivenessSessionError("Failed to create liveness session")

        log.info("liveness_session_created", session_id=session_id)
        return session_id

    async def get_session_results(
        self, session_id: str
    ) -> tuple[dict[str, Any], LivenessSessionResult]:
        """
        Face Liveness セッション結果を取得

        Args:
            session_id: セッション ID

        Returns:
            生レスポンス（ResponseMetadata を除く）と要約
        """
        log = logger.bind(session_id=session_id)
        log.info("liveness_result_started")

        try:
            response = self._client.get_face_liveness_session_results(SessionId=session_id)
        except (ClientError, BotoCoreError) as e:
            log.error("liveness_result_failed", error=str(e))
            raise LivenessSessionError("Failed to fetch liveness result") from e

        raw = {k: v for k, v in response.items() if k != "ResponseMetadata"}
        result = LivenessSessionResult.from_response(raw)

        log.info(
            "liveness_result_completed",
            status=result.status.value,
            confidence=result.confidence,
        )
        return raw, result
