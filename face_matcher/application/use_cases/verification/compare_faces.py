"""Compare Faces Use Case"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass

import structlog

from face_matcher.application.ports.gateways import ICandidateGateway, IFaceComparisonGateway
from face_matcher.application.single_flight import SingleFlight
from face_matcher.domain.verification import FaceMatchResult

logger = structlog.get_logger()

DEFAULT_ALLOWED_CONTENT_TYPES = frozenset(["image/png", "image/jpg", "image/jpeg"])


class MissingInputError(Exception):
    """必須入力の欠落エラー"""

    pass


class InvalidUploadError(Exception):
    """アップロード画像の不正エラー"""

    pass


@dataclass
class CompareFacesInput:
    """顔照合入力DTO"""

    aadhaar_url: str | None
    live_image: bytes | None
    live_content_type: str | None = None


class CompareFacesUseCase:
    """
    顔照合 ユースケース

    1. 入力を検証（参照 URL と撮影画像）
    2. Aadhaar 写真をダウンロード
    3. Rekognition CompareFaces で照合
    4. 類似度から本人判定

    同じ参照 URL と同じ撮影画像による並行リクエストは 1 回の照合に集約する。
    """

    def __init__(
        self,
        candidate_gateway: ICandidateGateway,
        face_comparison_gateway: IFaceComparisonGateway,
        single_flight: SingleFlight[FaceMatchResult] | None = None,
        similarity_threshold: float = 50.0,
        match_threshold: float = 80.0,
        max_upload_bytes: int = 10 * 1024 * 1024,
        allowed_content_types: frozenset[str] | None = None,
    ):
        self._candidate_gateway = candidate_gateway
        self._face_comparison_gateway = face_comparison_gateway
        self._single_flight = single_flight or SingleFlight("compare_faces")
        self.similarity_threshold = similarity_threshold
        self.match_threshold = match_threshold
        self.max_upload_bytes = max_upload_bytes
        self.allowed_content_types = allowed_content_types or DEFAULT_ALLOWED_CONTENT_TYPES

    def _validate(self, input_data: CompareFacesInput) -> tuple[str, bytes]:
        aadhaar_url = (input_data.aadhaar_url or "").strip()
        if not aadhaar_url:
            raise MissingInputError("aadhaarUrl is required")

        # 許可外の形式は受け取らなかったものとして扱う
        content_type = input_data.live_content_type
        if not input_data.live_image or (
            content_type is not None and content_type not in self.allowed_content_types
        ):
            raise MissingInputError("Live image (image2) is required")

        if len(input_data.live_image) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise InvalidUploadError(f"File size too large. Maximum is {limit_mb}MB.")

        return aadhaar_url, input_data.live_image

    async def execute(self, input_data: CompareFacesInput) -> FaceMatchResult:
        """ユースケースを実行"""
        aadhaar_url, live_image = self._validate(input_data)
        key = (aadhaar_url, hashlib.sha256(live_image).hexdigest())

        return await self._single_flight.run(
            key, lambda: self._compare(aadhaar_url, live_image)
        )

    async def _compare(self, aadhaar_url: str, live_image: bytes) -> FaceMatchResult:
        log = logger.bind(aadhaar_url=aadhaar_url)
        log.info("compare_faces_use_case_started")

        reference_image = await self._candidate_gateway.download_photo(aadhaar_url)
        log.info(
            "compare_images_ready",
            reference_size=len(reference_image),
            live_size=len(live_image),
        )

        similarity = await self._face_comparison_gateway.compare_faces(
            source_image=reference_image,
            target_image=live_image,
            similarity_threshold=self.similarity_threshold,
        )

        if similarity is None:
            log.info("compare_faces_use_case_no_match")
            return FaceMatchResult.no_match()

        result = FaceMatchResult.from_similarity(similarity, self.match_threshold)
        log.info(
            "compare_faces_use_case_completed",
            similarity=result.similarity,
            is_match=result.is_match,
        )
        return result
