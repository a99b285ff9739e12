"""Compare Faces Use Case Unit Tests"""
import asyncio

import pytest

from face_matcher.application.use_cases.verification import (
    CompareFacesInput,
    CompareFacesUseCase,
    InvalidUploadError,
    MissingInputError,
)
from face_matcher.infrastructure.gateways.aadhaar import ReferenceImageDownloadError

AADHAAR_URL = "https://files.example.in/AadharDoc/123.jpg"


class TestCompareFacesUseCase:
    """CompareFacesUseCase のテスト"""

    @pytest.mark.asyncio
    async def test_match(self, candidate_gateway, face_gateway):
        """正常: 類似度 80 超で本人と判定"""
        # Arrange
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        # Act
        result = await use_case.execute(
            CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"live", live_content_type="image/jpeg")
        )

        # Assert
        assert result.match_found is True
        assert result.similarity == 91.23
        assert result.is_match is True
        assert candidate_gateway.downloads == [AADHAAR_URL]
        call = face_gateway.compare_calls[0]
        assert call["source_image"] == b"reference-photo"
        assert call["target_image"] == b"live"
        assert call["similarity_threshold"] == 50.0

    @pytest.mark.asyncio
    async def test_low_similarity_is_not_match(self, candidate_gateway, face_gateway):
        """正常: 類似度 80 以下は本人と判定しない"""
        face_gateway.similarity = 72.5
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        result = await use_case.execute(CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"live"))

        assert result.match_found is True
        assert result.is_match is False

    @pytest.mark.asyncio
    async def test_no_face_match(self, candidate_gateway, face_gateway):
        """正常: 一致がなければ matchFound=false"""
        face_gateway.similarity = None
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        result = await use_case.execute(CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"live"))

        assert result.to_response()["matchFound"] is False
        assert result.similarity == 0.0

    @pytest.mark.asyncio
    async def test_missing_url(self, candidate_gateway, face_gateway):
        """異常: 参照 URL がない"""
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        with pytest.raises(MissingInputError) as exc_info:
            await use_case.execute(CompareFacesInput(aadhaar_url="  ", live_image=b"live"))

        assert str(exc_info.value) == "aadhaarUrl is required"
        assert candidate_gateway.downloads == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "image,content_type",
        [(None, None), (b"", "image/jpeg"), (b"gif", "image/gif")],
    )
    async def test_missing_live_image(self, candidate_gateway, face_gateway, image, content_type):
        """異常: 撮影画像がない、または許可外の形式"""
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        with pytest.raises(MissingInputError) as exc_info:
            await use_case.execute(
                CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=image, live_content_type=content_type)
            )

        assert str(exc_info.value) == "Live image (image2) is required"

    @pytest.mark.asyncio
    async def test_upload_too_large(self, candidate_gateway, face_gateway):
        """異常: 上限を超える画像"""
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway, max_upload_bytes=1024 * 1024)

        with pytest.raises(InvalidUploadError) as exc_info:
            await use_case.execute(
                CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"x" * (1024 * 1024 + 1))
            )

        assert str(exc_info.value) == "File size too large. Maximum is 1MB."

    @pytest.mark.asyncio
    async def test_download_failure_propagates(self, candidate_gateway, face_gateway):
        """異常: 参照画像のダウンロード失敗"""
        candidate_gateway.error = ReferenceImageDownloadError("Failed to download Aadhaar image")
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        with pytest.raises(ReferenceImageDownloadError):
            await use_case.execute(CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"live"))

        assert face_gateway.compare_calls == []

    @pytest.mark.asyncio
    async def test_duplicate_requests_are_collapsed(self, candidate_gateway, face_gateway):
        """正常: 同じ入力の並行リクエストは 1 回の照合に集約"""
        # Arrange
        candidate_gateway.download_delay = 0.01
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)
        input_data = CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"live")

        # Act
        results = await asyncio.gather(use_case.execute(input_data), use_case.execute(input_data))

        # Assert
        assert results[0] == results[1]
        assert len(candidate_gateway.downloads) == 1
        assert len(face_gateway.compare_calls) == 1

    @pytest.mark.asyncio
    async def test_different_images_are_not_collapsed(self, candidate_gateway, face_gateway):
        """正常: 撮影画像が異なれば別々に照合"""
        candidate_gateway.download_delay = 0.01
        use_case = CompareFacesUseCase(candidate_gateway, face_gateway)

        await asyncio.gather(
            use_case.execute(CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"one")),
            use_case.execute(CompareFacesInput(aadhaar_url=AADHAAR_URL, live_image=b"two")),
        )

        assert len(face_gateway.compare_calls) == 2
