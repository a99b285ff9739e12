"""Aadhaar Gateway Unit Tests"""
import httpx
import pytest

from face_matcher.domain.verification import PpoNumber
from face_matcher.infrastructure.gateways.aadhaar import (
    AadhaarGateway,
    AadhaarLookupRejectedError,
    AadhaarPhotoMissingError,
    AadhaarServiceUnavailableError,
    CandidateNotFoundError,
    ReferenceImageDownloadError,
)

BASE_URL = "https://aadhaar.example.in"
PHOTO_URL = "https://aadhaar.example.in/AadharDoc//42.jpg"


def _gateway(fetcher_factory, handler) -> AadhaarGateway:
    return AadhaarGateway(
        fetcher_factory(handler),
        base_url=BASE_URL,
        lookup_retries=1,
        photo_retries=1,
    )


class TestAadhaarLookup:
    """受給者情報照会のテスト"""

    def test_url_variations(self, fetcher_factory):
        """正常: https を先に、http を後に試す"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(200))

        urls = gateway.url_variations(PpoNumber("PPO/77"))

        assert urls == [
            "https://aadhaar.example.in/api/aadhar/getCandidateDetails?ppoNumber=PPO%2F77",
            "http://aadhaar.example.in/api/aadhar/getCandidateDetails?ppoNumber=PPO%2F77",
        ]

    @pytest.mark.asyncio
    async def test_success(self, fetcher_factory):
        """正常: 写真 URL を含む受給者情報を返す"""
        # Arrange
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "message": "Candidate found",
                    "data": {"aadhaarPhotoUrl": PHOTO_URL, "name": "Asha"},
                },
            )

        gateway = _gateway(fetcher_factory, handler)

        # Act
        details = await gateway.get_candidate_details(PpoNumber("77"))

        # Assert
        assert details.aadhaar_photo_url == PHOTO_URL
        assert details.normalized_photo_url == "https://aadhaar.example.in/AadharDoc/42.jpg"
        assert details.message == "Candidate found"
        assert seen[0].url.params["ppoNumber"] == "77"
        assert seen[0].headers["accept"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_not_found(self, fetcher_factory):
        """異常: 404 は受給者なし"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(404))

        with pytest.raises(CandidateNotFoundError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("missing"))

        assert str(exc_info.value) == "PPO Number not found in the system"

    @pytest.mark.asyncio
    async def test_rejected(self, fetcher_factory):
        """異常: success=false はサービスのメッセージで失敗"""
        gateway = _gateway(
            fetcher_factory,
            lambda request: httpx.Response(200, json={"success": False, "message": "Invalid PPO"}),
        )

        with pytest.raises(AadhaarLookupRejectedError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert str(exc_info.value) == "Invalid PPO"

    @pytest.mark.asyncio
    async def test_rejected_without_message(self, fetcher_factory):
        """異常: メッセージがなければ既定のメッセージ"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(200, json={"success": False}))

        with pytest.raises(AadhaarLookupRejectedError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert str(exc_info.value) == "Failed to fetch Aadhaar details"

    @pytest.mark.asyncio
    async def test_photo_missing(self, fetcher_factory):
        """異常: 写真 URL がない"""
        gateway = _gateway(
            fetcher_factory,
            lambda request: httpx.Response(200, json={"success": True, "data": {"name": "Asha"}}),
        )

        with pytest.raises(AadhaarPhotoMissingError):
            await gateway.get_candidate_details(PpoNumber("77"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1, 2], "ok", 42])
    async def test_non_object_body_is_rejected(self, fetcher_factory, body):
        """異常: オブジェクト以外の JSON 本文は照会失敗"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(200, json=body))

        with pytest.raises(AadhaarLookupRejectedError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert str(exc_info.value) == "Failed to fetch Aadhaar details"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        ["https://aadhaar.example.in/42.jpg", [PHOTO_URL], {"aadhaarPhotoUrl": 42}, None],
    )
    async def test_non_object_data_has_no_photo(self, fetcher_factory, data):
        """異常: data がオブジェクトでない、または写真 URL が文字列でない"""
        gateway = _gateway(
            fetcher_factory,
            lambda request: httpx.Response(200, json={"success": True, "data": data}),
        )

        with pytest.raises(AadhaarPhotoMissingError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert str(exc_info.value) == "No Aadhaar photo found for this PPO Number"

    @pytest.mark.asyncio
    async def test_forbidden_everywhere(self, fetcher_factory):
        """異常: すべての URL で 403 なら接続不可"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(403))

        with pytest.raises(AadhaarServiceUnavailableError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert str(exc_info.value) == "Unable to connect to Aadhaar service. Please try again."
        assert exc_info.value.details == "HTTP 403"

    @pytest.mark.asyncio
    async def test_html_response(self, fetcher_factory):
        """異常: JSON 以外のレスポンスは次の URL へ"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.scheme)
            return httpx.Response(200, html="<html>maintenance</html>")

        gateway = _gateway(fetcher_factory, handler)

        with pytest.raises(AadhaarServiceUnavailableError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert exc_info.value.details == "Invalid response format"
        assert calls == ["https", "http"]

    @pytest.mark.asyncio
    async def test_connection_failure(self, fetcher_factory):
        """異常: 接続できなければ最後のエラーを詳細に含める"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        gateway = _gateway(fetcher_factory, handler)

        with pytest.raises(AadhaarServiceUnavailableError) as exc_info:
            await gateway.get_candidate_details(PpoNumber("77"))

        assert exc_info.value.details == "Connection refused"

    @pytest.mark.asyncio
    async def test_falls_back_to_http(self, fetcher_factory):
        """正常: https が使えなくても http で取得"""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.scheme == "https":
                raise httpx.ConnectError("handshake failure", request=request)
            return httpx.Response(200, json={"success": True, "data": {"aadhaarPhotoUrl": PHOTO_URL}})

        gateway = _gateway(fetcher_factory, handler)

        details = await gateway.get_candidate_details(PpoNumber("77"))

        assert details.aadhaar_photo_url == PHOTO_URL


class TestAadhaarPhotoDownload:
    """Aadhaar 写真ダウンロードのテスト"""

    @pytest.mark.asyncio
    async def test_download(self, fetcher_factory, jpeg_bytes):
        """正常: 正規化した URL から画像を取得"""
        # Arrange
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=jpeg_bytes, headers={"content-type": "image/jpeg"})

        gateway = _gateway(fetcher_factory, handler)

        # Act
        image = await gateway.download_photo(PHOTO_URL)

        # Assert
        assert image == jpeg_bytes
        assert seen[0].url.path == "/AadharDoc/42.jpg"
        assert seen[0].headers["accept"].startswith("image/jpeg")

    @pytest.mark.asyncio
    async def test_download_not_found(self, fetcher_factory):
        """異常: 画像が存在しない"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(404))

        with pytest.raises(ReferenceImageDownloadError) as exc_info:
            await gateway.download_photo(PHOTO_URL)

        assert str(exc_info.value) == "Failed to download Aadhaar image"

    @pytest.mark.asyncio
    async def test_download_connection_failure(self, fetcher_factory):
        """異常: 接続できない"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        gateway = _gateway(fetcher_factory, handler)

        with pytest.raises(ReferenceImageDownloadError):
            await gateway.download_photo(PHOTO_URL)


class TestAadhaarProbe:
    """疎通確認のテスト"""

    @pytest.mark.asyncio
    async def test_reachable(self, fetcher_factory):
        """正常: 404 でも応答があれば到達可能"""
        gateway = _gateway(fetcher_factory, lambda request: httpx.Response(404))

        result = await gateway.probe()

        assert result.reachable is True
        assert result.status_code == 404
        assert result.reason == "Not Found"

    @pytest.mark.asyncio
    async def test_unreachable(self, fetcher_factory):
        """異常: 接続できない"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        gateway = _gateway(fetcher_factory, handler)

        result = await gateway.probe()

        assert result.reachable is False
        assert result.error == "Connection refused"
