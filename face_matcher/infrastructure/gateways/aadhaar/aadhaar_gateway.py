"""Aadhaar Lookup Gateway Implementation"""
from __future__ import annotations

from urllib.parse import urlencode

import httpx
import structlog

from face_matcher.application.ports.gateways import ICandidateGateway, ProbeResult
from face_matcher.domain.verification import CandidateDetails, PpoNumber, normalize_photo_url
from face_matcher.infrastructure.http import FetchFailedError, ResilientFetcher

logger = structlog.get_logger()

JSON_ACCEPT = "application/json, text/plain, */*"
IMAGE_ACCEPT = "image/jpeg,image/png,image/*,*/*"


class CandidateNotFoundError(Exception):
    """PPO 番号が照会サービスに存在しないエラー"""

    pass


class AadhaarPhotoMissingError(Exception):
    """受給者情報に Aadhaar 写真がないエラー"""

    pass


class AadhaarLookupRejectedError(Exception):
    """照会サービスが success=false を返したエラー"""

    pass


class AadhaarServiceUnavailableError(Exception):
    """照会サービスに接続できないエラー"""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.details = details


class ReferenceImageDownloadError(Exception):
    """Aadhaar 写真のダウンロード失敗エラー"""

    pass


class AadhaarGateway(ICandidateGateway):
    """
    Aadhaar Gateway

    年金受給者の Aadhaar 照会サービス。
    接続が不安定なため、https と http の両方の URL を
    ResilientFetcher 経由で順に試す。
    """

    def __init__(
        self,
        fetcher: ResilientFetcher,
        base_url: str = "https://testingpcmcpensioner.altwise.in",
        details_path: str = "/api/aadhar/getCandidateDetails",
        lookup_retries: int = 2,
        photo_retries: int = 3,
        probe_ppo_number: str = "TEST",
    ):
        self._fetcher = fetcher
        self._host_and_path = base_url.split("://", 1)[-1].rstrip("/") + details_path
        self.lookup_retries = lookup_retries
        self.photo_retries = photo_retries
        self.probe_ppo_number = probe_ppo_number

    def url_variations(self, ppo_number: PpoNumber) -> list[str]:
        """照会 URL の候補（https を優先）"""
        query = urlencode(ppo_number.query_params())
        return [
            f"https://{self._host_and_path}?{query}",
            f"http://{self._host_and_path}?{query}",
        ]

    async def get_candidate_details(self, ppo_number: PpoNumber) -> CandidateDetails:
        """
        PPO 番号から受給者情報を取得

        Args:
            ppo_number: PPO 番号

        Returns:
            CandidateDetails: 写真 URL を含む受給者情報

        Raises:
            CandidateNotFoundError: 照会サービスが 404 を返した
            AadhaarLookupRejectedError: 照会サービスが success=false を返した
            AadhaarPhotoMissingError: 写真 URL がない
            AadhaarServiceUnavailableError: すべての URL で失敗した
        """
        log = logger.bind(ppo_number=str(ppo_number))
        log.info("aadhaar_lookup_started")

        last_error: Exception | None = None

        for url in self.url_variations(ppo_number):
            log.info("aadhaar_lookup_trying", url=url)

            try:
                response = await self._fetcher.fetch(
                    url,
                    headers={"Accept": JSON_ACCEPT},
                    max_retries=self.lookup_retries,
                )
            except FetchFailedError as e:
                log.error("aadhaar_lookup_fetch_failed", url=url, error=str(e))
                last_error = e
                continue

            if response.status_code == 404:
                raise CandidateNotFoundError("PPO Number not found in the system")

            if not response.is_success:
                log.warning(
                    "aadhaar_lookup_http_error",
                    status_code=response.status_code,
                    body=response.text[:200],
                )
                last_error = Exception(f"HTTP {response.status_code}")
                continue

            content_type = response.headers.get("content-type", "")
            if "application/json" not in content_type:
                last_error = Exception("Invalid response format")
                continue

            try:
                payload = response.json()
            except ValueError as e:
                last_error = e
                continue

            # 配列や文字列の本文は success を持たない応答として扱う
            if not isinstance(payload, dict) or not payload.get("success"):
                message = payload.get("message") if isinstance(payload, dict) else None
                raise AadhaarLookupRejectedError(message or "Failed to fetch Aadhaar details")

            data = payload.get("data")
            photo_url = data.get("aadhaarPhotoUrl") if isinstance(data, dict) else None
            if not photo_url or not isinstance(photo_url, str):
                raise AadhaarPhotoMissingError("No Aadhaar photo found for this PPO Number")

            log.info("aadhaar_lookup_completed")
            return CandidateDetails.from_payload(payload)

        log.error("aadhaar_lookup_exhausted", error=str(last_error) if last_error else None)
        raise AadhaarServiceUnavailableError(
            "Unable to connect to Aadhaar service. Please try again.",
            details=str(last_error) if last_error else "Connection failed",
        )

    async def download_photo(self, url: str) -> bytes:
        """
        Aadhaar 写真をダウンロード

        Args:
            url: 写真 URL

        Returns:
            bytes: 画像データ
        """
        url = normalize_photo_url(url)
        log = logger.bind(url=url)
        log.info("aadhaar_photo_download_started")

        try:
            response = await self._fetcher.fetch(
                url,
                headers={"Accept": IMAGE_ACCEPT},
                max_retries=self.photo_retries,
            )
        except (FetchFailedError, httpx.InvalidURL) as e:
            log.error("aadhaar_photo_download_failed", error=str(e))
            raise ReferenceImageDownloadError("Failed to download Aadhaar image") from e

        if not response.is_success:
            log.error("aadhaar_photo_download_failed", status_code=response.status_code)
            raise ReferenceImageDownloadError("Failed to download Aadhaar image")

        log.info("aadhaar_photo_download_completed", size=len(response.content))
        return response.content

    async def probe(self) -> ProbeResult:
        """照会サービスの疎通確認"""
        url = self.url_variations(PpoNumber(self.probe_ppo_number))[0]
        try:
            response = await self._fetcher.fetch(url, max_retries=1)
        except FetchFailedError as e:
            return ProbeResult(reachable=False, error=str(e))

        return ProbeResult(
            reachable=True,
            status_code=response.status_code,
            reason=response.reason_phrase,
        )
