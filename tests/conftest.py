"""Test Configuration"""
from __future__ import annotations

import asyncio
import io
from typing import Any, Callable

import httpx
import pytest
from PIL import Image

from face_matcher.application.ports.gateways import (
    FaceDetection,
    ICandidateGateway,
    ICredentialsGateway,
    IFaceComparisonGateway,
    ILivenessGateway,
    ProbeResult,
    TemporaryCredentials,
)
from face_matcher.domain.liveness import LEFT_EYE_INDICES, RIGHT_EYE_INDICES
from face_matcher.domain.verification import (
    CandidateDetails,
    LivenessSessionResult,
    PpoNumber,
)
from face_matcher.infrastructure.http import ResilientFetcher
FACE_MESH_SIZE = 478
EYE_WIDTH = 0.04


def _place_eye(points: list[list[float]], indices: tuple[int, ...], x0: float, y: float, ear: float) -> None:
    """EAR がちょうど ear になるよう目の 6 点を配置"""
    h = ear * EYE_WIDTH
    w = EYE_WIDTH
    p0, p1, p2, p3, p4, p5 = indices
    points[p0] = [x0, y]
    points[p1] = [x0 + w / 3, y - h / 2]
    points[p2] = [x0 + 2 * w / 3, y - h / 2]
    points[p3] = [x0 + w, y]
    points[p4] = [x0 + 2 * w / 3, y + h / 2]
    points[p5] = [x0 + w / 3, y + h / 2]


def make_landmarks(center_x: float = 0.5, center_y: float = 0.5, ear: float = 0.3) -> list[list[float]]:
    """
    FaceMesh 形式の正規化ランドマークを生成

    バウンディングボックスの中心が (center_x, center_y)、
    左右の目の EAR が ear になる。
    """
    points = [[center_x, center_y] for _ in range(FACE_MESH_SIZE)]
    points[0] = [center_x - 0.1, center_y - 0.1]
    points[1] = [center_x + 0.1, center_y + 0.1]
    _place_eye(points, LEFT_EYE_INDICES, center_x - 0.07, center_y - 0.03, ear)
    _place_eye(points, RIGHT_EYE_INDICES, center_x + 0.03, center_y - 0.03, ear)
    return points


@pytest.fixture
def landmark_factory() -> Callable[..., list[list[float]]]:
    """ランドマーク生成関数"""
    return make_landmarks


@pytest.fixture
def jpeg_bytes() -> bytes:
    """灰色一色の JPEG 画像"""
    buffer = io.BytesIO()
    Image.new("RGB", (32, 32), (128, 128, 128)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def truncated_jpeg_bytes() -> bytes:
    """ヘッダは読めるが画素データが途中で切れた JPEG 画像"""
    buffer = io.BytesIO()
    Image.effect_noise((256, 256), 64).convert("RGB").save(buffer, format="JPEG")
    data = buffer.getvalue()
    return data[: len(data) * 3 // 5]


class RecordingSleep:
    """待機時間を記録するだけの sleep"""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fetcher_factory(
    recording_sleep: RecordingSleep,
) -> Callable[..., ResilientFetcher]:
    """MockTransport を使う ResilientFetcher を生成"""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        addresses: list[str] | None = None,
        resolver_error: Exception | None = None,
    ) -> ResilientFetcher:
        async def resolver(host: str) -> list[str]:
            if resolver_error is not None:
                raise resolver_error
            return list(addresses or [])

        return ResilientFetcher(
            resolver=resolver,
            transport=httpx.MockTransport(handler),
            sleep=recording_sleep,
        )

    return factory



# === Fake Gateways ===

class FakeCandidateGateway(ICandidateGateway):
    """メモリ上の Aadhaar 照会サービス"""

    def __init__(self) -> None:
        self.details: CandidateDetails | None = None
        self.photo = b"reference-photo"
        self.error: Exception | None = None
        self.probe_result = ProbeResult(reachable=True, status_code=200, reason="OK")
        self.lookups: list[PpoNumber] = []
        self.downloads: list[str] = []
        self.download_delay = 0.0

    async def get_candidate_details(self, ppo_number: PpoNumber) -> CandidateDetails:
        self.lookups.append(ppo_number)
        if self.error is not None:
            raise self.error
        assert self.details is not None
        return self.details

    async def download_photo(self, url: str) -> bytes:
        self.downloads.append(url)
        if self.download_delay:
            await asyncio.sleep(self.download_delay)
        if self.error is not None:
            raise self.error
        return self.photo

    async def probe(self) -> ProbeResult:
        return self.probe_result


class FakeFaceGateway(IFaceComparisonGateway):
    """メモリ上の CompareFaces / DetectFaces"""

    def __init__(self) -> None:
        self.similarity: float | None = 91.234
        self.detection = FaceDetection(face_count=1, confidence=99.5, eyes_open=True)
        self.compare_calls: list[dict[str, Any]] = []
        self.detect_calls = 0

    async def compare_faces(
        self,
        source_image: bytes,
        target_image: bytes,
        similarity_threshold: float = 50.0,
    ) -> float | None:
        self.compare_calls.append(
            {
                "source_image": source_image,
                "target_image": target_image,
                "similarity_threshold": similarity_threshold,
            }
        )
        return self.similarity

    async def detect_faces(self, image: bytes) -> FaceDetection:
        self.detect_calls += 1
        return self.detection


class FakeLivenessGateway(ILivenessGateway):
    """メモリ上の Face Liveness"""

    def __init__(self) -> None:
        self.created = 0
        self.delay = 0.0
        self.results: dict[str, dict[str, Any]] = {}

    async def create_session(self) -> str:
        self.created += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return f"session-{self.created}"

    async def get_session_results(
        self, session_id: str
    ) -> tuple[dict[str, Any], LivenessSessionResult]:
        raw = self.results[session_id]
        return raw, LivenessSessionResult.from_response(raw)


class FakeCredentialsGateway(ICredentialsGateway):
    """メモリ上の STS"""

    def __init__(self) -> None:
        self.durations: list[int] = []

    async def get_session_token(self, duration_seconds: int = 900) -> TemporaryCredentials:
        self.durations.append(duration_seconds)
        return TemporaryCredentials(
            access_key_id="ASIAFAKEACCESSKEY01",
            secret_access_key="secret",
            session_token="token",
            expiration="2026-01-01T00:15:00.000Z",
        )


@pytest.fixture
def candidate_gateway() -> FakeCandidateGateway:
    return FakeCandidateGateway()


@pytest.fixture
def face_gateway() -> FakeFaceGateway:
    return FakeFaceGateway()


@pytest.fixture
def liveness_gateway() -> FakeLivenessGateway:
    return FakeLivenessGateway()


@pytest.fixture
def credentials_gateway() -> FakeCredentialsGateway:
    return FakeCredentialsGateway()
