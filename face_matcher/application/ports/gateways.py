"""Gateway Interfaces (Ports)"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from face_matcher.domain.verification import (
    CandidateDetails,
    LivenessSessionResult,
    PpoNumber,
)


@dataclass
class TemporaryCredentials:
    """一時認証情報DTO"""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: str

    def to_identity(self) -> dict[str, str]:
        return {
            "accessKeyId": self.access_key_id,
            "secretAccessKey": self.secret_access_key,
            "sessionToken": self.session_token,
            "expiration": self.expiration,
        }


@dataclass
class FaceDetection:
    """単一フレームの顔検出結果DTO"""

    face_count: int
    confidence: float = 0.0
    eyes_open: bool = False
    details: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ProbeResult:
    """外部サービス疎通確認結果DTO"""

    reachable: bool
    status_code: int | None = None
    reason: str | None = None
    error: str | None = None


class ICandidateGateway(ABC):
    """
    Candidate Gateway Interface

    Aadhaar 照会サービスとの通信を抽象化する。
    """

    @abstractmethod
    async def get_candidate_details(self, ppo_number: PpoNumber) -> CandidateDetails:
        """PPO 番号から受給者情報を取得"""
        pass

    @abstractmethod
    async def download_photo(self, url: str) -> bytes:
        """Aadhaar 写真をダウンロード"""
        pass

    @abstractmethod
    async def probe(self) -> ProbeResult:
        """疎通確認"""
        pass


class IFaceComparisonGateway(ABC):
    """
    Face Comparison Gateway Interface

    Rekognition CompareFaces / DetectFaces との通信を抽象化する。
    """

    @abstractmethod
    async def compare_faces(
        self,
        source_image: bytes,
        target_image: bytes,
        similarity_threshold: float = 50.0,
    ) -> float | None:
        """最上位一致の類似度を返す（一致なしは None）"""
        pass

    @abstractmethod
    async def detect_faces(self, image: bytes) -> FaceDetection:
        """画像内の顔を検出"""
        pass


class ILivenessGateway(ABC):
    """
    Liveness Gateway Interface

    Rekognition Face Liveness セッションを抽象化する。
    """

    @abstractmethod
    async def create_session(self) -> str:
        """セッションを作成し ID を返す"""
        pass

    @abstractmethod
    async def get_session_results(
        self, session_id: str
    ) -> tuple[dict[str, Any], LivenessSessionResult]:
        """セッション結果（生レスポンスと要約）を取得"""
        pass


class ICredentialsGateway(ABC):
    """
    Credentials Gateway Interface

    ブラウザに渡す一時認証情報の発行を抽象化する。
    """

    @abstractmethod
    async def get_session_token(self, duration_seconds: int = 900) -> TemporaryCredentials:
        """一時認証情報を発行"""
        pass
