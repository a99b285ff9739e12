"""Application Settings"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリケーション設定

    12-Factor App の Config 原則に従い、
    すべての設定は環境変数から取得する。
    """

    model_config = SettingsConfigDict(
        env_prefix="FACE_MATCHER_",
        env_file=".env",
        case_sensitive=False,
    )

    # Service
    service_name: str = "face-matcher"
    service_version: str = "3.0.0"
    server_banner: str = "Face Matcher API v3.0 - Universal Mobile"
    environment: str = "production"
    log_level: str = "INFO"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # AWS
    aws_region: str = "us-east-1"
    rekognition_max_attempts: int = 3
    rekognition_connect_timeout_seconds: float = 5.0
    rekognition_read_timeout_seconds: float = 30.0
    sts_token_duration_seconds: int = 900

    # Aadhaar 照会サービス
    aadhaar_base_url: str = "https://testingpcmcpensioner.altwise.in"
    aadhaar_details_path: str = "/api/aadhar/getCandidateDetails"
    aadhaar_lookup_retries: int = 2
    aadhaar_photo_retries: int = 3
    diagnostics_probe_ppo_number: str = "TEST"

    # Resilient Fetch
    fetch_timeout_seconds: float = 30.0
    fetch_strategy_delay_ms: int = 100
    fetch_backoff_base_ms: int = 1000
    fetch_backoff_max_ms: int = 5000

    # Face Comparison
    compare_similarity_threshold: float = 50.0
    match_threshold: float = 80.0

    # Liveness
    liveness_min_confidence: float = 90.0
    frame_face_min_confidence: float = 90.0

    # Upload
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_upload_content_types: list[str] = ["image/png", "image/jpg", "image/jpeg"]

    # CORS
    cors_allow_origins: list[str] = ["*"]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def aadhaar_host(self) -> str:
        return self.aadhaar_base_url.split("://", 1)[-1].split("/", 1)[0]


@lru_cache()
def get_settings() -> Settings:
    """設定のシングルトンインスタンスを取得"""
    return Settings()
