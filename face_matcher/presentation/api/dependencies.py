"""API Dependencies"""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from face_matcher.application.ports.gateways import (
    ICandidateGateway,
    ICredentialsGateway,
    IFaceComparisonGateway,
    ILivenessGateway,
)
from face_matcher.application.single_flight import SingleFlight
from face_matcher.application.use_cases.diagnostics import DiagnoseUseCase
from face_matcher.application.use_cases.liveness import (
    CheckFrameLivenessUseCase,
    CreateLivenessSessionUseCase,
    EvaluateLivenessSamplesUseCase,
    GetLivenessResultUseCase,
)
from face_matcher.application.use_cases.verification import CompareFacesUseCase
from face_matcher.application.use_cases.aadhaar import GetCandidateDetailsUseCase
from face_matcher.infrastructure.config import Settings, get_settings
from face_matcher.infrastructure.gateways import AadhaarGateway, RekognitionGateway, StsGateway
from face_matcher.infrastructure.gateways.rekognition import build_client_config
from face_matcher.infrastructure.http import ResilientFetcher, resolve_ipv4

SettingsDep = Annotated[Settings, Depends(get_settings)]


# === Gateways ===


@lru_cache()
def get_fetcher() -> ResilientFetcher:
    """Resilient Fetcher の依存性注入"""
    settings = get_settings()
    return ResilientFetcher(
        timeout_seconds=settings.fetch_timeout_seconds,
        strategy_delay_ms=settings.fetch_strategy_delay_ms,
        backoff_base_ms=settings.fetch_backoff_base_ms,
        backoff_max_ms=settings.fetch_backoff_max_ms,
    )


def get_candidate_gateway(
    fetcher: Annotated[ResilientFetcher, Depends(get_fetcher)],
    settings: SettingsDep,
) -> ICandidateGateway:
    """Candidate Gateway の依存性注入"""
    return AadhaarGateway(
        fetcher=fetcher,
        base_url=settings.aadhaar_base_url,
        details_path=settings.aadhaar_details_path,
        lookup_retries=settings.aadhaar_lookup_retries,
        photo_retries=settings.aadhaar_photo_retries,
        probe_ppo_number=settings.diagnostics_probe_ppo_number,
    )


@lru_cache()
def get_rekognition_gateway() -> RekognitionGateway:
    """Rekognition Gateway の依存性注入"""
    settings = get_settings()
    return RekognitionGateway(
        region=settings.aws_region,
        config=build_client_config(
            max_attempts=settings.rekognition_max_attempts,
            connect_timeout=settings.rekognition_connect_timeout_seconds,
            read_timeout=settings.rekognition_read_timeout_seconds,
        ),
    )


def get_face_comparison_gateway() -> IFaceComparisonGateway:
    return get_rekognition_gateway()


def get_liveness_gateway() -> ILivenessGateway:
    return get_rekognition_gateway()


@lru_cache()
def get_credentials_gateway() -> ICredentialsGateway:
    """Credentials Gateway の依存性注入"""
    return StsGateway(region=get_settings().aws_region)


# === Single Flight ===
# リクエストをまたいで共有する必要があるためプロセス内で 1 つ


@lru_cache()
def get_compare_single_flight() -> SingleFlight:
    return SingleFlight("compare_faces")


@lru_cache()
def get_session_single_flight() -> SingleFlight:
    return SingleFlight("create_liveness_session")


# === Use Cases ===


def get_candidate_details_use_case(
    candidate_gateway: Annotated[ICandidateGateway, Depends(get_candidate_gateway)],
) -> GetCandidateDetailsUseCase:
    return GetCandidateDetailsUseCase(candidate_gateway=candidate_gateway)


def get_compare_faces_use_case(
    candidate_gateway: Annotated[ICandidateGateway, Depends(get_candidate_gateway)],
    face_comparison_gateway: Annotated[
        IFaceComparisonGateway, Depends(get_face_comparison_gateway)
    ],
    single_flight: Annotated[SingleFlight, Depends(get_compare_single_flight)],
    settings: SettingsDep,
) -> CompareFacesUseCase:
    return CompareFacesUseCase(
        candidate_gateway=candidate_gateway,
        face_comparison_gateway=face_comparison_gateway,
        single_flight=single_flight,
        similarity_threshold=settings.compare_similarity_threshold,
        match_threshold=settings.match_threshold,
        max_upload_bytes=settings.max_upload_bytes,
        allowed_content_types=frozenset(settings.allowed_upload_content_types),
    )


def get_create_liveness_session_use_case(
    liveness_gateway: Annotated[ILivenessGateway, Depends(get_liveness_gateway)],
    credentials_gateway: Annotated[ICredentialsGateway, Depends(get_credentials_gateway)],
    single_flight: Annotated[SingleFlight, Depends(get_session_single_flight)],
    settings: SettingsDep,
) -> CreateLivenessSessionUseCase:
    return CreateLivenessSessionUseCase(
        liveness_gateway=liveness_gateway,
        credentials_gateway=credentials_gateway,
        region=settings.aws_region,
        single_flight=single_flight,
        token_duration_seconds=settings.sts_token_duration_seconds,
    )


def get_liveness_result_use_case(
    liveness_gateway: Annotated[ILivenessGateway, Depends(get_liveness_gateway)],
    settings: SettingsDep,
) -> GetLivenessResultUseCase:
    return GetLivenessResultUseCase(
        liveness_gateway=liveness_gateway,
        min_confidence=settings.liveness_min_confidence,
    )


def get_check_frame_liveness_use_case(
    face_comparison_gateway: Annotated[
        IFaceComparisonGateway, Depends(get_face_comparison_gateway)
    ],
    settings: SettingsDep,
) -> CheckFrameLivenessUseCase:
    return CheckFrameLivenessUseCase(
        face_comparison_gateway=face_comparison_gateway,
        min_confidence=settings.frame_face_min_confidence,
        max_upload_bytes=settings.max_upload_bytes,
    )


def get_evaluate_liveness_samples_use_case() -> EvaluateLivenessSamplesUseCase:
    return EvaluateLivenessSamplesUseCase()


def get_diagnose_use_case(
    candidate_gateway: Annotated[ICandidateGateway, Depends(get_candidate_gateway)],
    settings: SettingsDep,
) -> DiagnoseUseCase:
    return DiagnoseUseCase(
        candidate_gateway=candidate_gateway,
        resolver=resolve_ipv4,
        host=settings.aadhaar_host,
    )
