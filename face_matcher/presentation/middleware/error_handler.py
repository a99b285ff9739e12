"""Error Handler Middleware"""
from __future__ import annotations

from typing import Any

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from face_matcher.application.use_cases.liveness import InvalidSampleError
from face_matcher.application.use_cases.verification import InvalidUploadError, MissingInputError
from face_matcher.domain.verification import InvalidPpoNumberError
from face_matcher.infrastructure.gateways.aadhaar import (
    AadhaarLookupRejectedError,
    AadhaarPhotoMissingError,
    AadhaarServiceUnavailableError,
    CandidateNotFoundError,
    ReferenceImageDownloadError,
)
from face_matcher.infrastructure.gateways.rekognition import LivenessSessionError, RekognitionError
from face_matcher.infrastructure.gateways.sts import CredentialsIssueError
from face_matcher.presentation.middleware.logging import REQUEST_ID_HEADER, get_request_id

logger = structlog.get_logger()


def error_response(
    request: Request,
    status_code: int,
    error: str,
    code: str,
    **extra: Any,
) -> JSONResponse:
    """エラーレスポンスを作成"""
    request_id = get_request_id(request)
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "code": code,
            **extra,
            "requestId": request_id,
        },
        headers=headers,
    )


async def invalid_ppo_number_handler(request: Request, exc: InvalidPpoNumberError) -> JSONResponse:
    """PPO 番号不正エラーハンドラ"""
    logger.warning("invalid_ppo_number", error=str(exc))
    return error_response(request, 400, str(exc), "INVALID_PPO_NUMBER")


async def missing_input_handler(request: Request, exc: MissingInputError) -> JSONResponse:
    """必須入力欠落エラーハンドラ"""
    logger.warning("missing_input", error=str(exc))
    return error_response(request, 400, str(exc), "MISSING_INPUT")


async def invalid_upload_handler(request: Request, exc: InvalidUploadError) -> JSONResponse:
    """アップロード不正エラーハンドラ"""
    logger.warning("invalid_upload", error=str(exc))
    return error_response(request, 400, str(exc), "INVALID_UPLOAD")


async def invalid_sample_handler(request: Request, exc: InvalidSampleError) -> JSONResponse:
    """サンプル不正エラーハンドラ"""
    logger.warning("invalid_liveness_sample", error=str(exc))
    return error_response(request, 400, str(exc), "INVALID_SAMPLE")


async def candidate_not_found_handler(
    request: Request, exc: CandidateNotFoundError
) -> JSONResponse:
    """受給者が見つからないエラーハンドラ"""
    logger.warning("candidate_not_found", error=str(exc))
    return error_response(request, 404, str(exc), "CANDIDATE_NOT_FOUND")


async def aadhaar_photo_missing_handler(
    request: Request, exc: AadhaarPhotoMissingError
) -> JSONResponse:
    """Aadhaar 写真なしエラーハンドラ"""
    logger.warning("aadhaar_photo_missing", error=str(exc))
    return error_response(request, 404, str(exc), "AADHAAR_PHOTO_NOT_FOUND")


async def aadhaar_lookup_rejected_handler(
    request: Request, exc: AadhaarLookupRejectedError
) -> JSONResponse:
    """照会拒否エラーハンドラ"""
    logger.warning("aadhaar_lookup_rejected", error=str(exc))
    return error_response(request, 400, str(exc), "AADHAAR_LOOKUP_REJECTED")


async def aadhaar_service_unavailable_handler(
    request: Request, exc: AadhaarServiceUnavailableError
) -> JSONResponse:
    """照会サービス接続不可エラーハンドラ"""
    logger.error("aadhaar_service_unavailable", error=str(exc), details=exc.details)
    return error_response(
        request,
        502,
        str(exc),
        "AADHAAR_SERVICE_UNAVAILABLE",
        details=exc.details,
        suggestion="Please check your internet connection and try again",
    )


async def reference_image_download_handler(
    request: Request, exc: ReferenceImageDownloadError
) -> JSONResponse:
    """Aadhaar 写真ダウンロード失敗エラーハンドラ"""
    logger.error("reference_image_download_failed", error=str(exc))
    return error_response(request, 400, str(exc), "REFERENCE_IMAGE_DOWNLOAD_FAILED")


async def rekognition_error_handler(request: Request, exc: RekognitionError) -> JSONResponse:
    """Rekognition エラーハンドラ"""
    logger.error("rekognition_error", error=str(exc), aws_code=exc.code)
    return error_response(request, exc.status_code, str(exc), "REKOGNITION_ERROR")


async def liveness_session_error_handler(
    request: Request, exc: LivenessSessionError
) -> JSONResponse:
    """Face Liveness セッションエラーハンドラ"""
    logger.error("liveness_session_error", error=str(exc))
    return error_response(request, 500, str(exc), "LIVENESS_SESSION_FAILED")


async def credentials_issue_handler(request: Request, exc: CredentialsIssueError) -> JSONResponse:
    """一時認証情報発行エラーハンドラ"""
    logger.error("credentials_issue_error", error=str(exc))
    return error_response(
        request, 500, "Failed to create liveness session", "LIVENESS_SESSION_FAILED"
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTP 例外ハンドラ（未定義ルートを含む）"""
    if exc.status_code == 404:
        request_id = get_request_id(request)
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "path": request.url.path,
                "method": request.method,
                "requestId": request_id,
            },
        )
    return error_response(request, exc.status_code, str(exc.detail), "HTTP_ERROR")


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """リクエスト検証エラーハンドラ"""
    logger.warning("request_validation_error", errors=exc.errors())
    return error_response(
        request,
        400,
        "Invalid request",
        "VALIDATION_ERROR",
        details=[
            {"loc": list(e.get("loc", [])), "msg": e.get("msg")} for e in exc.errors()
        ],
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """汎用エラーハンドラ"""
    logger.error("unhandled_error", error=str(exc), exc_info=True)
    return error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


# エラーハンドラのマッピング
error_handlers = {
    InvalidPpoNumberError: invalid_ppo_number_handler,
    MissingInputError: missing_input_handler,
    InvalidUploadError: invalid_upload_handler,
    InvalidSampleError: invalid_sample_handler,
    CandidateNotFoundError: candidate_not_found_handler,
    AadhaarPhotoMissingError: aadhaar_photo_missing_handler,
    AadhaarLookupRejectedError: aadhaar_lookup_rejected_handler,
    AadhaarServiceUnavailableError: aadhaar_service_unavailable_handler,
    ReferenceImageDownloadError: reference_image_download_handler,
    RekognitionError: rekognition_error_handler,
    LivenessSessionError: liveness_session_error_handler,
    CredentialsIssueError: credentials_issue_handler,
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_error_handler,
    Exception: generic_error_handler,
}
