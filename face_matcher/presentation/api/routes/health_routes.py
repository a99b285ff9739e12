"""Health Check Routes"""
from __future__ import annotations

import platform
import sys
import time
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from face_matcher.application.use_cases.diagnostics import DiagnoseUseCase
from face_matcher.infrastructure.config import get_settings
from face_matcher.presentation.api.dependencies import get_diagnose_use_case
from face_matcher.presentation.middleware.logging import get_request_id

router = APIRouter()

_STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _STARTED_AT, 3)


@router.get("/health")
async def health_check() -> dict:
    """ヘルスチェック"""
    settings = get_settings()
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "server": settings.server_banner,
        "uptime": uptime_seconds(),
        "version": settings.service_version,
    }


@router.get("/diagnose")
async def diagnose(
    request: Request,
    use_case: Annotated[DiagnoseUseCase, Depends(get_diagnose_use_case)],
) -> dict:
    """接続診断"""
    settings = get_settings()
    headers = request.headers
    output = await use_case.execute()

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "requestId": get_request_id(request),
        "server": {
            "version": settings.service_version,
            "uptime": uptime_seconds(),
            "pythonVersion": sys.version.split()[0],
            "platform": platform.system().lower(),
        },
        "client": {
            "ip": request.client.host if request.client else None,
            "userAgent": headers.get("user-agent"),
            "origin": headers.get("origin", "NO ORIGIN"),
            "forwardedFor": headers.get("x-forwarded-for", "NONE"),
            "realIp": headers.get("x-real-ip", "NONE"),
            "referer": headers.get("referer", "NONE"),
            "acceptLanguage": headers.get("accept-language", "NONE"),
        },
        "dns": output.dns,
        "externalApiTest": output.external_api_test,
    }
