"""Logging Middleware"""
from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# モバイル回線のプロキシにレスポンスをキャッシュさせない
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def get_request_id(request: Request) -> str | None:
    """ミドルウェアが割り当てたリクエストIDを取得"""
    return getattr(request.state, "request_id", None)


def client_fields(request: Request) -> dict[str, Any]:
    """ログに残すクライアント情報（プロキシ経由のヘッダを含む）"""
    headers = request.headers
    return {
        "client_ip": request.client.host if request.client else None,
        "origin": headers.get("origin"),
        "user_agent": headers.get("user-agent"),
        "forwarded_for": headers.get("x-forwarded-for"),
        "real_ip": headers.get("x-real-ip"),
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    リクエストIDの付与とアクセスログ

    受け取った X-Request-ID を引き継ぎ（なければ採番し）、
    structlog のコンテキストに束縛する。同じ ID をレスポンスヘッダと
    エラーレスポンスの requestId に載せ、ブラウザ側のログと突き合わせられるようにする。
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger.info("request_started", **client_fields(request))
        started = time.perf_counter()

        response = await call_next(request)

        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers.update(NO_CACHE_HEADERS)
        return response
