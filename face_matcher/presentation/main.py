"""FastAPI Application Entry Point"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from face_matcher.infrastructure.config import get_settings
from face_matcher.presentation.api.routes import (
    aadhaar_routes,
    compare_routes,
    health_routes,
    liveness_routes,
)
from face_matcher.presentation.middleware.error_handler import error_handlers
from face_matcher.presentation.middleware.logging import REQUEST_ID_HEADER, LoggingMiddleware

logger = structlog.get_logger()


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """構造化ログを設定（開発環境ではコンソール出力）"""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """アプリケーションのライフサイクル管理"""
    settings = get_settings()
    logger.info(
        "application_starting",
        service=settings.service_name,
        version=settings.service_version,
        environment=settings.environment,
        aws_region=settings.aws_region,
    )
    yield
    logger.info("application_shutting_down")


def create_app() -> FastAPI:
    """FastAPI アプリケーションを作成"""
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=not settings.is_development)

    app = FastAPI(
        title="Face Matcher API",
        description="PPO number based Aadhaar face verification powered by Amazon Rekognition",
        version=settings.service_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Type", "Content-Length", REQUEST_ID_HEADER],
        max_age=86400,
    )

    # Error Handlers
    for exception_class, handler in error_handlers.items():
        app.add_exception_handler(exception_class, handler)

    # Routes
    app.include_router(health_routes.router, tags=["Health"])
    app.include_router(aadhaar_routes.router, prefix="/api/aadhar", tags=["Aadhaar"])
    app.include_router(compare_routes.router, tags=["Compare"])
    app.include_router(liveness_routes.router, prefix="/liveness", tags=["Liveness"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "face_matcher.presentation.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
