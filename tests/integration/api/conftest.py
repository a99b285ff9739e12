"""API Test Fixtures"""
from collections.abc import AsyncGenerator

import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from face_matcher.application.use_cases.diagnostics import DiagnoseUseCase
from face_matcher.presentation.api import dependencies
from face_matcher.presentation.main import create_app


async def _resolver(host: str) -> list[str]:
    return ["203.0.113.10"]


@pytest_asyncio.fixture
async def app(
    candidate_gateway, face_gateway, liveness_gateway, credentials_gateway
) -> AsyncGenerator[FastAPI, None]:
    """外部サービスをフェイクに差し替えたアプリケーション"""
    dependencies.get_compare_single_flight.cache_clear()
    dependencies.get_session_single_flight.cache_clear()

    application = create_app()
    application.dependency_overrides.update(
        {
            dependencies.get_candidate_gateway: lambda: candidate_gateway,
            dependencies.get_face_comparison_gateway: lambda: face_gateway,
            dependencies.get_liveness_gateway: lambda: liveness_gateway,
            dependencies.get_credentials_gateway: lambda: credentials_gateway,
            dependencies.get_diagnose_use_case: lambda: DiagnoseUseCase(
                candidate_gateway, _resolver, "aadhaar.example.in"
            ),
        }
    )
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """テスト用 HTTP クライアント"""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as http_client:
        yield http_client
