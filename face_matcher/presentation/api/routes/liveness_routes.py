"""Liveness API Routes"""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Header, Request, UploadFile
from pydantic import BaseModel, Field

from face_matcher.application.use_cases.liveness import (
    CheckFrameLivenessUseCase,
    CreateLivenessSessionInput,
    CreateLivenessSessionUseCase,
    EvaluateLivenessSamplesInput,
    EvaluateLivenessSamplesUseCase,
    GetLivenessResultUseCase,
    LivenessSampleInput,
)
from face_matcher.presentation.api.dependencies import (
    get_check_frame_liveness_use_case,
    get_create_liveness_session_use_case,
    get_evaluate_liveness_samples_use_case,
    get_liveness_result_use_case,
)
from face_matcher.presentation.middleware.logging import get_request_id

router = APIRouter()


# === Request Models ===


class LivenessSample(BaseModel):
    """FaceMesh のフレームサンプル"""

    luminance: float = Field(ge=0.0, le=1.0, description="フレーム平均輝度 (0-1)")
    landmarks: list[list[float]] | None = Field(
        default=None, description="正規化ランドマーク [[x, y(, z)], ...]。顔なしは null"
    )


class EvaluateSamplesRequest(BaseModel):
    """サンプル評価リクエスト"""

    width: int = Field(gt=0, description="フレーム幅（ピクセル）")
    height: int = Field(gt=0, description="フレーム高さ（ピクセル）")
    samples: list[LivenessSample] = Field(max_length=300)
    server_live: bool | None = Field(default=None, alias="serverLive")
    history_size: int = Field(default=15, ge=2, le=120, alias="historySize")


# === Routes ===


@router.get("/create")
async def create_liveness_session(
    request: Request,
    use_case: Annotated[
        CreateLivenessSessionUseCase, Depends(get_create_liveness_session_use_case)
    ],
    client_id: Annotated[str | None, Header(alias="X-Client-Id")] = None,
) -> dict:
    """Face Liveness セッションを作成"""
    output = await use_case.execute(CreateLivenessSessionInput(client_key=client_id))
    return {**output.to_response(), "requestId": get_request_id(request)}


@router.get("/result/{session_id}")
async def get_liveness_result(
    session_id: str,
    request: Request,
    use_case: Annotated[GetLivenessResultUseCase, Depends(get_liveness_result_use_case)],
) -> dict:
    """Face Liveness セッション結果を取得"""
    output = await use_case.execute(session_id)
    return {**output.to_response(), "requestId": get_request_id(request)}


@router.post("/check-frame")
async def check_frame(
    request: Request,
    use_case: Annotated[CheckFrameLivenessUseCase, Depends(get_check_frame_liveness_use_case)],
    image: Annotated[UploadFile | None, File(description="フレーム画像")] = None,
) -> dict:
    """単一フレームの生体確認"""
    data = await image.read() if image is not None else None
    output = await use_case.execute(data)
    return {**output.to_response(), "requestId": get_request_id(request)}


@router.post("/evaluate")
async def evaluate_samples(
    body: EvaluateSamplesRequest,
    request: Request,
    use_case: Annotated[
        EvaluateLivenessSamplesUseCase, Depends(get_evaluate_liveness_samples_use_case)
    ],
) -> dict:
    """FaceMesh サンプル系列を評価"""
    output = await use_case.execute(
        EvaluateLivenessSamplesInput(
            width=body.width,
            height=body.height,
            samples=[
                LivenessSampleInput(luminance=s.luminance, landmarks=s.landmarks)
                for s in body.samples
            ],
            server_live=body.server_live,
            history_size=body.history_size,
        )
    )
    return {**output.to_response(), "requestId": get_request_id(request)}
