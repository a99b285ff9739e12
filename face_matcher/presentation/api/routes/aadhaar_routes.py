"""Aadhaar API Routes"""
from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from face_matcher.application.use_cases.aadhaar import (
    GetCandidateDetailsInput,
    GetCandidateDetailsUseCase,
)
from face_matcher.presentation.api.dependencies import get_candidate_details_use_case
from face_matcher.presentation.middleware.logging import get_request_id

router = APIRouter()


class CandidateDetailsResponse(BaseModel):
    """受給者情報レスポンス"""

    success: bool
    data: dict[str, Any]
    message: str | None
    requestId: str | None


@router.get("/getCandidateDetails", response_model=CandidateDetailsResponse)
async def get_candidate_details(
    request: Request,
    use_case: Annotated[GetCandidateDetailsUseCase, Depends(get_candidate_details_use_case)],
    ppo_number: Annotated[str | None, Query(alias="ppoNumber", description="PPO 番号")] = None,
) -> CandidateDetailsResponse:
    """PPO 番号から受給者情報を取得"""
    output = await use_case.execute(GetCandidateDetailsInput(ppo_number=ppo_number))

    return CandidateDetailsResponse(
        success=True,
        data=output.data,
        message=output.message,
        requestId=get_request_id(request),
    )
