"""Compare API Routes"""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from face_matcher.application.use_cases.verification import (
    CompareFacesInput,
    CompareFacesUseCase,
)
from face_matcher.presentation.api.dependencies import get_compare_faces_use_case
from face_matcher.presentation.middleware.logging import get_request_id

router = APIRouter()


@router.post("/compare")
async def compare_faces(
    request: Request,
    use_case: Annotated[CompareFacesUseCase, Depends(get_compare_faces_use_case)],
    aadhaar_url: Annotated[str | None, Form(alias="aadhaarUrl", description="Aadhaar 写真 URL")] = None,
    image2: Annotated[UploadFile | None, File(description="撮影画像")] = None,
) -> dict:
    """Aadhaar 写真と撮影画像を照合"""
    live_image = await image2.read() if image2 is not None else None

    result = await use_case.execute(
        CompareFacesInput(
            aadhaar_url=aadhaar_url,
            live_image=live_image,
            live_content_type=image2.content_type if image2 is not None else None,
        )
    )

    return {**result.to_response(), "requestId": get_request_id(request)}
