"""Candidate Details Value Object"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# 照会サービスが返す URL にはパス区切りが重複していることがある
_DUPLICATED_DOC_SEGMENT = "AadharDoc//"
_DOC_SEGMENT = "AadharDoc/"


def normalize_photo_url(url: str) -> str:
    """Aadhaar 写真 URL の重複スラッシュを正規化"""
    return url.replace(_DUPLICATED_DOC_SEGMENT, _DOC_SEGMENT)


@dataclass(frozen=True)
class CandidateDetails:
    """
    受給者情報（値オブジェクト）

    Aadhaar 照会サービスの `data` ペイロードをそのまま保持し、
    照合に必要な写真 URL を取り出す。
    """

    aadhaar_photo_url: str
    data: dict[str, Any] = field(default_factory=dict)
    message: str | None = None

    @property
    def normalized_photo_url(self) -> str:
        return normalize_photo_url(self.aadhaar_photo_url)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CandidateDetails:
        """照会サービスのレスポンスボディから生成"""
        data = payload.get("data") or {}
        return cls(
            aadhaar_photo_url=data["aadhaarPhotoUrl"],
            data=data,
            message=payload.get("message"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "data": self.data,
            "message": self.message,
        }
