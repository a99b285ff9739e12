"""Face Match Result Value Object"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_MATCH_THRESHOLD = 80.0


@dataclass(frozen=True)
class FaceMatchResult:
    """
    顔照合結果（値オブジェクト）

    Rekognition CompareFaces の最上位一致の類似度から、
    本人と判定できるかを表現する。

    - match_found: CompareFaces が閾値以上の一致を返したか
    - is_match: 類似度が本人判定の閾値を超えたか
    """

    match_found: bool
    similarity: float
    is_match: bool

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity <= 100.0:
            raise ValueError(f"Similarity must be between 0 and 100: {self.similarity}")

    @classmethod
    def from_similarity(
        cls,
        similarity: float,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    ) -> FaceMatchResult:
        """類似度から生成"""
        return cls(
            match_found=True,
            similarity=round(similarity, 2),
            is_match=similarity > match_threshold,
        )

    @classmethod
    def no_match(cls) -> FaceMatchResult:
        """一致なし"""
        return cls(match_found=False, similarity=0.0, is_match=False)

    @property
    def confidence(self) -> float:
        return self.similarity

    def to_response(self) -> dict[str, Any]:
        """API レスポンス形式に変換"""
        return {
            "matchFound": self.match_found,
            "success": self.match_found,
            "isMatch": self.is_match,
            "similarity": self.similarity,
            "confidence": self.confidence,
        }
