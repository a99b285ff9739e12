"""PPO Number Value Object"""
from __future__ import annotations

from dataclasses import dataclass


class InvalidPpoNumberError(ValueError):
    """不正な PPO 番号エラー"""

    pass


@dataclass(frozen=True)
class PpoNumber:
    """
    PPO 番号（値オブジェクト）

    年金受給者を識別する Pension Payment Order 番号。
    前後の空白は取り除かれ、空文字列は許容しない。
    """

    value: str

    def __post_init__(self) -> None:
        if self.value is None or not str(self.value).strip():
            raise InvalidPpoNumberError("ppoNumber is required")
        object.__setattr__(self, "value", str(self.value).strip())

    def query_params(self) -> dict[str, str]:
        """Aadhaar 照会 API のクエリパラメータ"""
        return {"ppoNumber": self.value}

    def __str__(self) -> str:
        return self.value
