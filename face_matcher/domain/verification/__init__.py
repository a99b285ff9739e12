"""Verification Domain Module"""
from .value_objects import (
    CandidateDetails,
    FaceMatchResult,
    InvalidPpoNumberError,
    LivenessSessionResult,
    LivenessStatus,
    PpoNumber,
    normalize_photo_url,
)

__all__ = [
    "CandidateDetails",
    "normalize_photo_url",
    "FaceMatchResult",
    "InvalidPpoNumberError",
    "LivenessSessionResult",
    "LivenessStatus",
    "PpoNumber",
]
