"""Verification Value Objects"""
from .candidate_details import CandidateDetails, normalize_photo_url
from .face_match_result import FaceMatchResult
from .liveness_session_result import LivenessSessionResult, LivenessStatus
from .ppo_number import InvalidPpoNumberError, PpoNumber

__all__ = [
    "CandidateDetails",
    "normalize_photo_url",
    "FaceMatchResult",
    "LivenessSessionResult",
    "LivenessStatus",
    "InvalidPpoNumberError",
    "PpoNumber",
]
