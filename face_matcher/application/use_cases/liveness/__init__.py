"""Liveness Use Cases"""
from .check_frame_liveness import CheckFrameLivenessOutput, CheckFrameLivenessUseCase
from .create_liveness_session import (
    CreateLivenessSessionInput,
    CreateLivenessSessionOutput,
    CreateLivenessSessionUseCase,
)
from .evaluate_liveness_samples import (
    EvaluateLivenessSamplesInput,
    EvaluateLivenessSamplesOutput,
    EvaluateLivenessSamplesUseCase,
    InvalidSampleError,
    LivenessSampleInput,
)
from .get_liveness_result import GetLivenessResultOutput, GetLivenessResultUseCase

__all__ = [
    "CheckFrameLivenessOutput",
    "CheckFrameLivenessUseCase",
    "CreateLivenessSessionInput",
    "CreateLivenessSessionOutput",
    "CreateLivenessSessionUseCase",
    "EvaluateLivenessSamplesInput",
    "EvaluateLivenessSamplesOutput",
    "EvaluateLivenessSamplesUseCase",
    "InvalidSampleError",
    "LivenessSampleInput",
    "GetLivenessResultOutput",
    "GetLivenessResultUseCase",
]
