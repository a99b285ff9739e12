"""Aadhaar Use Cases"""
from .get_candidate_details import (
    GetCandidateDetailsInput,
    GetCandidateDetailsOutput,
    GetCandidateDetailsUseCase,
)

__all__ = [
    "GetCandidateDetailsInput",
    "GetCandidateDetailsOutput",
    "GetCandidateDetailsUseCase",
]
