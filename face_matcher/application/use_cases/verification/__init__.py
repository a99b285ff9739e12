"""Verification Use Cases"""
from .compare_faces import (
    CompareFacesInput,
    CompareFacesUseCase,
    InvalidUploadError,
    MissingInputError,
)

__all__ = [
    "CompareFacesInput",
    "CompareFacesUseCase",
    "InvalidUploadError",
    "MissingInputError",
]
