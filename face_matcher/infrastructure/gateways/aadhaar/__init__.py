"""Aadhaar Gateway"""
from .aadhaar_gateway import (
    AadhaarGateway,
    AadhaarLookupRejectedError,
    AadhaarPhotoMissingError,
    AadhaarServiceUnavailableError,
    CandidateNotFoundError,
    ReferenceImageDownloadError,
)

__all__ = [
    "AadhaarGateway",
    "AadhaarLookupRejectedError",
    "AadhaarPhotoMissingError",
    "AadhaarServiceUnavailableError",
    "CandidateNotFoundError",
    "ReferenceImageDownloadError",
]
