"""Rekognition Gateway"""
from .rekognition_gateway import (
    ImageTooLargeError,
    InvalidImageFormatError,
    InvalidS3ObjectError,
    LivenessSessionError,
    RekognitionError,
    RekognitionGateway,
    build_client_config,
)

__all__ = [
    "ImageTooLargeError",
    "InvalidImageFormatError",
    "InvalidS3ObjectError",
    "LivenessSessionError",
    "RekognitionError",
    "RekognitionGateway",
    "build_client_config",
]
