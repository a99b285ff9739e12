"""Gateway implementations"""
from .aadhaar import AadhaarGateway
from .rekognition import RekognitionGateway
from .sts import StsGateway

__all__ = ["AadhaarGateway", "RekognitionGateway", "StsGateway"]
