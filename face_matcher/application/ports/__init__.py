"""Application Ports (Interfaces)"""
from .gateways import (
    FaceDetection,
    ICandidateGateway,
    ICredentialsGateway,
    IFaceComparisonGateway,
    ILivenessGateway,
    ProbeResult,
    TemporaryCredentials,
)

__all__ = [
    "FaceDetection",
    "ICandidateGateway",
    "ICredentialsGateway",
    "IFaceComparisonGateway",
    "ILivenessGateway",
    "ProbeResult",
    "TemporaryCredentials",
]
