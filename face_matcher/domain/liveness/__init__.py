"""Liveness Heuristics Domain Module"""
from .blink_detector import EAR_CLOSE_THRESHOLD, EAR_OPEN_THRESHOLD, BlinkDetector
from .capture_gate import CaptureGate, FrameObservation, GateAction
from .eye_aspect_ratio import (
    LEFT_EYE_INDICES,
    RIGHT_EYE_INDICES,
    average_ear,
    eye_aspect_ratio,
)
from .frame_history import (
    FaceSample,
    FrameHistory,
    face_center,
    frame_luminance,
    is_centered,
)

__all__ = [
    "EAR_CLOSE_THRESHOLD",
    "EAR_OPEN_THRESHOLD",
    "BlinkDetector",
    "CaptureGate",
    "FrameObservation",
    "GateAction",
    "LEFT_EYE_INDICES",
    "RIGHT_EYE_INDICES",
    "average_ear",
    "eye_aspect_ratio",
    "FaceSample",
    "FrameHistory",
    "face_center",
    "frame_luminance",
    "is_centered",
]
