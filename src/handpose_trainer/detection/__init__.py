"""Hand landmark detection using MediaPipe."""
from ..core.types import HAND_CONNECTIONS, HandLandmarks, Landmark, LandmarkIndex
from .hand_detector import HandDetector, HandDetectorConfig

__all__ = [
    "HAND_CONNECTIONS",
    "HandDetector",
    "HandDetectorConfig",
    "HandLandmarks",
    "Landmark",
    "LandmarkIndex",
]
