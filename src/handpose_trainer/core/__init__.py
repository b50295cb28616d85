"""Interfaces, request messages and session events."""
from .events import EventBus, Events
from .interfaces import ClassifierBackend, LandmarkSource, Prediction
from .types import FEATURE_DIM, HandLandmarks, Landmark, LandmarkIndex
from .tasks import (
    CaptureRequest,
    EvaluateRequest,
    InferenceRequest,
    SaveRequest,
    SelectLabelRequest,
    TaskResult,
    ToggleBackgroundRequest,
    TrainRequest,
)

__all__ = [
    "EventBus",
    "Events",
    "ClassifierBackend",
    "LandmarkSource",
    "Prediction",
    "CaptureRequest",
    "EvaluateRequest",
    "InferenceRequest",
    "SaveRequest",
    "SelectLabelRequest",
    "TaskResult",
    "ToggleBackgroundRequest",
    "TrainRequest",
    "FEATURE_DIM",
    "HandLandmarks",
    "Landmark",
    "LandmarkIndex",
]
