"""
Request messages understood by TrainingSession.handle().

Every user action is expressed as one of these requests and answered
with a TaskResult instead of raising for expected conditions.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TaskResult:
    """Outcome of a session request."""
    ok: bool
    value: Any = None
    error: str = ""

    @classmethod
    def success(cls, value: Any = None) -> "TaskResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "TaskResult":
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class SelectLabelRequest:
    label: str


@dataclass(frozen=True)
class ToggleBackgroundRequest:
    pass


@dataclass(frozen=True)
class CaptureRequest:
    """Add the current pose as a sample; label defaults to the selected one."""
    label: Optional[str] = None


@dataclass(frozen=True)
class TrainRequest:
    epochs: Optional[int] = None
    background: bool = False


@dataclass(frozen=True)
class InferenceRequest:
    pass


@dataclass(frozen=True)
class SaveRequest:
    name: Optional[str] = None
    directory: Optional[str] = None


@dataclass(frozen=True)
class EvaluateRequest:
    pass
