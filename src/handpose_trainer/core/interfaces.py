"""
Narrow interfaces to the two external collaborators.

The session only talks to a hand-landmark detector and a classifier
trainer through these protocols, so normalization, splitting and the
confusion matrix can be exercised without MediaPipe or PyTorch.
"""

from typing import List, NamedTuple, Optional, Protocol, Sequence

import numpy as np

from .types import HandLandmarks


class Prediction(NamedTuple):
    """One entry of a ranked classification result."""
    label: str
    confidence: float


class LandmarkSource(Protocol):
    """Produces zero or more hands, each 21 ordered landmarks, per frame."""

    def detect(self, image: np.ndarray, timestamp_ms: Optional[int] = None) -> List[HandLandmarks]:
        ...


class ClassifierBackend(Protocol):
    """Accumulates labelled vectors, trains on them and classifies."""

    @property
    def is_trained(self) -> bool:
        ...

    def add_data(self, features: Sequence[float], label: str) -> None:
        ...

    def clear_data(self) -> None:
        ...

    def normalize_data(self) -> None:
        ...

    def train(self, epochs: Optional[int] = None) -> List[float]:
        """Run a fixed number of epochs, return per-epoch loss."""
        ...

    def classify(self, features: Sequence[float]) -> List[Prediction]:
        """Return predictions sorted by descending confidence."""
        ...

    def save(self, name: str, directory: str) -> List[str]:
        ...

    def load(self, name: str, directory: str) -> None:
        ...
