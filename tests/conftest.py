"""
Shared fixtures: synthetic hands and in-memory collaborators.
"""

import threading

import numpy as np
import pytest

from handpose_trainer.core.interfaces import Prediction
from handpose_trainer.core.types import HandLandmarks


def create_mock_hand(offset=(0.0, 0.0, 0.0), wrist=(0.5, 0.5, 0.0), spread=0.01):
    """
    Create 21 landmarks fanning out from the wrist.

    Args:
        offset: added to every landmark except the wrist, to vary the pose
        wrist: wrist position
        spread: distance step between consecutive landmarks
    """
    points = [list(wrist)]
    for i in range(1, 21):
        points.append([
            wrist[0] + spread * i + offset[0],
            wrist[1] - spread * (i % 5) + offset[1],
            wrist[2] + 0.001 * i + offset[2],
        ])
    return HandLandmarks.from_numpy(np.array(points), handedness="Right", confidence=0.9)


class FakeLandmarkSource:
    """Returns a scripted list of hands for every frame."""

    def __init__(self, hands=None):
        self.hands = hands or []
        self.calls = []

    def detect(self, image, timestamp_ms=None):
        self.calls.append(timestamp_ms)
        return list(self.hands)


class FakeBackend:
    """Nearest-centroid classifier with the ClassifierBackend surface."""

    def __init__(self, fail_on_train=False):
        self.fail_on_train = fail_on_train
        self.data = []
        self.normalized = False
        self.trained_epochs = None
        self.saved = []
        self._centroids = {}

    @property
    def is_trained(self):
        return bool(self._centroids)

    def add_data(self, features, label):
        self.data.append((np.asarray(features, dtype=np.float32), label))

    def clear_data(self):
        self.data = []
        self.normalized = False

    def normalize_data(self):
        self.normalized = True

    def train(self, epochs=None):
        if self.fail_on_train:
            raise RuntimeError("backend exploded")
        grouped = {}
        for vector, label in self.data:
            grouped.setdefault(label, []).append(vector)
        self._centroids = {label: np.mean(v, axis=0) for label, v in grouped.items()}
        self.trained_epochs = epochs
        return [1.0 / (i + 1) for i in range(epochs or 1)]

    def classify(self, features):
        vector = np.asarray(features, dtype=np.float32)
        distances = {label: float(np.linalg.norm(vector - c)) for label, c in self._centroids.items()}
        scores = {label: 1.0 / (1.0 + d) for label, d in distances.items()}
        total = sum(scores.values())
        ranked = [Prediction(label, s / total) for label, s in scores.items()]
        return sorted(ranked, key=lambda p: p.confidence, reverse=True)

    def save(self, name, directory):
        paths = ["%s/%s.json" % (directory, name), "%s/%s.weights.pth" % (directory, name)]
        self.saved.append(paths)
        return paths

    def load(self, name, directory):
        raise OSError("nothing saved")


class GatedBackend(FakeBackend):
    """FakeBackend whose train() blocks until release is set."""

    def __init__(self):
        super().__init__()
        self.gated = False
        self.started = threading.Event()
        self.release = threading.Event()

    def train(self, epochs=None):
        if self.gated:
            self.started.set()
            self.release.wait(5.0)
        return super().train(epochs)


@pytest.fixture
def make_hand():
    return create_mock_hand


@pytest.fixture
def open_hand():
    return create_mock_hand(offset=(0.0, -0.2, 0.0))


@pytest.fixture
def fist_hand():
    return create_mock_hand(offset=(0.2, 0.1, 0.0))


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def fake_source():
    return FakeLandmarkSource()
