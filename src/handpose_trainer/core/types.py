"""
Shared domain types for hand landmarks.

Kept free of detector imports so feature code and tests can build
hands without MediaPipe installed.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, NamedTuple, Tuple

import numpy as np

NUM_LANDMARKS = 21
NUM_AXES = 3
FEATURE_DIM = NUM_LANDMARKS * NUM_AXES


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# Skeleton edges used when drawing a hand
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # Index
    (5, 9), (9, 10), (10, 11), (11, 12),     # Middle
    (9, 13), (13, 14), (14, 15), (15, 16),   # Ring
    (13, 17), (17, 18), (18, 19), (19, 20),  # Pinky
    (0, 17),                                 # Palm base
]


class Landmark(NamedTuple):
    """A single landmark in normalized image coordinates."""
    x: float  # 0.0 to 1.0, by image width
    y: float  # 0.0 to 1.0, by image height
    z: float  # depth relative to wrist

    def to_pixel(self, width: int, height: int) -> Tuple[int, int]:
        return (int(self.x * width), int(self.y * height))


@dataclass
class HandLandmarks:
    """Landmarks of one detected hand plus detector metadata."""
    landmarks: List[Landmark]
    handedness: str = "Right"
    confidence: float = 0.0
    image_width: int = 640
    image_height: int = 480

    def get(self, index: LandmarkIndex) -> Landmark:
        return self.landmarks[index]

    def get_pixel(self, index: LandmarkIndex) -> Tuple[int, int]:
        return self.get(index).to_pixel(self.image_width, self.image_height)

    @property
    def wrist(self) -> Landmark:
        return self.get(LandmarkIndex.WRIST)

    def to_numpy(self) -> np.ndarray:
        """Landmarks as an (N, 3) array; N is 21 for a complete hand."""
        return np.array([[lm.x, lm.y, lm.z] for lm in self.landmarks],
                        dtype=np.float32).reshape(-1, NUM_AXES)

    @classmethod
    def from_numpy(cls, array, **kwargs) -> "HandLandmarks":
        """Build a hand from an (N, 3) coordinate array."""
        points = np.asarray(array, dtype=np.float32).reshape(-1, NUM_AXES)
        landmarks = [Landmark(float(x), float(y), float(z)) for x, y, z in points]
        return cls(landmarks=landmarks, **kwargs)

    def __len__(self) -> int:
        return len(self.landmarks)
