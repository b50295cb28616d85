"""
Landmark normalization: 21-point hand -> translation-invariant vector.

Every landmark is expressed relative to the wrist, so the same pose
produces the same vector wherever the hand sits in the frame.

Feature layout (63 dimensions, landmark-major):
    [x0 - xw, y0 - yw, z0 - zw, x1 - xw, y1 - yw, z1 - zw, ...]

The wrist itself (landmark 0) therefore always contributes (0, 0, 0).
"""

from typing import Optional, Sequence

import numpy as np

from ..core.types import FEATURE_DIM, NUM_AXES, NUM_LANDMARKS, HandLandmarks, LandmarkIndex


def normalize_landmarks(landmarks) -> np.ndarray:
    """Convert (21, 3) landmarks -> (63,) wrist-relative vector.

    Args:
        landmarks: array-like of shape (21, 3), or a flat (63,) array

    Returns:
        np.ndarray of shape (63,), dtype float32
    """
    points = np.asarray(landmarks, dtype=np.float32)
    if points.shape == (FEATURE_DIM,):
        points = points.reshape(NUM_LANDMARKS, NUM_AXES)
    if points.shape != (NUM_LANDMARKS, NUM_AXES):
        raise ValueError("Expected (21, 3) landmarks, got %s" % str(points.shape))

    wrist = points[LandmarkIndex.WRIST]
    return (points - wrist).reshape(FEATURE_DIM)


def normalize_hand(hands: Optional[Sequence[HandLandmarks]]) -> Optional[np.ndarray]:
    """Feature vector for the first detected hand of a frame.

    Only ``hands[0]`` is used even when more hands are tracked.

    Returns:
        (63,) float32 vector, or None when there is no hand (no hands,
        or a hand with no landmarks).
    """
    if not hands:
        return None

    hand = hands[0]
    if hand is None or len(hand) == 0:
        return None

    return normalize_landmarks(hand.to_numpy())
