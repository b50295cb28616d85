"""Landmark -> feature vector conversion."""
from .normalization import normalize_hand, normalize_landmarks

__all__ = ["normalize_hand", "normalize_landmarks"]
