"""
Visualization Module
=====================

Overlays for the trainer window: hand skeletons, the selected label,
per-label sample counts, the last prediction and status messages.
"""

import cv2
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.interfaces import Prediction
from ..core.types import HAND_CONNECTIONS, HandLandmarks, LandmarkIndex


@dataclass
class VisualizerConfig:
    """Visualization settings (colors are BGR)."""
    connection_color: Tuple[int, int, int] = (255, 0, 0)   # Blue
    landmark_color: Tuple[int, int, int] = (0, 255, 0)     # Green
    text_color: Tuple[int, int, int] = (0, 255, 255)       # Yellow
    warning_color: Tuple[int, int, int] = (0, 0, 255)      # Red
    connection_thickness: int = 2
    landmark_radius: int = 4
    font_scale: float = 0.6
    font_thickness: int = 1

    @classmethod
    def from_dict(cls, config: dict) -> "VisualizerConfig":
        colors = config.get("colors", {})
        return cls(
            connection_color=tuple(colors.get("connections", [255, 0, 0])),
            landmark_color=tuple(colors.get("landmarks", [0, 255, 0])),
            text_color=tuple(colors.get("text", [0, 255, 255])),
            warning_color=tuple(colors.get("warning", [0, 0, 255])),
            connection_thickness=config.get("connection_thickness", 2),
            landmark_radius=config.get("landmark_radius", 4),
            font_scale=config.get("font_scale", 0.6),
            font_thickness=config.get("font_thickness", 1),
        )


class Visualizer:
    """Draws trainer overlays onto BGR images in place."""

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()
        self._font = cv2.FONT_HERSHEY_SIMPLEX

    def canvas(self, image: np.ndarray, background_visible: bool) -> np.ndarray:
        """Copy of the frame, or a black canvas when the video is hidden."""
        if background_visible:
            return image.copy()
        return np.zeros_like(image)

    def draw_hands(self, image: np.ndarray, hands: Sequence[HandLandmarks]) -> np.ndarray:
        height, width = image.shape[:2]
        for hand in hands:
            if len(hand) == 0:
                continue
            # Landmarks are normalized, so draw at the canvas size
            hand = HandLandmarks(hand.landmarks, hand.handedness, hand.confidence, width, height)
            for start_idx, end_idx in HAND_CONNECTIONS:
                if end_idx >= len(hand):
                    continue
                cv2.line(image, hand.get_pixel(LandmarkIndex(start_idx)),
                         hand.get_pixel(LandmarkIndex(end_idx)),
                         self.config.connection_color, self.config.connection_thickness)
            for lm in hand.landmarks:
                cv2.circle(image, lm.to_pixel(width, height),
                           self.config.landmark_radius, self.config.landmark_color, -1)
        return image

    def draw_status(
        self,
        image: np.ndarray,
        selected_label: Optional[str],
        counts: Dict[str, int],
        predictions: List[Prediction],
        training: bool = False,
        message: str = "",
    ) -> np.ndarray:
        y = 25
        label_text = selected_label if selected_label else "-"
        self._put(image, "Label: %s" % label_text, (10, y), self.config.text_color)

        for label, count in counts.items():
            y += 20
            self._put(image, "%s: %d" % (label, count), (10, y), (255, 255, 255))

        if predictions:
            best = predictions[0]
            y += 28
            self._put(image, "Pose: %s (%.0f%%)" % (best.label, best.confidence * 100),
                      (10, y), self.config.landmark_color)

        if training:
            self._put(image, "TRAINING...", (image.shape[1] - 140, 25), self.config.warning_color)

        if message:
            self._put(image, message, (10, image.shape[0] - 15), self.config.text_color)

        return image

    def draw_help(self, image: np.ndarray, labels: Sequence[str]) -> np.ndarray:
        keys = "  ".join("%d:%s" % (i + 1, label) for i, label in enumerate(labels[:9]))
        hint = "SPACE add  t train  d detect  e test  s save  w dataset  b video  q quit"
        self._put(image, keys, (10, image.shape[0] - 55), (200, 200, 200))
        self._put(image, hint, (10, image.shape[0] - 35), (200, 200, 200))
        return image

    def _put(self, image, text, origin, color):
        cv2.putText(image, text, origin, self._font, self.config.font_scale,
                    color, self.config.font_thickness, cv2.LINE_AA)
