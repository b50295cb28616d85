"""
Hand Detection Module
======================

Wraps the MediaPipe HandLandmarker (Tasks API) as a LandmarkSource.
Each detected hand is returned as 21 ordered normalized landmarks.
"""

import logging
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from ..core.types import HandLandmarks, Landmark

logger = logging.getLogger(__name__)

HAND_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)
DEFAULT_MODEL_PATH = Path("models") / "hand_landmarker.task"


@dataclass
class HandDetectorConfig:
    """Configuration for the MediaPipe hand landmarker."""
    model_path: str = ""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    running_mode: str = "VIDEO"  # IMAGE or VIDEO

    @classmethod
    def from_dict(cls, d: dict) -> "HandDetectorConfig":
        return cls(
            model_path=d.get("model_path", ""),
            max_num_hands=d.get("max_num_hands", 2),
            min_detection_confidence=d.get("min_detection_confidence", 0.5),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.5),
            min_presence_confidence=d.get("min_presence_confidence", 0.5),
            running_mode=d.get("running_mode", "VIDEO"),
        )


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading hand landmarker model to {save_path}...")
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete")
        return True
    except OSError as e:
        logger.error(f"Failed to download model: {e}")
        return False


class HandDetector:
    """
    LandmarkSource backed by the MediaPipe HandLandmarker.

    Example:
        >>> with HandDetector(HandDetectorConfig()) as detector:
        ...     hands = detector.detect(rgb_image)  # RGB format!
    """

    def __init__(self, config: Optional[HandDetectorConfig] = None):
        self.config = config or HandDetectorConfig()
        self._landmarker: Optional[vision.HandLandmarker] = None
        self._frame_timestamp = 0

    @property
    def is_running(self) -> bool:
        return self._landmarker is not None

    def start(self) -> bool:
        """Create the landmarker, downloading the model on first use."""
        model_path = Path(self.config.model_path or DEFAULT_MODEL_PATH)

        if not model_path.exists():
            if not download_model(HAND_LANDMARKER_MODEL_URL, model_path):
                logger.error("Could not obtain hand landmarker model")
                return False

        if self.config.running_mode == "IMAGE":
            running_mode = vision.RunningMode.IMAGE
        else:
            running_mode = vision.RunningMode.VIDEO

        options = vision.HandLandmarkerOptions(
            base_options=python.BaseOptions(model_asset_path=str(model_path)),
            running_mode=running_mode,
            num_hands=self.config.max_num_hands,
            min_hand_detection_confidence=self.config.min_detection_confidence,
            min_hand_presence_confidence=self.config.min_presence_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
        )

        try:
            self._landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error(f"Failed to initialize HandLandmarker: {e}")
            return False

        logger.info(f"HandLandmarker initialized with model: {model_path}")
        logger.info(f"Running mode: {self.config.running_mode}, Max hands: {self.config.max_num_hands}")
        return True

    def stop(self) -> None:
        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None
            logger.info("HandLandmarker stopped")

    def detect(self, image: np.ndarray, timestamp_ms: Optional[int] = None) -> List[HandLandmarks]:
        """
        Detect hands in an RGB image.

        Args:
            image: RGB image as numpy array (H, W, 3)
            timestamp_ms: Frame timestamp, synthesized at ~30 FPS when omitted

        Returns:
            Zero or more hands in detector order
        """
        if self._landmarker is None:
            logger.warning("HandLandmarker not initialized. Call start() first.")
            return []

        height, width = image.shape[:2]
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image)

        if self.config.running_mode == "IMAGE":
            result = self._landmarker.detect(mp_image)
        else:
            if timestamp_ms is None:
                self._frame_timestamp += 33
                timestamp_ms = self._frame_timestamp
            else:
                # VIDEO mode rejects non-increasing timestamps
                timestamp_ms = max(timestamp_ms, self._frame_timestamp + 1)
                self._frame_timestamp = timestamp_ms
            result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        return self._convert_result(result, width, height)

    @staticmethod
    def _convert_result(result, width: int, height: int) -> List[HandLandmarks]:
        hands = []
        for i, hand_landmarks in enumerate(result.hand_landmarks):
            handedness = "Right"
            confidence = 0.0
            if result.handedness and len(result.handedness) > i:
                handedness = result.handedness[i][0].category_name
                confidence = result.handedness[i][0].score

            hands.append(HandLandmarks(
                landmarks=[Landmark(x=lm.x, y=lm.y, z=lm.z) for lm in hand_landmarks],
                handedness=handedness,
                confidence=confidence,
                image_width=width,
                image_height=height,
            ))
        return hands

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
