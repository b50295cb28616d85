"""
Training Session
=================

Explicit state for one labelling/training run: the latest detected
hands, the selected label, the sample store, the current train/test
split and the classifier backend.

Every user action is a request answered with a TaskResult, so the
interactive front-end never has to share closures with the logic.
"""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .core.events import EventBus, Events
from .core.interfaces import ClassifierBackend, LandmarkSource, Prediction
from .core.tasks import (
    CaptureRequest,
    EvaluateRequest,
    InferenceRequest,
    SaveRequest,
    SelectLabelRequest,
    TaskResult,
    ToggleBackgroundRequest,
    TrainRequest,
)
from .core.types import HandLandmarks
from .data.sample_store import TrainingSet
from .data.split import DEFAULT_TRAIN_RATIO, SplitResult, split_training_data
from .evaluation.evaluate import EvaluationReport, evaluate
from .features.normalization import normalize_hand

logger = logging.getLogger(__name__)

NO_HAND = "no hand detected"
NOT_TRAINED = "model is not trained"
TRAINING_BUSY = "training already in progress"


@dataclass
class SessionConfig:
    """Split, training and persistence settings for a session."""
    train_ratio: float = DEFAULT_TRAIN_RATIO
    seed: Optional[int] = 42
    epochs: int = 50
    model_dir: str = "models"
    model_name: str = "model"

    @classmethod
    def from_dict(cls, config: dict) -> "SessionConfig":
        return cls(
            train_ratio=config.get("train_ratio", DEFAULT_TRAIN_RATIO),
            seed=config.get("seed", 42),
            epochs=config.get("epochs", 50),
            model_dir=config.get("model_dir", "models"),
            model_name=config.get("model_name", "model"),
        )


class TrainingSession:
    """
    Owns all mutable state of the labelling/training workflow.

    Example:
        >>> session = TrainingSession(detector, TorchClassifierBackend())
        >>> session.process_frame(rgb_image)
        >>> session.select_label("happy")
        >>> session.capture()
        >>> result = session.train()
        >>> session.infer().value[0].label
    """

    def __init__(
        self,
        source: Optional[LandmarkSource],
        backend: ClassifierBackend,
        config: Optional[SessionConfig] = None,
        training_set: Optional[TrainingSet] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.config = config or SessionConfig()
        self._source = source
        self._backend = backend
        self._training_set = training_set if training_set is not None else TrainingSet()
        self._bus = event_bus or EventBus()

        self._hands: List[HandLandmarks] = []
        self._selected_label: Optional[str] = None
        self._background_visible = True

        self._split: Optional[SplitResult] = None
        self._last_predictions: List[Prediction] = []
        self._last_report: Optional[EvaluationReport] = None

        self._train_lock = threading.Lock()
        self._training_thread: Optional[threading.Thread] = None

        self._handlers = {
            SelectLabelRequest: lambda r: self.select_label(r.label),
            ToggleBackgroundRequest: lambda r: self.toggle_background(),
            CaptureRequest: lambda r: self.capture(r.label),
            TrainRequest: lambda r: self.train_async(r.epochs) if r.background else self.train(r.epochs),
            InferenceRequest: lambda r: self.infer(),
            SaveRequest: lambda r: self.save(r.name, r.directory),
            EvaluateRequest: lambda r: self.evaluate(),
        }

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def events(self) -> EventBus:
        return self._bus

    @property
    def backend(self) -> ClassifierBackend:
        return self._backend

    @property
    def training_set(self) -> TrainingSet:
        return self._training_set

    @property
    def hands(self) -> List[HandLandmarks]:
        return list(self._hands)

    @property
    def selected_label(self) -> Optional[str]:
        return self._selected_label

    @property
    def background_visible(self) -> bool:
        return self._background_visible

    @property
    def split(self) -> Optional[SplitResult]:
        return self._split

    @property
    def is_training(self) -> bool:
        return self._train_lock.locked()

    @property
    def last_predictions(self) -> List[Prediction]:
        return list(self._last_predictions)

    @property
    def last_report(self) -> Optional[EvaluationReport]:
        return self._last_report

    # ------------------------------------------------------------------
    # Frame input
    # ------------------------------------------------------------------

    def process_frame(self, image: np.ndarray, timestamp_ms: Optional[int] = None) -> List[HandLandmarks]:
        """Run landmark detection on an RGB frame and keep the result."""
        if self._source is None:
            raise RuntimeError("Session has no landmark source")
        self.set_hands(self._source.detect(image, timestamp_ms))
        return self.hands

    def set_hands(self, hands: Optional[List[HandLandmarks]]) -> None:
        self._hands = list(hands or [])

    def current_features(self) -> Optional[np.ndarray]:
        return normalize_hand(self._hands)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def handle(self, request) -> TaskResult:
        """Dispatch a request object from core.tasks."""
        handler = self._handlers.get(type(request))
        if handler is None:
            raise TypeError("Unsupported request: %r" % (request,))
        return handler(request)

    def select_label(self, label: str) -> TaskResult:
        if not label or not str(label).strip():
            return TaskResult.failure("label must not be empty")

        self._selected_label = str(label)
        logger.info("Selected label: %s", self._selected_label)
        self._bus.emit(Events.LABEL_SELECTED, label=self._selected_label)
        return TaskResult.success(self._selected_label)

    def toggle_background(self) -> TaskResult:
        self._background_visible = not self._background_visible
        logger.debug("Background visible: %s", self._background_visible)
        return TaskResult.success(self._background_visible)

    def capture(self, label: Optional[str] = None) -> TaskResult:
        """Append the current pose under label (or the selected label)."""
        label = label or self._selected_label
        if not label:
            return TaskResult.failure("no label selected")

        features = self.current_features()
        if features is None:
            logger.debug("Capture skipped: %s", NO_HAND)
            return TaskResult.failure(NO_HAND)

        count = self._training_set.add(label, features)
        logger.info("Added sample for '%s' (%d total for label)", label, count)
        self._bus.emit(Events.SAMPLE_ADDED, label=label, count=count)
        return TaskResult.success(count)

    def train(self, epochs: Optional[int] = None) -> TaskResult:
        """Split, load the backend with the training subset and train."""
        if not self._train_lock.acquire(blocking=False):
            return TaskResult.failure(TRAINING_BUSY)
        try:
            return self._run_training(epochs)
        finally:
            self._train_lock.release()

    def train_async(self, epochs: Optional[int] = None) -> TaskResult:
        """Train on a daemon thread; completion is reported via events."""
        if not self._train_lock.acquire(blocking=False):
            return TaskResult.failure(TRAINING_BUSY)

        def worker():
            try:
                self._run_training(epochs)
            finally:
                self._train_lock.release()

        self._training_thread = threading.Thread(target=worker, name="training", daemon=True)
        self._training_thread.start()
        return TaskResult.success(self._training_thread)

    def wait_for_training(self, timeout: Optional[float] = None) -> bool:
        """Block until a background training run ends; False on timeout."""
        thread = self._training_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _run_training(self, epochs: Optional[int]) -> TaskResult:
        snapshot = self._training_set.snapshot()
        if not any(snapshot.values()):
            return self._training_failed("training set is empty")

        try:
            split = split_training_data(snapshot, self.config.train_ratio, self.config.seed)
        except ValueError as e:
            return self._training_failed(str(e))
        if split.train_size == 0:
            return self._training_failed("not enough samples to train")

        epochs = self.config.epochs if epochs is None else epochs
        self._bus.emit(Events.TRAINING_STARTED, train_size=split.train_size,
                       test_size=split.test_size, epochs=epochs)

        try:
            self._backend.clear_data()
            for label, samples in split.train.items():
                for sample in samples:
                    self._backend.add_data(sample, label)
            self._backend.normalize_data()
            losses = self._backend.train(epochs)
        except Exception as e:
            logger.exception("Training failed")
            self._bus.emit(Events.TRAINING_FAILED, error=str(e))
            return TaskResult.failure("training failed: %s" % e)

        # Held-out set must always match the model that is live
        self._split = split
        logger.info("Training complete (%d epochs, %d train / %d test samples)",
                    epochs, split.train_size, split.test_size)
        self._bus.emit(Events.TRAINING_COMPLETE, losses=losses, split=split)
        return TaskResult.success(losses)

    def _training_failed(self, error: str) -> TaskResult:
        logger.warning("Cannot train: %s", error)
        self._bus.emit(Events.TRAINING_FAILED, error=error)
        return TaskResult.failure(error)

    def _model_unavailable(self) -> Optional[TaskResult]:
        """Failure while the model is being replaced or before it exists."""
        if self.is_training:
            return TaskResult.failure(TRAINING_BUSY)
        if not self._backend.is_trained:
            return TaskResult.failure(NOT_TRAINED)
        return None

    def infer(self) -> TaskResult:
        """Classify the current pose; value is the ranked prediction list."""
        unavailable = self._model_unavailable()
        if unavailable is not None:
            return unavailable

        features = self.current_features()
        if features is None:
            return TaskResult.failure(NO_HAND)

        predictions = self._backend.classify(features)
        self._last_predictions = predictions
        if predictions:
            logger.info("Prediction: %s (%.2f)", predictions[0].label, predictions[0].confidence)
        self._bus.emit(Events.PREDICTION, predictions=predictions)
        return TaskResult.success(predictions)

    def save(self, name: Optional[str] = None, directory: Optional[str] = None) -> TaskResult:
        unavailable = self._model_unavailable()
        if unavailable is not None:
            return unavailable

        name = name or self.config.model_name
        directory = directory or self.config.model_dir
        try:
            paths = self._backend.save(name, directory)
        except Exception as e:
            logger.exception("Saving model failed")
            return TaskResult.failure("save failed: %s" % e)

        self._bus.emit(Events.MODEL_SAVED, paths=paths)
        return TaskResult.success(paths)

    def load_model(self, name: Optional[str] = None, directory: Optional[str] = None) -> TaskResult:
        if self.is_training:
            return TaskResult.failure(TRAINING_BUSY)

        name = name or self.config.model_name
        directory = directory or self.config.model_dir
        try:
            self._backend.load(name, directory)
        except (OSError, KeyError, ValueError) as e:
            logger.error("Loading model failed: %s", e)
            return TaskResult.failure("load failed: %s" % e)
        return TaskResult.success(directory)

    def evaluate(self) -> TaskResult:
        """Classify every held-out sample and build a confusion matrix."""
        unavailable = self._model_unavailable()
        if unavailable is not None:
            return unavailable
        if self._split is None or self._split.test_size == 0:
            return TaskResult.failure("no held-out samples; train first")

        try:
            report = evaluate(self._backend, self._split.test)
        except Exception as e:
            logger.exception("Evaluation failed")
            return TaskResult.failure("evaluation failed: %s" % e)

        report.matrix.log()
        self._last_report = report
        self._bus.emit(Events.EVALUATION_COMPLETE, report=report)
        return TaskResult.success(report)

    # ------------------------------------------------------------------
    # Dataset persistence
    # ------------------------------------------------------------------

    def save_dataset(self, path: str) -> TaskResult:
        try:
            saved = self._training_set.save(path)
        except OSError as e:
            logger.error("Saving dataset failed: %s", e)
            return TaskResult.failure("save failed: %s" % e)
        return TaskResult.success(str(saved))

    def load_dataset(self, path: str) -> TaskResult:
        """Merge samples from a saved dataset into the current store."""
        try:
            loaded = TrainingSet.load(path)
        except (OSError, ValueError) as e:
            logger.error("Loading dataset failed: %s", e)
            return TaskResult.failure("load failed: %s" % e)

        for label, samples in loaded.items():
            self._training_set.extend(label, samples)
        return TaskResult.success(len(loaded))
