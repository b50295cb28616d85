"""
Hand Pose Trainer - Interactive Application
=============================================

Webcam -> MediaPipe hand landmarks -> labelled samples -> PyTorch
classifier, driven from the keyboard in an OpenCV window.
"""

import argparse
import logging
import time
from pathlib import Path
from typing import Optional

import cv2

from .capture.camera import Camera, CameraConfig
from .core.events import Events
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
from .detection.hand_detector import HandDetector, HandDetectorConfig
from .models.backend import ClassifierConfig, TorchClassifierBackend
from .session import SessionConfig, TrainingSession
from .utils.config import Config
from .utils.logger import TrainingLogger, setup_logging
from .utils.visualization import Visualizer, VisualizerConfig

logger = logging.getLogger(__name__)

WINDOW_NAME = "Hand Pose Trainer"
MESSAGE_SECONDS = 3.0


def build_session(config: Config, detector=None) -> TrainingSession:
    """Wire a TrainingSession from configuration."""
    seed = config.get("training.seed", 42)

    classifier_dict = dict(config.classifier)
    classifier_dict.setdefault("seed", seed)
    backend = TorchClassifierBackend(ClassifierConfig.from_dict(classifier_dict))

    session_config = SessionConfig.from_dict({
        "train_ratio": config.get("training.train_ratio", 0.8),
        "seed": seed,
        "epochs": config.get("classifier.epochs", 50),
        "model_dir": config.get("model.directory", "models"),
        "model_name": config.get("model.name", "model"),
    })
    return TrainingSession(detector, backend, session_config)


class HandPoseTrainerApp:
    """
    Main application: camera loop plus keyboard controls.

    Keys:
        1-9     select class label
        SPACE   add current pose as a sample
        t       train (background thread)
        d       classify current pose once
        e       evaluate on held-out samples
        s       save trained model
        w       write dataset to disk
        b       toggle background video
        q/ESC   quit
    """

    KEY_REQUESTS = {
        ord(" "): CaptureRequest(),
        ord("t"): TrainRequest(background=True),
        ord("d"): InferenceRequest(),
        ord("e"): EvaluateRequest(),
        ord("s"): SaveRequest(),
        ord("b"): ToggleBackgroundRequest(),
    }

    def __init__(
        self,
        config: Config,
        camera: Optional[Camera] = None,
        detector: Optional[HandDetector] = None,
        session: Optional[TrainingSession] = None,
    ):
        self.config = config
        self.labels = config.labels
        self.camera = camera or Camera(CameraConfig.from_dict(config.camera))
        self.detector = detector or HandDetector(HandDetectorConfig.from_dict(config.mediapipe))
        self.session = session or build_session(config, self.detector)
        self.visualizer = Visualizer(VisualizerConfig.from_dict(config.visualization))
        self.dataset_path = config.get("dataset.path", "data/samples.json")

        self._running = False
        self._message = ""
        self._message_time = 0.0

        self.session.events.subscribe(Events.TRAINING_COMPLETE, self._on_training_complete)
        self.session.events.subscribe(Events.TRAINING_FAILED, self._on_training_failed)
        self.training_log = TrainingLogger().attach(self.session.events)

        if self.labels:
            self.session.select_label(self.labels[0])

    def start(self) -> bool:
        logger.info("Starting Hand Pose Trainer...")
        if not self.camera.start():
            logger.error("Failed to start camera")
            return False
        if not self.detector.start():
            logger.error("Failed to start hand detector")
            self.camera.stop()
            return False
        self._running = True
        return True

    def stop(self) -> None:
        self._running = False
        self.camera.stop()
        self.detector.stop()
        cv2.destroyAllWindows()
        logger.info("Hand Pose Trainer stopped")

    def run(self) -> None:
        if not self.start():
            return
        try:
            self._main_loop()
        finally:
            self.stop()

    def _main_loop(self) -> None:
        while self._running:
            frame = self.camera.read()
            if frame is None:
                if cv2.waitKey(5) & 0xFF in (ord("q"), 27):
                    break
                continue

            hands = self.session.process_frame(frame.rgb, frame.timestamp_ms)

            display = self.visualizer.canvas(frame.image, self.session.background_visible)
            self.visualizer.draw_hands(display, hands)
            self.visualizer.draw_status(
                display,
                self.session.selected_label,
                self.session.training_set.counts(),
                self.session.last_predictions,
                training=self.session.is_training,
                message=self.message,
            )
            self.visualizer.draw_help(display, self.labels)
            cv2.imshow(WINDOW_NAME, display)

            key = cv2.waitKey(1) & 0xFF
            if not self.handle_key(key):
                self._running = False

    def handle_key(self, key: int) -> bool:
        """Translate one key press into a session request. False means quit."""
        if key in (ord("q"), 27):
            return False

        if ord("1") <= key <= ord("9"):
            index = key - ord("1")
            if index < len(self.labels):
                self._report(self.session.handle(SelectLabelRequest(self.labels[index])),
                             "Label: {}")
            return True

        if key == ord("w"):
            self._report(self.session.save_dataset(self.dataset_path), "Dataset written to {}")
            return True

        request = self.KEY_REQUESTS.get(key)
        if request is None:
            return True

        if isinstance(request, TrainRequest):
            # Set first: the training thread may report before handle() returns
            self.set_message("Training...")

        result = self.session.handle(request)
        if isinstance(request, CaptureRequest):
            self._report(result, "Sample added ({})")
        elif isinstance(request, TrainRequest):
            self._report(result, None)
        elif isinstance(request, InferenceRequest):
            self._report(result, None)
        elif isinstance(request, EvaluateRequest):
            if result:
                report = result.value
                self.set_message("Accuracy %.0f%% on %d samples"
                                 % (report.accuracy * 100, len(report.outcomes)))
            else:
                self._report(result, None)
        elif isinstance(request, SaveRequest):
            self._report(result, "Model saved")
        return True

    @property
    def message(self) -> str:
        if self._message and time.time() - self._message_time < MESSAGE_SECONDS:
            return self._message
        return ""

    def set_message(self, text: str) -> None:
        self._message = text
        self._message_time = time.time()

    def _report(self, result: TaskResult, success_format: Optional[str]) -> None:
        if not result:
            self.set_message(result.error)
        elif success_format:
            self.set_message(success_format.format(result.value))

    def _on_training_complete(self, losses, split, **kwargs):
        final = losses[-1] if losses else float("nan")
        self.set_message("Done! loss=%.4f, %d held out" % (final, split.test_size))

    def _on_training_failed(self, error, **kwargs):
        self.set_message("Training failed: %s" % error)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Label hand poses from a webcam and train a classifier on them",
    )
    parser.add_argument("--config", "-c", default="config/config.yaml",
                        help="Path to configuration file")
    parser.add_argument("--labels", nargs="+",
                        help="Class labels, selectable with keys 1-9")
    parser.add_argument("--dataset",
                        help="Preload samples from a saved dataset JSON")
    parser.add_argument("--model-dir",
                        help="Directory for saved models")
    parser.add_argument("--load-model", action="store_true",
                        help="Load a previously saved model at startup")
    parser.add_argument("--epochs", type=int,
                        help="Training epochs")
    parser.add_argument("--seed", type=int,
                        help="Seed for the train/test split and training")
    parser.add_argument("--debug", "-d", action="store_true",
                        help="Enable debug logging")
    return parser.parse_args(argv)


def config_from_args(args) -> Config:
    config = Config.load(args.config)

    overrides = {}
    if args.labels:
        overrides["labels"] = args.labels
    if args.model_dir:
        overrides["model"] = {"directory": args.model_dir}
    if args.epochs is not None:
        overrides["classifier"] = {"epochs": args.epochs}
    if args.seed is not None:
        overrides["training"] = {"seed": args.seed}
    if args.dataset:
        overrides["dataset"] = {"path": args.dataset}
    if args.debug:
        overrides["logging"] = {"level": "DEBUG"}
    return config.override(overrides)


def main(argv=None):
    args = parse_args(argv)
    config = config_from_args(args)
    setup_logging(config.get("logging.level", "INFO"), config.get("logging.file"))

    app = HandPoseTrainerApp(config)

    if args.dataset and Path(args.dataset).exists():
        result = app.session.load_dataset(args.dataset)
        if result:
            logger.info("Preloaded %d samples from %s", result.value, args.dataset)
    if args.load_model:
        result = app.session.load_model()
        if not result:
            logger.warning("Could not load model: %s", result.error)

    app.run()


if __name__ == "__main__":
    main()
