"""
Logging setup, timing helpers and the training event log.
"""

import os
import logging
import logging.handlers
import time
from functools import wraps

from ..core.events import Events


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure console (and optional rotating file) logging."""
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    level_value = getattr(logging, str(level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level_value)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


def log_timing(func):
    """Decorator to log function execution time at DEBUG."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("%s took %.2fms", func.__name__, elapsed)
        return result

    return wrapper


class TrainingLogger:
    """Logs session events on a dedicated logger and keeps a run history.

    Example:
        >>> training_log = TrainingLogger()
        >>> training_log.attach(session.events)
    """

    def __init__(self):
        self.logger = logging.getLogger("training_events")
        self._runs = []
        self._started_at = None

    def attach(self, bus):
        bus.subscribe(Events.SAMPLE_ADDED, self.log_sample)
        bus.subscribe(Events.TRAINING_STARTED, self.log_training_started)
        bus.subscribe(Events.TRAINING_COMPLETE, self.log_training_complete)
        bus.subscribe(Events.TRAINING_FAILED, self.log_training_failed)
        bus.subscribe(Events.MODEL_SAVED, self.log_model_saved)
        bus.subscribe(Events.EVALUATION_COMPLETE, self.log_evaluation)
        return self

    def log_sample(self, label, count, **kwargs):
        self.logger.debug("Sample: %-15s | Count: %d", label, count)

    def log_training_started(self, train_size, test_size, epochs, **kwargs):
        self._started_at = time.time()
        self.logger.info("Training: %d train / %d held out | Epochs: %d",
                         train_size, test_size, epochs)

    def log_training_complete(self, losses, split, **kwargs):
        duration = time.time() - self._started_at if self._started_at else None
        final_loss = losses[-1] if losses else None
        self._runs.append({
            "timestamp": time.time(),
            "train_size": split.train_size,
            "test_size": split.test_size,
            "epochs": len(losses),
            "final_loss": final_loss,
            "duration_s": duration,
        })
        self.logger.info(
            "Trained: %d epochs | Final loss: %s | Took: %s",
            len(losses),
            "%.4f" % final_loss if final_loss is not None else "N/A",
            "%.1fs" % duration if duration is not None else "N/A",
        )

    def log_training_failed(self, error, **kwargs):
        self.logger.warning("Training failed: %s", error)

    def log_model_saved(self, paths, **kwargs):
        self.logger.info("Model saved: %s", ", ".join(paths))

    def log_evaluation(self, report, **kwargs):
        self.logger.info("Evaluation: accuracy %.3f over %d samples",
                         report.accuracy, len(report.outcomes))

    def get_history(self, last_n=None):
        """Completed training runs, oldest first."""
        if last_n:
            return self._runs[-last_n:]
        return list(self._runs)

    @property
    def total_runs(self):
        return len(self._runs)
