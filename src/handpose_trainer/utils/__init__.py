"""Configuration and logging helpers."""
from .config import Config
from .logger import TrainingLogger, log_timing, setup_logging

__all__ = ["Config", "TrainingLogger", "log_timing", "setup_logging"]
