"""Sample storage and train/test splitting."""
from .sample_store import TrainingSet
from .split import SplitResult, split_samples, split_training_data

__all__ = ["TrainingSet", "SplitResult", "split_samples", "split_training_data"]
