"""Held-out evaluation and confusion matrices."""
from .confusion import ConfusionMatrix
from .evaluate import EvaluationReport, SampleOutcome, evaluate

__all__ = ["ConfusionMatrix", "EvaluationReport", "SampleOutcome", "evaluate"]
