"""
Held-out evaluation.

Classifies every test sample, compares the top prediction with the
true label and tallies the result into a fresh ConfusionMatrix.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

from ..core.interfaces import ClassifierBackend
from .confusion import ConfusionMatrix

logger = logging.getLogger(__name__)


@dataclass
class SampleOutcome:
    actual: str
    predicted: str
    confidence: float

    @property
    def correct(self) -> bool:
        return self.actual == self.predicted


@dataclass
class EvaluationReport:
    matrix: ConfusionMatrix
    outcomes: List[SampleOutcome] = field(default_factory=list)

    @property
    def accuracy(self) -> float:
        return self.matrix.accuracy


def evaluate(backend: ClassifierBackend,
             test_data: Mapping[str, Sequence[Sequence[float]]]) -> EvaluationReport:
    """Run each held-out sample through backend and tally the results."""
    matrix = ConfusionMatrix(test_data.keys())
    outcomes = []

    for label, samples in test_data.items():
        for sample in samples:
            ranked = backend.classify(sample)
            best = max(ranked, key=lambda p: p.confidence)
            outcome = SampleOutcome(actual=label, predicted=best.label, confidence=best.confidence)
            outcomes.append(outcome)
            matrix.add(label, best.label)

            logger.info("%s: actual=%s predicted=%s (%.2f)",
                        "correct" if outcome.correct else "incorrect",
                        label, best.label, best.confidence)

    logger.info("Evaluated %d held-out samples", len(outcomes))
    return EvaluationReport(matrix=matrix, outcomes=outcomes)
