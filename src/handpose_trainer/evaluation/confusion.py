"""
Confusion matrix tally.

Counts (actual label, predicted label) pairs. Labels are kept in
first-seen order and every actual/predicted combination is present,
zero-filled, so the matrix is always square.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)


class ConfusionMatrix:
    """
    Square count matrix keyed by label.

    Example:
        >>> cm = ConfusionMatrix.from_sequences(["open", "open", "fist"],
        ...                                     ["open", "fist", "fist"])
        >>> cm.as_dict()
        {'open': {'open': 1, 'fist': 1}, 'fist': {'open': 0, 'fist': 1}}
    """

    def __init__(self, labels: Optional[Iterable[str]] = None):
        self._labels: List[str] = []
        self._counts: Dict[str, Dict[str, int]] = {}
        for label in labels or []:
            self._ensure_label(label)

    def _ensure_label(self, label: str) -> None:
        if label in self._counts:
            return
        for row in self._counts.values():
            row[label] = 0
        self._labels.append(label)
        self._counts[label] = {other: 0 for other in self._labels}

    def add(self, actual: str, predicted: str) -> None:
        self._ensure_label(actual)
        self._ensure_label(predicted)
        self._counts[actual][predicted] += 1

    @classmethod
    def from_sequences(cls, actual: Sequence[str], predicted: Sequence[str]) -> "ConfusionMatrix":
        """Tally two equal-length label sequences."""
        if len(actual) != len(predicted):
            raise ValueError("Sequence lengths differ: %d actual vs %d predicted"
                             % (len(actual), len(predicted)))

        matrix = cls(list(actual) + list(predicted))
        for a, p in zip(actual, predicted):
            matrix.add(a, p)
        return matrix

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def count(self, actual: str, predicted: str) -> int:
        return self._counts.get(actual, {}).get(predicted, 0)

    @property
    def total(self) -> int:
        return sum(sum(row.values()) for row in self._counts.values())

    @property
    def correct(self) -> int:
        """Diagonal sum."""
        return sum(self._counts[label][label] for label in self._labels)

    @property
    def accuracy(self) -> float:
        total = self.total
        return self.correct / total if total else 0.0

    def recall(self, label: str) -> float:
        row_total = sum(self._counts.get(label, {}).values())
        return self.count(label, label) / row_total if row_total else 0.0

    def precision(self, label: str) -> float:
        col_total = sum(row.get(label, 0) for row in self._counts.values())
        return self.count(label, label) / col_total if col_total else 0.0

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {actual: dict(row) for actual, row in self._counts.items()}

    def to_array(self) -> np.ndarray:
        """Counts as an int64 array, rows = actual, columns = predicted."""
        n = len(self._labels)
        matrix = np.zeros((n, n), dtype=np.int64)
        for i, actual in enumerate(self._labels):
            for j, predicted in enumerate(self._labels):
                matrix[i, j] = self._counts[actual][predicted]
        return matrix

    def format_table(self) -> List[str]:
        """Rows of a printable table with recall and precision."""
        header = "%-14s" % "True \\ Pred"
        for name in self._labels:
            header += " %8s" % name[:8]
        header += "  Recall"

        lines = [header, "-" * len(header)]
        for actual in self._labels:
            row = "%-14s" % actual[:14]
            for predicted in self._labels:
                row += " %8d" % self._counts[actual][predicted]
            row += "  %.3f" % self.recall(actual)
            lines.append(row)

        lines.append("-" * len(header))
        prec_row = "%-14s" % "Precision"
        for predicted in self._labels:
            prec_row += " %8.3f" % self.precision(predicted)
        lines.append(prec_row)
        lines.append("Accuracy: %.3f (%d/%d)" % (self.accuracy, self.correct, self.total))
        return lines

    def log(self, level: int = logging.INFO) -> None:
        for line in self.format_table():
            logger.log(level, line)

    def __eq__(self, other) -> bool:
        if isinstance(other, ConfusionMatrix):
            return self.as_dict() == other.as_dict()
        return NotImplemented

    def __repr__(self) -> str:
        return "ConfusionMatrix(%r)" % self.as_dict()
