"""
Sample Store
=============

Label-keyed collection of feature vectors gathered from capture actions.

The store only grows through explicit add() calls (or load/clear); the
train/test split reads a snapshot and never mutates it.

File format (JSON)::

    {
      "version": 1,
      "labels": {
        "happy": [[63 floats], [63 floats], ...],
        "sad":   [...]
      }
    }
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class TrainingSet:
    """
    Mapping from class label to an ordered list of feature vectors.

    Labels keep their first-insertion order. All access goes through a
    lock because capture requests and background training may overlap.

    Example:
        >>> store = TrainingSet()
        >>> store.add("happy", features)
        1
        >>> store.counts()
        {'happy': 1}
    """

    def __init__(self):
        self._samples: Dict[str, List[np.ndarray]] = {}
        self._lock = threading.Lock()

    def add(self, label: str, features: Sequence[float]) -> int:
        """Append a vector under label.

        Returns:
            Number of samples now stored for label
        """
        if features is None:
            raise ValueError("Cannot add an empty sample")

        vector = np.array(features, dtype=np.float32).reshape(-1)
        with self._lock:
            bucket = self._samples.setdefault(label, [])
            bucket.append(vector)
            count = len(bucket)

        logger.debug("Added sample #%d for '%s'", count, label)
        return count

    def extend(self, label: str, vectors: Sequence[Sequence[float]]) -> int:
        count = 0
        for vector in vectors:
            count = self.add(label, vector)
        return count

    def get(self, label: str) -> List[np.ndarray]:
        with self._lock:
            return list(self._samples.get(label, []))

    def snapshot(self) -> Dict[str, List[np.ndarray]]:
        """Copy of the label -> samples mapping, safe to use unlocked."""
        with self._lock:
            return {label: list(samples) for label, samples in self._samples.items()}

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return {label: len(samples) for label, samples in self._samples.items()}

    @property
    def labels(self) -> List[str]:
        with self._lock:
            return list(self._samples.keys())

    def items(self) -> Iterator[Tuple[str, List[np.ndarray]]]:
        return iter(self.snapshot().items())

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()
        logger.info("Training set cleared")

    def __len__(self) -> int:
        with self._lock:
            return sum(len(samples) for samples in self._samples.values())

    def __contains__(self, label: str) -> bool:
        with self._lock:
            return label in self._samples

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: Union[str, Path]) -> Path:
        """Write all samples to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": FORMAT_VERSION,
            "labels": {
                label: [vector.tolist() for vector in samples]
                for label, samples in self.snapshot().items()
            },
        }
        with open(path, "w") as f:
            json.dump(data, f)

        logger.info("Saved %d samples (%d labels) to %s", len(self), len(data["labels"]), path)
        return path

    @classmethod
    def load(cls, path: Union[str, Path]) -> "TrainingSet":
        """Read a TrainingSet written by save()."""
        path = Path(path)
        with open(path, "r") as f:
            data = json.load(f)

        version = data.get("version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise ValueError("Unsupported dataset version %r in %s" % (version, path))

        store = cls()
        for label, vectors in data.get("labels", {}).items():
            store.extend(label, vectors)

        logger.info("Loaded %d samples (%d labels) from %s", len(store), len(store.labels), path)
        return store
