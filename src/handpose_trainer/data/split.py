"""
Per-label train/test split.

Each label is shuffled and cut independently, so a label with N
samples contributes floor(train_ratio * N) vectors to training and the
rest to testing. The shuffle draws from a seeded numpy Generator.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, TypeVar

import numpy as np

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TRAIN_RATIO = 0.8


@dataclass
class SplitResult:
    """Train and test subsets keyed by label."""
    train: Dict[str, List] = field(default_factory=dict)
    test: Dict[str, List] = field(default_factory=dict)

    @property
    def train_size(self) -> int:
        return sum(len(v) for v in self.train.values())

    @property
    def test_size(self) -> int:
        return sum(len(v) for v in self.test.values())


def split_samples(samples: Sequence[T], train_ratio: float = DEFAULT_TRAIN_RATIO,
                  rng: Optional[np.random.Generator] = None):
    """Shuffle one label's samples and cut them into (train, test)."""
    if not 0.0 <= train_ratio <= 1.0:
        raise ValueError("train_ratio must be within [0, 1], got %r" % train_ratio)

    rng = rng if rng is not None else np.random.default_rng()
    order = rng.permutation(len(samples))
    shuffled = [samples[i] for i in order]

    split_index = int(math.floor(len(shuffled) * train_ratio))
    return shuffled[:split_index], shuffled[split_index:]


def split_training_data(data: Mapping[str, Sequence[T]],
                        train_ratio: float = DEFAULT_TRAIN_RATIO,
                        seed: Optional[int] = None) -> SplitResult:
    """
    Split every label of data independently.

    Args:
        data: label -> samples mapping; left unmodified
        train_ratio: fraction of each label kept for training
        seed: seed for the shuffle; None gives a fresh random split

    Returns:
        SplitResult whose train and test hold the same labels as data
    """
    rng = np.random.default_rng(seed)
    result = SplitResult()

    for label, samples in data.items():
        train, test = split_samples(samples, train_ratio, rng)
        result.train[label] = train
        result.test[label] = test

    logger.info("Split %d labels: train=%d, test=%d (ratio=%.2f, seed=%s)",
                len(result.train), result.train_size, result.test_size, train_ratio, seed)
    return result
