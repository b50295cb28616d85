"""
Tests for the per-label train/test split
==========================================
"""

import math

import pytest

from handpose_trainer.data.split import split_samples, split_training_data


def _data(sizes):
    return {
        label: ["%s-%d" % (label, i) for i in range(n)]
        for label, n in sizes.items()
    }


class TestSplitTrainingData:

    @pytest.mark.parametrize("n", list(range(0, 26)) + [37, 100])
    def test_sizes(self, n):
        result = split_training_data({"a": list(range(n))}, seed=1)

        assert len(result.train["a"]) + len(result.test["a"]) == n
        assert len(result.train["a"]) == math.floor(0.8 * n)

    def test_membership_preserved(self):
        data = _data({"open": 17, "fist": 9})

        for seed in (0, 1, 2, None):
            result = split_training_data(data, seed=seed)
            for label, samples in data.items():
                combined = result.train[label] + result.test[label]
                assert sorted(combined) == sorted(samples)
                assert len(set(combined)) == len(samples)

    def test_labels_split_independently(self):
        result = split_training_data(_data({"big": 10, "small": 3}), seed=3)

        assert len(result.train["big"]) == 8
        assert len(result.train["small"]) == 2
        assert result.train_size == 10
        assert result.test_size == 3

    def test_same_seed_same_split(self):
        data = _data({"a": 30, "b": 12})
        first = split_training_data(data, seed=42)
        second = split_training_data(data, seed=42)

        assert first.train == second.train
        assert first.test == second.test

    def test_different_seed_reorders(self):
        data = _data({"a": 50})
        first = split_training_data(data, seed=1)
        second = split_training_data(data, seed=2)

        assert first.train["a"] + first.test["a"] != second.train["a"] + second.test["a"]

    def test_input_not_mutated(self):
        data = _data({"a": 10})
        original = list(data["a"])
        split_training_data(data, seed=5)

        assert data["a"] == original

    def test_custom_ratio(self):
        result = split_training_data({"a": list(range(10))}, train_ratio=0.5, seed=0)
        assert len(result.train["a"]) == 5

    @pytest.mark.parametrize("ratio", [-0.1, 1.5])
    def test_invalid_ratio(self, ratio):
        with pytest.raises(ValueError):
            split_samples([1, 2, 3], train_ratio=ratio)
