"""
Tests for TrainingSet
======================
"""

import json

import numpy as np
import pytest

from handpose_trainer.data.sample_store import TrainingSet


class TestTrainingSet:

    @pytest.fixture
    def store(self):
        store = TrainingSet()
        store.add("happy", np.ones(63))
        store.add("happy", np.zeros(63))
        store.add("sad", np.full(63, 0.5))
        return store

    def test_add_returns_label_count(self):
        store = TrainingSet()
        assert store.add("happy", np.ones(63)) == 1
        assert store.add("happy", np.ones(63)) == 2
        assert store.add("sad", np.ones(63)) == 1

    def test_counts_and_len(self, store):
        assert store.counts() == {"happy": 2, "sad": 1}
        assert len(store) == 3
        assert "happy" in store
        assert "angry" not in store

    def test_labels_keep_insertion_order(self, store):
        store.add("angry", np.ones(63))
        assert store.labels == ["happy", "sad", "angry"]

    def test_none_sample_rejected(self):
        with pytest.raises(ValueError):
            TrainingSet().add("happy", None)

    def test_snapshot_is_a_copy(self, store):
        snap = store.snapshot()
        snap["happy"].clear()
        snap["new"] = []

        assert store.counts() == {"happy": 2, "sad": 1}

    def test_clear(self, store):
        store.clear()
        assert len(store) == 0
        assert store.labels == []

    def test_save_load(self, store, tmp_path):
        path = store.save(tmp_path / "nested" / "samples.json")
        loaded = TrainingSet.load(path)

        assert loaded.counts() == store.counts()
        np.testing.assert_allclose(loaded.get("sad")[0], np.full(63, 0.5))

    def test_save_format(self, store, tmp_path):
        path = store.save(tmp_path / "samples.json")
        with open(path) as f:
            data = json.load(f)

        assert data["version"] == 1
        assert len(data["labels"]["happy"]) == 2
        assert len(data["labels"]["happy"][0]) == 63

    def test_load_rejects_unknown_version(self, tmp_path):
        path = tmp_path / "samples.json"
        path.write_text(json.dumps({"version": 99, "labels": {}}))

        with pytest.raises(ValueError):
            TrainingSet.load(path)
