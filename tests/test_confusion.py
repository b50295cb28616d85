"""
Tests for ConfusionMatrix and held-out evaluation
===================================================
"""

import numpy as np
import pytest

from handpose_trainer.evaluation.confusion import ConfusionMatrix
from handpose_trainer.evaluation.evaluate import evaluate


class TestConfusionMatrix:

    def test_worked_example(self):
        cm = ConfusionMatrix.from_sequences(["open", "open", "fist"],
                                            ["open", "fist", "fist"])

        assert cm.as_dict() == {
            "open": {"open": 1, "fist": 1},
            "fist": {"open": 0, "fist": 1},
        }

    @pytest.mark.parametrize("actual,predicted", [
        ([], []),
        (["a"], ["a"]),
        (["a", "b", "c", "a"], ["b", "b", "a", "a"]),
        (["x"] * 7, ["y", "x", "z", "x", "x", "y", "z"]),
    ])
    def test_totals(self, actual, predicted):
        cm = ConfusionMatrix.from_sequences(actual, predicted)

        assert cm.total == len(actual)
        assert int(cm.to_array().sum()) == len(actual)
        assert cm.correct == sum(1 for a, p in zip(actual, predicted) if a == p)
        assert int(np.trace(cm.to_array())) == cm.correct

    def test_square_with_unseen_prediction(self):
        cm = ConfusionMatrix.from_sequences(["a", "a"], ["a", "ghost"])

        assert cm.labels == ["a", "ghost"]
        assert cm.count("ghost", "a") == 0
        assert cm.to_array().shape == (2, 2)

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            ConfusionMatrix.from_sequences(["a", "b"], ["a"])

    def test_recall_precision(self):
        cm = ConfusionMatrix.from_sequences(["open", "open", "fist"],
                                            ["open", "fist", "fist"])

        assert cm.recall("open") == pytest.approx(0.5)
        assert cm.precision("fist") == pytest.approx(0.5)
        assert cm.accuracy == pytest.approx(2 / 3)

    def test_format_table(self):
        cm = ConfusionMatrix.from_sequences(["open", "fist"], ["open", "open"])
        lines = cm.format_table()

        assert lines[0].startswith("True \\ Pred")
        assert any(line.startswith("Precision") for line in lines)
        assert lines[-1].startswith("Accuracy: 0.500")

    def test_empty_matrix(self):
        cm = ConfusionMatrix()
        assert cm.total == 0
        assert cm.accuracy == 0.0
        assert cm.as_dict() == {}


class TestEvaluate:

    def test_tallies_top_prediction(self, fake_backend):
        fake_backend.add_data([0.0, 0.0], "open")
        fake_backend.add_data([1.0, 1.0], "fist")
        fake_backend.train(1)

        report = evaluate(fake_backend, {
            "open": [[0.1, 0.0], [0.9, 1.0]],
            "fist": [[1.0, 0.9]],
        })

        assert report.matrix.as_dict() == {
            "open": {"open": 1, "fist": 1},
            "fist": {"open": 0, "fist": 1},
        }
        assert [o.correct for o in report.outcomes] == [True, False, True]
        assert report.accuracy == pytest.approx(2 / 3)
