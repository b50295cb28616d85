"""
Tests for Landmark Normalization
=================================
"""

import numpy as np
import pytest

from handpose_trainer.core.types import HandLandmarks, Landmark
from handpose_trainer.features.normalization import normalize_hand, normalize_landmarks


class TestNormalizeHand:
    """Wrist-relative feature vectors from detected hands."""

    def test_components_are_landmark_minus_wrist(self, make_hand):
        hand = make_hand(wrist=(0.5, 0.5, 0.0))
        features = normalize_hand([hand])

        assert features.shape == (63,)
        for i, lm in enumerate(hand.landmarks):
            np.testing.assert_allclose(
                features[i * 3:i * 3 + 3],
                [lm.x - 0.5, lm.y - 0.5, lm.z - 0.0],
                atol=1e-6,
            )

    def test_wrist_maps_to_origin(self, make_hand):
        features = normalize_hand([make_hand(wrist=(0.3, 0.7, -0.1))])
        np.testing.assert_array_equal(features[:3], [0.0, 0.0, 0.0])

    def test_identical_points_give_zero_vector(self):
        hand = HandLandmarks([Landmark(0.42, 0.17, 0.05)] * 21)
        features = normalize_hand([hand])

        assert features.shape == (63,)
        assert not features.any()

    def test_translation_invariant(self, make_hand):
        a = normalize_hand([make_hand(wrist=(0.2, 0.2, 0.0))])
        b = normalize_hand([make_hand(wrist=(0.6, 0.4, 0.0))])
        np.testing.assert_allclose(a, b, atol=1e-6)

    def test_no_hands_is_none(self):
        assert normalize_hand([]) is None
        assert normalize_hand(None) is None

    def test_empty_hand_is_none(self):
        assert normalize_hand([HandLandmarks([])]) is None

    def test_only_first_hand_used(self, make_hand):
        first = make_hand(offset=(0.0, 0.0, 0.0))
        second = make_hand(offset=(0.1, 0.1, 0.1))

        features = normalize_hand([first, second])
        np.testing.assert_allclose(features, normalize_hand([first]))

    def test_incomplete_hand_raises(self):
        hand = HandLandmarks([Landmark(0.1, 0.2, 0.3)] * 5)
        with pytest.raises(ValueError):
            normalize_hand([hand])


class TestNormalizeLandmarks:

    def test_accepts_flat_vector(self, make_hand):
        array = make_hand().to_numpy()
        np.testing.assert_allclose(normalize_landmarks(array.flatten()),
                                   normalize_landmarks(array))

    def test_dtype_is_float32(self, make_hand):
        assert normalize_landmarks(make_hand().to_numpy()).dtype == np.float32

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            normalize_landmarks(np.zeros((20, 3)))
