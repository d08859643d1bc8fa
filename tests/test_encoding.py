"""Tests for the normalization and one-hot encoding helpers."""

import numpy as np
import pytest

from src.features.encoding import build_index, normalize, one_hot


def test_normalize_maps_bounds_to_zero_and_one():
    assert normalize(39.99, 39.99, 199.99) == 0.0
    assert normalize(199.99, 39.99, 199.99) == 1.0


@pytest.mark.parametrize("value", [25, 27.5, 30, 33.3, 40])
def test_normalize_stays_in_unit_range(value):
    result = normalize(value, 25, 40)
    assert 0.0 <= result <= 1.0


def test_normalize_matches_example_price():
    assert normalize(129.99, 39.99, 199.99) == pytest.approx(0.5625, abs=1e-4)


def test_normalize_with_equal_bounds_does_not_divide_by_zero():
    assert normalize(50, 50, 50) == 0.0


def test_build_index_uses_first_appearance_order():
    index = build_index(["azul", "vermelho", "azul", "verde"])
    assert index == {"azul": 0, "vermelho": 1, "verde": 2}


def test_one_hot_places_weight_once():
    vector = one_hot(2, 4, weight=0.3)

    assert vector.dtype == np.float32
    assert vector.shape == (4,)
    assert np.count_nonzero(vector) == 1
    assert vector[2] == pytest.approx(0.3)
    assert vector.sum() == pytest.approx(0.3)


def test_one_hot_defaults_to_unit_weight():
    np.testing.assert_array_equal(one_hot(0, 3), [1.0, 0.0, 0.0])


def test_one_hot_unknown_index_is_all_zeros():
    np.testing.assert_array_equal(one_hot(None, 3, weight=0.4), np.zeros(3))


def test_one_hot_out_of_range_raises():
    with pytest.raises(IndexError):
        one_hot(3, 3)
