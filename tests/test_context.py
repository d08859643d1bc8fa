"""Tests for context building and product/user encoding."""

import logging

import numpy as np
import pytest

from src.recommender.context import FeatureWeights, make_context
from src.recommender.encode import (
    build_product_vectors,
    encode_product,
    encode_user,
)
from src.recommender.schemas import Product, User


@pytest.fixture
def products():
    return [
        Product(name="A", category="x", color="red", price=10),
        Product(name="B", category="y", color="blue", price=20),
        Product(name="C", category="x", color="blue", price=30),
    ]


@pytest.fixture
def users(products):
    return [
        User(name="u1", age=20, purchases=[products[0]]),
        User(name="u2", age=40, purchases=[products[0], products[1]]),
        User(name="u3", age=30, purchases=[]),
    ]


@pytest.fixture
def context(products, users):
    return make_context(products, users)


def test_make_context_bounds_and_indexes(context):
    assert context.min_age == 20
    assert context.max_age == 40
    assert context.min_price == 10
    assert context.max_price == 30
    assert context.categories_index == {"x": 0, "y": 1}
    assert context.colors_index == {"red": 0, "blue": 1}
    assert context.num_categories == 2
    assert context.num_colors == 2
    assert context.dimensions == 6


def test_make_context_average_purchaser_age(context):
    # A bought by ages 20 and 40, B by 40, C by nobody
    assert context.product_avg_age_norm["A"] == pytest.approx(0.5)
    assert context.product_avg_age_norm["B"] == pytest.approx(1.0)
    assert context.product_avg_age_norm["C"] == pytest.approx(0.5)


def test_make_context_rejects_empty_products(users):
    with pytest.raises(ValueError, match="empty product catalog"):
        make_context([], users)


def test_make_context_rejects_empty_users(products):
    with pytest.raises(ValueError, match="without users"):
        make_context(products, [])


def test_make_context_warns_when_weights_do_not_sum_to_one(products, users, caplog):
    with caplog.at_level(logging.WARNING):
        make_context(products, users, FeatureWeights(category=0.5))
    assert "not 1.0" in caplog.text


def test_encode_product_layout(context, products):
    vector = encode_product(products[1], context)

    assert vector.dtype == np.float32
    assert vector.shape == (context.dimensions,)
    np.testing.assert_allclose(vector, [0.1, 0.1, 0.0, 0.4, 0.0, 0.3], rtol=1e-6)


def test_encode_product_one_hot_blocks_sum_to_weights(context, products):
    weights = context.weights
    for product in products:
        vector = encode_product(product, context)
        category_block = vector[2 : 2 + context.num_categories]
        color_block = vector[2 + context.num_categories :]

        assert np.count_nonzero(category_block) == 1
        assert np.count_nonzero(color_block) == 1
        assert category_block.sum() == pytest.approx(weights.category)
        assert color_block.sum() == pytest.approx(weights.color)


def test_encode_product_is_deterministic(context, products):
    first = encode_product(products[2], context)
    second = encode_product(products[2], context)
    np.testing.assert_array_equal(first, second)


def test_encode_product_outside_catalog(context):
    product = Product(name="Z", category="unknown", color="green", price=30)
    vector = encode_product(product, context)

    # unknown age falls back to 0.5, unknown categoricals to zeros
    assert vector[1] == pytest.approx(0.05)
    assert vector[2:].sum() == 0.0


def test_encode_user_is_mean_of_purchases(context, users):
    vector = encode_user(users[1], context)
    np.testing.assert_allclose(
        vector, [0.05, 0.075, 0.2, 0.2, 0.15, 0.15], rtol=1e-6
    )


def test_encode_user_without_purchases_uses_own_age(context, users):
    vector = encode_user(users[2], context)

    assert vector.shape == (context.dimensions,)
    assert vector[1] == pytest.approx(0.05)
    assert np.count_nonzero(vector) == 1


def test_build_product_vectors_keeps_catalog_order(context, products):
    entries = build_product_vectors(context)

    assert [entry["name"] for entry in entries] == ["A", "B", "C"]
    assert entries[0]["meta"]["price"] == 10
    for entry, product in zip(entries, products):
        np.testing.assert_array_equal(entry["vector"], encode_product(product, context))
