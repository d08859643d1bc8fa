"""Tests for user x product training-set assembly."""

import numpy as np
import pytest

from src.recommender.context import make_context
from src.recommender.dataset import create_training_data
from src.recommender.encode import build_product_vectors, encode_product, encode_user
from src.recommender.schemas import Product, User


@pytest.fixture
def context():
    products = [
        Product(name="A", category="x", color="red", price=10),
        Product(name="B", category="y", color="blue", price=20),
        Product(name="C", category="x", color="blue", price=30),
    ]
    users = [
        User(name="u1", age=20, purchases=[products[0]]),
        User(name="u2", age=40, purchases=[products[0], products[1]]),
        User(name="u3", age=30, purchases=[]),
    ]
    return make_context(products, users)


def test_row_count_is_users_times_products(context):
    data = create_training_data(context)

    assert data.num_examples == len(context.users) * len(context.products)
    assert data.xs.shape == (9, context.dimensions * 2)
    assert data.ys.shape == (9, 1)
    assert data.input_dimension == 12


def test_labels_mark_purchases(context):
    data = create_training_data(context)

    expected = [1, 0, 0, 1, 1, 0, 0, 0, 0]
    np.testing.assert_array_equal(data.ys.reshape(-1), expected)


def test_rows_concatenate_user_and_product_vectors(context):
    data = create_training_data(context)

    user = context.users[1]
    product = context.products[2]
    row = data.xs[1 * 3 + 2]

    np.testing.assert_allclose(row[: context.dimensions], encode_user(user, context), rtol=1e-6)
    np.testing.assert_allclose(
        row[context.dimensions :], encode_product(product, context), rtol=1e-6
    )


def test_uses_cached_product_vectors(context):
    context.product_vectors = build_product_vectors(context)
    cached = create_training_data(context)

    context.product_vectors = None
    fresh = create_training_data(context)

    np.testing.assert_array_equal(cached.xs, fresh.xs)
    np.testing.assert_array_equal(cached.ys, fresh.ys)
