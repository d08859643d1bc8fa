"""Training-set assembly for the affinity model.

Every (user, product) pair becomes one row: the user vector followed by the
product vector, labelled 1 when the user bought the product and 0 otherwise.
"""

import logging
from dataclasses import dataclass

import numpy as np

from src.recommender.context import RecommendationContext
from src.recommender.encode import build_product_vectors, encode_user

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class TrainingData:
    """Input/label matrices ready for ``model.fit``.

    Attributes:
        xs: float32 array of shape ``(n_users * n_products, input_dimension)``.
        ys: float32 array of shape ``(n_users * n_products, 1)``.
        input_dimension: Width of one row, twice the context dimensions.
    """

    xs: np.ndarray
    ys: np.ndarray
    input_dimension: int

    @property
    def num_examples(self) -> int:
        return self.xs.shape[0]


def create_training_data(context: RecommendationContext) -> TrainingData:
    """Build the user x product training matrices.

    Uses ``context.product_vectors`` when they are already cached and encodes
    the catalog otherwise.

    Args:
        context: Normalization context with products and users.

    Returns:
        TrainingData with one row per (user, product) pair, users in outer
        order and products in catalog order.
    """
    product_vectors = context.product_vectors
    if product_vectors is None:
        product_vectors = build_product_vectors(context)

    inputs = []
    labels = []

    for user in context.users:
        user_vector = encode_user(user, context)
        purchased = user.purchased_names()

        for entry in product_vectors:
            inputs.append(np.concatenate([user_vector, entry["vector"]]))
            labels.append(1.0 if entry["name"] in purchased else 0.0)

    input_dimension = context.dimensions * 2
    xs = np.asarray(inputs, dtype=np.float32).reshape(len(inputs), input_dimension)
    ys = np.asarray(labels, dtype=np.float32).reshape(len(labels), 1)

    logger.info(
        f"Assembled {xs.shape[0]} training examples "
        f"({len(context.users)} users x {len(product_vectors)} products), "
        f"{int(ys.sum())} positive"
    )

    return TrainingData(xs=xs, ys=ys, input_dimension=input_dimension)
