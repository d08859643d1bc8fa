"""Product and user encoders.

Every vector has ``context.dimensions`` positions laid out as::

    [price, age, category one-hot..., color one-hot...]

with each group scaled by its feature weight. Encoding is a pure function of
the record and the context.
"""

import logging
from typing import Any, Dict, List

import numpy as np

from src.features.encoding import normalize, one_hot
from src.recommender.context import RecommendationContext
from src.recommender.schemas import Product, User

# Configure module logger
logger = logging.getLogger(__name__)

# Age feature for products missing from the purchaser-age table
UNKNOWN_PRODUCT_AGE = 0.5


def encode_product(product: Product, context: RecommendationContext) -> np.ndarray:
    """Encode a product into a weighted feature vector.

    Args:
        product: Product to encode. It does not have to belong to the
            catalog; unknown categories and colors encode as zeros.
        context: Normalization context.

    Returns:
        float32 array of shape ``(context.dimensions,)``.
    """
    weights = context.weights

    price = normalize(product.price, context.min_price, context.max_price) * weights.price
    age = context.product_avg_age_norm.get(product.name, UNKNOWN_PRODUCT_AGE) * weights.age

    category_idx = context.categories_index.get(product.category)
    color_idx = context.colors_index.get(product.color)
    if category_idx is None or color_idx is None:
        logger.debug(
            f"Product {product.name!r} has a category or color outside the catalog"
        )

    category = one_hot(category_idx, context.num_categories, weights.category)
    color = one_hot(color_idx, context.num_colors, weights.color)

    return np.concatenate(
        [np.array([price, age], dtype=np.float32), category, color]
    )


def encode_user(user: User, context: RecommendationContext) -> np.ndarray:
    """Encode a user as the mean of their purchase vectors.

    A user without purchases gets a cold-start vector that only carries their
    own normalized age in the age position.

    Returns:
        float32 array of shape ``(context.dimensions,)``.
    """
    if user.purchases:
        purchase_vectors = np.stack(
            [encode_product(purchase, context) for purchase in user.purchases]
        )
        return purchase_vectors.mean(axis=0).astype(np.float32)

    vector = np.zeros(context.dimensions, dtype=np.float32)
    vector[1] = normalize(user.age, context.min_age, context.max_age) * context.weights.age
    return vector


def build_product_vectors(context: RecommendationContext) -> List[Dict[str, Any]]:
    """Encode the whole catalog once.

    Returns:
        One ``{"name", "meta", "vector"}`` entry per catalog product, in
        catalog order.
    """
    return [
        {
            "name": product.name,
            "meta": product.meta(),
            "vector": encode_product(product, context),
        }
        for product in context.products
    ]
