"""Normalization context for product/user encoding.

The context holds everything the encoder needs to turn a record into a
fixed-length vector: min/max bounds for the continuous fields, index maps for
the categorical fields, the average purchaser age of every product and the
resulting feature dimensionality. It is computed once per training run from
the full record set.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from src.features.encoding import build_index, normalize
from src.recommender.schemas import Product, User

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureWeights:
    """Relative importance of each feature group in the encoded vector.

    The weights add up to 1.0 by convention. This is not enforced; a warning
    is logged when a context is built with weights that do not.
    """

    category: float = 0.4
    color: float = 0.3
    price: float = 0.2
    age: float = 0.1

    @property
    def total(self) -> float:
        return self.category + self.color + self.price + self.age


DEFAULT_WEIGHTS = FeatureWeights()


@dataclass
class RecommendationContext:
    """Derived normalization state for one training run.

    Attributes:
        products: Catalog products the context was built from.
        users: Users the context was built from.
        categories_index: Category to one-hot position.
        colors_index: Color to one-hot position.
        min_age: Youngest user age.
        max_age: Oldest user age.
        min_price: Cheapest catalog price.
        max_price: Most expensive catalog price.
        product_avg_age_norm: Product name to normalized average purchaser age.
        weights: Feature weights used by the encoder.
        product_vectors: Encoded catalog, filled in once the context exists.
    """

    products: List[Product]
    users: List[User]
    categories_index: Dict[str, int]
    colors_index: Dict[str, int]
    min_age: float
    max_age: float
    min_price: float
    max_price: float
    product_avg_age_norm: Dict[str, float]
    weights: FeatureWeights = DEFAULT_WEIGHTS
    product_vectors: Optional[List[Dict[str, Any]]] = field(default=None, repr=False)

    @property
    def num_categories(self) -> int:
        return len(self.categories_index)

    @property
    def num_colors(self) -> int:
        return len(self.colors_index)

    @property
    def dimensions(self) -> int:
        # price + age, then one position per category and per color
        return 2 + self.num_categories + self.num_colors


def _average_purchaser_ages(users: List[User]) -> Dict[str, float]:
    """Average age of the users who bought each product, keyed by name."""
    rows = [
        {"name": purchase.name, "age": user.age}
        for user in users
        for purchase in user.purchases
    ]
    if not rows:
        return {}

    df = pd.DataFrame(rows)
    return df.groupby("name")["age"].mean().to_dict()


def make_context(
    products: List[Product],
    users: List[User],
    weights: FeatureWeights = DEFAULT_WEIGHTS,
) -> RecommendationContext:
    """Build the normalization context from the full record set.

    Args:
        products: Product catalog.
        users: Users with their purchase histories.
        weights: Feature weights for the encoder.

    Returns:
        A RecommendationContext without product vectors. Call
        ``build_product_vectors`` to fill them in.

    Raises:
        ValueError: If products or users is empty.

    Example:
        >>> context = make_context(products, users)
        >>> context.dimensions
        9
    """
    if not products:
        raise ValueError("Cannot build context from an empty product catalog")
    if not users:
        raise ValueError("Cannot build context without users")

    if not math.isclose(weights.total, 1.0):
        logger.warning(f"Feature weights add up to {weights.total:.3f}, not 1.0")

    ages = np.array([user.age for user in users], dtype=np.float64)
    prices = np.array([product.price for product in products], dtype=np.float64)

    min_age, max_age = float(ages.min()), float(ages.max())
    min_price, max_price = float(prices.min()), float(prices.max())

    categories_index = build_index(product.category for product in products)
    colors_index = build_index(product.color for product in products)

    # Products nobody bought fall back to the middle of the age range
    avg_age = (min_age + max_age) / 2
    purchaser_ages = _average_purchaser_ages(users)
    product_avg_age_norm = {
        product.name: normalize(
            purchaser_ages.get(product.name, avg_age), min_age, max_age
        )
        for product in products
    }

    context = RecommendationContext(
        products=products,
        users=users,
        categories_index=categories_index,
        colors_index=colors_index,
        min_age=min_age,
        max_age=max_age,
        min_price=min_price,
        max_price=max_price,
        product_avg_age_norm=product_avg_age_norm,
        weights=weights,
    )

    logger.info(
        "Context built",
        extra={
            "num_products": len(products),
            "num_users": len(users),
            "num_categories": context.num_categories,
            "num_colors": context.num_colors,
            "dimensions": context.dimensions,
        },
    )

    return context
