"""Module for getting recommendations.

Uses a trained affinity model to rank catalog products for a user.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import numpy as np
import tensorflow as tf

from src.recommender.context import RecommendationContext
from src.recommender.encode import build_product_vectors, encode_user
from src.recommender.schemas import User

# Configure module logger
logger = logging.getLogger(__name__)

# Default parameters
DEFAULT_TOP_N = 10


def score_products(
    user: User,
    context: RecommendationContext,
    model: tf.keras.Model,
) -> np.ndarray:
    """Predict the affinity of a user for every catalog product.

    Returns:
        float array of shape ``(n_products,)`` in catalog order.
    """
    product_vectors = context.product_vectors
    if product_vectors is None:
        product_vectors = build_product_vectors(context)

    user_vector = encode_user(user, context)
    inputs = np.stack(
        [np.concatenate([user_vector, entry["vector"]]) for entry in product_vectors]
    ).astype(np.float32)

    predictions = model.predict(inputs, verbose=0)
    return np.asarray(predictions).reshape(-1)


def recommend_products_for_user(
    user: User,
    context: RecommendationContext,
    model: tf.keras.Model,
    top_n: Optional[int] = None,
    exclude_purchased: bool = False,
) -> List[Dict[str, Any]]:
    """Rank catalog products for a user.

    Args:
        user: User to recommend for. Does not need to be part of the
            training data.
        context: Context the model was trained with.
        model: Trained affinity model.
        top_n: Maximum number of products to return (all when None).
        exclude_purchased: Drop products the user already bought.

    Returns:
        Product records (catalog fields plus ``score``) sorted by
        descending score.

    Raises:
        ValueError: If top_n is negative.
    """
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")

    start_time = time.time()

    product_vectors = context.product_vectors
    if product_vectors is None:
        product_vectors = build_product_vectors(context)
        context.product_vectors = product_vectors

    scores = score_products(user, context, model)
    purchased = user.purchased_names() if exclude_purchased else set()

    ranked = [
        {**entry["meta"], "score": float(score)}
        for entry, score in zip(product_vectors, scores)
        if entry["name"] not in purchased
    ]
    ranked.sort(key=lambda item: item["score"], reverse=True)

    if top_n is not None:
        ranked = ranked[:top_n]

    logger.info(
        "Recommendations generated",
        extra={
            "user_name": user.name,
            "num_recommendations": len(ranked),
            "total_time_ms": round((time.time() - start_time) * 1000, 2),
        },
    )

    return ranked
