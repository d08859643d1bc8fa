"""Normalization and one-hot encoding primitives.

Continuous values are rescaled to the 0-1 range using the observed min/max so
that no single feature dominates training. Categorical values are mapped to
integer positions and expanded into (optionally weighted) one-hot vectors.
"""

import logging
from typing import Dict, Hashable, Iterable, Optional

import numpy as np

# Configure module logger
logger = logging.getLogger(__name__)


def normalize(value: float, min_value: float, max_value: float) -> float:
    """Rescale a continuous value to the 0-1 range.

    Uses ``(value - min) / (max - min)``. When every observed value is the
    same the denominator falls back to 1, so the result is 0 instead of a
    division by zero.

    Args:
        value: Value to rescale.
        min_value: Smallest observed value.
        max_value: Largest observed value.

    Returns:
        The normalized value. Values inside [min_value, max_value] land in
        [0, 1]; min maps to 0 and max maps to 1.

    Example:
        >>> round(normalize(129.99, 39.99, 199.99), 2)
        0.56
    """
    return (value - min_value) / ((max_value - min_value) or 1)


def build_index(values: Iterable[Hashable]) -> Dict[Hashable, int]:
    """Map each distinct categorical value to an integer position.

    Positions follow first-appearance order, so the same record sequence
    always produces the same index.
    """
    unique_values = list(dict.fromkeys(values))
    return {value: idx for idx, value in enumerate(unique_values)}


def one_hot(index: Optional[int], length: int, weight: float = 1.0) -> np.ndarray:
    """Build a weighted one-hot vector.

    Args:
        index: Active position. ``None`` (a category missing from the index)
            produces the all-zero vector.
        length: Number of positions.
        weight: Value placed at the active position.

    Returns:
        float32 array of shape ``(length,)``.

    Raises:
        IndexError: If index is outside ``[0, length)``.
    """
    vector = np.zeros(length, dtype=np.float32)
    if index is None:
        return vector

    if not 0 <= index < length:
        raise IndexError(f"One-hot index {index} out of range for length {length}")

    vector[index] = weight
    return vector
