"""Affinity model training module.

This module builds and trains a small dense network that scores how likely a
user is to buy a product. Each input row is a user vector concatenated with a
product vector; the single sigmoid output is the purchase probability.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import tensorflow as tf

from src.recommender.context import (
    DEFAULT_WEIGHTS,
    FeatureWeights,
    RecommendationContext,
    make_context,
)
from src.recommender.dataset import TrainingData, create_training_data
from src.recommender.encode import build_product_vectors
from src.recommender.schemas import Product, User

# Configure module logger
logger = logging.getLogger(__name__)

# Model configuration constants
DEFAULT_EPOCHS = 100
DEFAULT_BATCH_SIZE = 32
DEFAULT_LEARNING_RATE = 0.01
DEFAULT_HIDDEN_UNITS = (128, 64, 32)
DEFAULT_RANDOM_STATE = 42

EpochCallback = Callable[[int, Dict[str, float]], None]


@dataclass
class TrainingConfig:
    """Hyperparameters for the affinity model."""

    epochs: int = DEFAULT_EPOCHS
    batch_size: int = DEFAULT_BATCH_SIZE
    learning_rate: float = DEFAULT_LEARNING_RATE
    hidden_units: Sequence[int] = DEFAULT_HIDDEN_UNITS
    shuffle: bool = True
    random_state: Optional[int] = DEFAULT_RANDOM_STATE


class EpochEndCallback(tf.keras.callbacks.Callback):
    """Forward ``(epoch, logs)`` to a plain function at the end of each epoch.

    Epochs are reported 1-based.
    """

    def __init__(self, on_epoch_end: EpochCallback) -> None:
        super().__init__()
        self._on_epoch_end = on_epoch_end

    def on_epoch_end(self, epoch: int, logs: Optional[Dict[str, Any]] = None) -> None:
        logs = {key: float(value) for key, value in (logs or {}).items()}
        self._on_epoch_end(epoch + 1, logs)


def build_affinity_model(
    input_dimension: int, config: Optional[TrainingConfig] = None
) -> tf.keras.Model:
    """Build and compile the affinity network.

    ReLU dense layers of ``config.hidden_units`` followed by one sigmoid
    unit, compiled with Adam, binary cross-entropy and accuracy.

    Args:
        input_dimension: Width of one training row.
        config: Training configuration (defaults used when None).

    Returns:
        Compiled Keras model.

    Raises:
        ValueError: If input_dimension is not positive.
    """
    config = config or TrainingConfig()

    if input_dimension <= 0:
        raise ValueError(f"input_dimension must be positive, got {input_dimension}")

    layers: list = [tf.keras.Input(shape=(input_dimension,))]
    layers += [
        tf.keras.layers.Dense(units, activation="relu") for units in config.hidden_units
    ]
    layers.append(tf.keras.layers.Dense(1, activation="sigmoid"))

    model = tf.keras.Sequential(layers, name="affinity_model")
    model.compile(
        optimizer=tf.keras.optimizers.Adam(learning_rate=config.learning_rate),
        loss="binary_crossentropy",
        metrics=["accuracy"],
    )

    return model


def train_affinity_model(
    training_data: TrainingData,
    config: Optional[TrainingConfig] = None,
    on_epoch_end: Optional[EpochCallback] = None,
) -> Tuple[tf.keras.Model, tf.keras.callbacks.History]:
    """Fit the affinity network on assembled training data.

    Args:
        training_data: Output of ``create_training_data``.
        config: Training configuration (defaults used when None).
        on_epoch_end: Optional ``(epoch, logs)`` callback, called after every
            epoch with ``loss`` and ``accuracy`` in logs.

    Returns:
        A tuple of the trained model and its Keras History.

    Raises:
        ValueError: If training_data has no examples.
    """
    config = config or TrainingConfig()

    if training_data.num_examples == 0:
        raise ValueError("Cannot train on an empty training set")

    if config.random_state is not None:
        tf.keras.utils.set_random_seed(config.random_state)

    logger.info(
        f"Training affinity model on {training_data.num_examples} examples "
        f"of width {training_data.input_dimension}"
    )
    logger.info(
        f"Epochs: {config.epochs}, batch size: {config.batch_size}, "
        f"learning rate: {config.learning_rate}"
    )

    model = build_affinity_model(training_data.input_dimension, config)

    callbacks = []
    if on_epoch_end is not None:
        callbacks.append(EpochEndCallback(on_epoch_end))

    history = model.fit(
        training_data.xs,
        training_data.ys,
        epochs=config.epochs,
        batch_size=config.batch_size,
        shuffle=config.shuffle,
        verbose=0,
        callbacks=callbacks,
    )

    final_loss = history.history["loss"][-1]
    final_accuracy = history.history["accuracy"][-1]
    logger.info(f"Training completed. Loss: {final_loss:.4f}, accuracy: {final_accuracy:.4f}")

    return model, history


def prepare_context(
    products: List[Product],
    users: List[User],
    weights: FeatureWeights = DEFAULT_WEIGHTS,
) -> RecommendationContext:
    """Build a context and cache the encoded catalog on it."""
    context = make_context(products, users, weights)
    context.product_vectors = build_product_vectors(context)
    return context


def train_from_records(
    products: List[Product],
    users: List[User],
    config: Optional[TrainingConfig] = None,
    on_epoch_end: Optional[EpochCallback] = None,
    weights: FeatureWeights = DEFAULT_WEIGHTS,
) -> Tuple[tf.keras.Model, RecommendationContext]:
    """Train an affinity model from raw records.

    This is the main entry point for training. It builds the context,
    encodes the catalog, assembles the user x product training set and fits
    the network.

    Args:
        products: Product catalog.
        users: Users with purchase histories.
        config: Training configuration.
        on_epoch_end: Optional per-epoch callback.
        weights: Feature weights for the encoder.

    Returns:
        A tuple of the trained model and the context it was trained with.

    Raises:
        ValueError: If the records are empty or invalid.

    Example:
        >>> model, context = train_from_records(products, users)
        >>> recommend_products_for_user(users[0], context, model, top_n=3)
    """
    logger.info("=" * 60)
    logger.info("Starting affinity model training")
    logger.info("=" * 60)

    try:
        context = prepare_context(products, users, weights)
        training_data = create_training_data(context)
        model, _ = train_affinity_model(training_data, config, on_epoch_end)

        logger.info("=" * 60)
        logger.info("Training completed successfully!")
        logger.info("=" * 60)

        return model, context

    except Exception as e:
        logger.error(f"Training failed: {e}", exc_info=True)
        raise
