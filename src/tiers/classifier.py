"""Pricing tier classifier.

Each person is encoded as::

    [normalized age, one-hot color..., one-hot location...]

and a small dense network with a softmax output learns which tier the person
belongs to. With the three example people this gives 7 input positions and
3 output classes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import tensorflow as tf

from src.features.encoding import build_index, normalize, one_hot

# Configure module logger
logger = logging.getLogger(__name__)

# Model configuration constants
DEFAULT_HIDDEN_UNITS = 80
DEFAULT_EPOCHS = 100
DEFAULT_RANDOM_STATE = 42

# Output order of the softmax layer
TIER_LABELS = ["premium", "medium", "basic"]

EXAMPLE_PEOPLE: List[Dict[str, Any]] = [
    {"name": "Erick", "age": 30, "color": "azul", "location": "São Paulo"},
    {"name": "Ana", "age": 25, "color": "vermelho", "location": "Rio"},
    {"name": "Carlos", "age": 40, "color": "verde", "location": "Curitiba"},
]
EXAMPLE_TIERS = ["premium", "medium", "basic"]


@dataclass
class TierContext:
    """Normalization state derived from the training people."""

    min_age: float
    max_age: float
    colors_index: Dict[str, int]
    locations_index: Dict[str, int]

    @property
    def dimensions(self) -> int:
        return 1 + len(self.colors_index) + len(self.locations_index)


def make_tier_context(people: List[Dict[str, Any]]) -> TierContext:
    """Derive age bounds and color/location index maps.

    Raises:
        ValueError: If people is empty.
    """
    if not people:
        raise ValueError("Cannot build tier context from an empty list of people")

    ages = [person["age"] for person in people]
    return TierContext(
        min_age=min(ages),
        max_age=max(ages),
        colors_index=build_index(person["color"] for person in people),
        locations_index=build_index(person["location"] for person in people),
    )


def encode_person(person: Dict[str, Any], context: TierContext) -> np.ndarray:
    """Encode one person. Unseen colors or locations encode as zeros."""
    age = normalize(person["age"], context.min_age, context.max_age)
    color = one_hot(context.colors_index.get(person["color"]), len(context.colors_index))
    location = one_hot(
        context.locations_index.get(person["location"]), len(context.locations_index)
    )
    return np.concatenate([np.array([age], dtype=np.float32), color, location])


def build_tier_training_data(
    people: List[Dict[str, Any]],
    tiers: Sequence[str],
    context: TierContext,
    labels: Sequence[str] = TIER_LABELS,
) -> Tuple[np.ndarray, np.ndarray]:
    """Build the input matrix and one-hot tier labels.

    Returns:
        ``(xs, ys)`` with one row per person.

    Raises:
        ValueError: If people and tiers differ in length or a tier is not
            one of labels.
    """
    if len(people) != len(tiers):
        raise ValueError(
            f"Got {len(people)} people but {len(tiers)} tier labels"
        )

    unknown = set(tiers) - set(labels)
    if unknown:
        raise ValueError(f"Unknown tier labels: {sorted(unknown)}")

    xs = np.stack([encode_person(person, context) for person in people])
    ys = np.stack([one_hot(list(labels).index(tier), len(labels)) for tier in tiers])
    return xs, ys


def build_tier_model(
    input_dimension: int,
    n_tiers: int = len(TIER_LABELS),
    hidden_units: int = DEFAULT_HIDDEN_UNITS,
) -> tf.keras.Model:
    """Build and compile the tier classifier.

    One ReLU hidden layer and a softmax output with one unit per tier,
    compiled with Adam, categorical cross-entropy and accuracy.
    """
    model = tf.keras.Sequential(
        [
            tf.keras.Input(shape=(input_dimension,)),
            tf.keras.layers.Dense(hidden_units, activation="relu"),
            tf.keras.layers.Dense(n_tiers, activation="softmax"),
        ],
        name="tier_classifier",
    )
    model.compile(
        optimizer="adam",
        loss="categorical_crossentropy",
        metrics=["accuracy"],
    )
    return model


class _EpochLossLogger(tf.keras.callbacks.Callback):
    def on_epoch_end(self, epoch: int, logs: Optional[Dict[str, Any]] = None) -> None:
        logs = logs or {}
        logger.info(f"Epoch {epoch} - Loss: {logs.get('loss')}")


def train_tier_classifier(
    people: List[Dict[str, Any]] = EXAMPLE_PEOPLE,
    tiers: Sequence[str] = EXAMPLE_TIERS,
    epochs: int = DEFAULT_EPOCHS,
    random_state: Optional[int] = DEFAULT_RANDOM_STATE,
) -> Tuple[tf.keras.Model, TierContext]:
    """Train the tier classifier on labelled people.

    Args:
        people: People with age, color and location.
        tiers: Tier label of each person.
        epochs: Passes over the data. Data is shuffled every epoch.
        random_state: Seed for weight initialisation and shuffling.

    Returns:
        A tuple of the trained model and the context used to encode people.

    Raises:
        ValueError: If people is empty or labels do not line up.
    """
    context = make_tier_context(people)
    xs, ys = build_tier_training_data(people, tiers, context)

    if random_state is not None:
        tf.keras.utils.set_random_seed(random_state)

    logger.info(f"Training tier classifier on {xs.shape[0]} people, {xs.shape[1]} features")

    model = build_tier_model(context.dimensions, ys.shape[1])
    model.fit(
        xs,
        ys,
        epochs=epochs,
        shuffle=True,
        verbose=0,
        callbacks=[_EpochLossLogger()],
    )

    return model, context


def predict_tier(
    model: tf.keras.Model,
    person: Dict[str, Any],
    context: TierContext,
    labels: Sequence[str] = TIER_LABELS,
) -> List[Tuple[str, float]]:
    """Predict tier probabilities for one person.

    Returns:
        ``(tier, probability)`` pairs, most likely first.
    """
    vector = encode_person(person, context).reshape(1, -1)
    probabilities = np.asarray(model.predict(vector, verbose=0))[0]
    ranked = sorted(zip(labels, probabilities.tolist()), key=lambda item: item[1], reverse=True)

    logger.info(
        f"Prediction for {person.get('name', 'unknown')}: "
        + ", ".join(f"{label} ({probability:.2%})" for label, probability in ranked)
    )

    return ranked
