"""Training workers driven by inbound messages.

A worker receives ``{"action": ..., **payload}`` messages one at a time and
answers through a ``post_message`` callback. Two variants share the same
encoding pipeline:

- ``StubTrainingWorker`` builds the context and the training matrices, then
  reports synthetic progress without fitting a model.
- ``ModelTrainingWorker`` fits the affinity network and reports live loss and
  accuracy after every epoch.

Each worker keeps a single context that is replaced on every training run.
Workers are not thread-safe; only one run is expected at a time.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import tensorflow as tf
from pydantic import ValidationError

from src.exceptions import (
    CatalogNotFoundError,
    InvalidPayloadError,
    ModelNotTrainedError,
    TrainingError,
)
from src.recommender.context import RecommendationContext
from src.recommender.dataset import TrainingData, create_training_data
from src.recommender.infer import recommend_products_for_user
from src.recommender.schemas import Product, User
from src.recommender.train import TrainingConfig, prepare_context, train_affinity_model
from src.recommender.utils import DEFAULT_CATALOG_PATH, load_products_catalog
from src.worker.events import WorkerEvent

# Configure module logger
logger = logging.getLogger(__name__)

PostMessage = Callable[[Dict[str, Any]], None]

# Seconds the stub waits before reporting completion
DEFAULT_STUB_DELAY = 1.0


class BaseTrainingWorker(ABC):
    """Dispatch inbound messages to handlers and run the encoding pipeline.

    Subclasses implement ``fit`` and ``recommend``.

    Args:
        post_message: Receives every outbound message.
        catalog_path: JSON catalog loaded when a training message carries no
            ``products``.
    """

    def __init__(
        self,
        post_message: PostMessage,
        catalog_path: str = DEFAULT_CATALOG_PATH,
    ) -> None:
        self.post_message = post_message
        self.catalog_path = catalog_path
        self.context: Optional[RecommendationContext] = None
        self.handlers: Dict[str, Callable[[Dict[str, Any]], None]] = {
            WorkerEvent.TRAIN_MODEL.value: self.train_model,
            WorkerEvent.RECOMMEND.value: self._handle_recommend,
        }
        logger.info(f"{type(self).__name__} initialized")

    def on_message(self, message: Dict[str, Any]) -> None:
        """Dispatch one inbound message by its ``action``.

        Messages with an unknown or missing action are ignored.
        """
        data = dict(message)
        action = data.pop("action", None)
        handler = self.handlers.get(action)
        if handler is None:
            logger.warning(f"Ignoring message with unknown action: {action!r}")
            return
        handler(data)

    def post(self, event: WorkerEvent, **fields: Any) -> None:
        self.post_message({"type": event.value, **fields})

    def post_progress(self, progress: int) -> None:
        self.post(WorkerEvent.PROGRESS_UPDATE, progress={"progress": progress})

    def train_model(self, data: Dict[str, Any]) -> None:
        """Handle a training request.

        Payload: ``users`` (required) and optionally ``products``; without
        products the catalog is read from ``catalog_path``.

        Raises:
            InvalidPayloadError: If users or products are missing or invalid.
            CatalogNotFoundError: If the catalog file is missing or unreadable.
            TrainingError: If fitting fails.
        """
        action = WorkerEvent.TRAIN_MODEL.value
        users = self._parse_records(action, data, "users", User)

        logger.info(f"Training model with {len(users)} users")
        self.post_progress(50)

        products = self._load_products(action, data)

        try:
            context = prepare_context(products, users)
        except ValueError as e:
            raise InvalidPayloadError(action, str(e)) from e

        self.context = context
        training_data = create_training_data(context)

        self.fit(training_data)

        self.post_progress(100)
        self.post(WorkerEvent.TRAINING_COMPLETE)

    @abstractmethod
    def fit(self, training_data: TrainingData) -> None:
        """Train on the assembled data, posting training log messages."""

    @abstractmethod
    def recommend(self, user: User) -> None:
        """Answer a recommendation request for one user."""

    def _handle_recommend(self, data: Dict[str, Any]) -> None:
        action = WorkerEvent.RECOMMEND.value
        if "user" not in data:
            raise InvalidPayloadError(action, "missing 'user'")
        try:
            user = User.model_validate(data["user"])
        except ValidationError as e:
            raise InvalidPayloadError(action, str(e)) from e
        self.recommend(user)

    def _load_products(self, action: str, data: Dict[str, Any]) -> List[Product]:
        if "products" in data:
            return self._parse_records(action, data, "products", Product)

        try:
            return load_products_catalog(self.catalog_path)
        except OSError as e:
            raise CatalogNotFoundError(self.catalog_path) from e
        except (ValueError, ValidationError) as e:
            raise InvalidPayloadError(action, f"invalid catalog: {e}") from e

    @staticmethod
    def _parse_records(action: str, data: Dict[str, Any], key: str, model: type) -> list:
        records = data.get(key)
        if not isinstance(records, list):
            raise InvalidPayloadError(action, f"'{key}' must be a list")
        try:
            return [model.model_validate(record) for record in records]
        except ValidationError as e:
            raise InvalidPayloadError(action, str(e)) from e


class StubTrainingWorker(BaseTrainingWorker):
    """Worker that encodes the data but only reports synthetic training.

    Args:
        completion_delay: Seconds to wait before posting completion.
    """

    def __init__(
        self,
        post_message: PostMessage,
        catalog_path: str = DEFAULT_CATALOG_PATH,
        completion_delay: float = DEFAULT_STUB_DELAY,
    ) -> None:
        super().__init__(post_message, catalog_path)
        self.completion_delay = completion_delay

    def fit(self, training_data: TrainingData) -> None:
        logger.debug(
            f"Skipping fit of {training_data.num_examples} examples, reporting synthetic metrics"
        )
        self.post(WorkerEvent.TRAINING_LOG, epoch=1, loss=1, accuracy=1)
        if self.completion_delay > 0:
            time.sleep(self.completion_delay)

    def recommend(self, user: User) -> None:
        logger.info(f"Will recommend for user: {user.name}")


class ModelTrainingWorker(BaseTrainingWorker):
    """Worker that trains the affinity network and serves recommendations."""

    def __init__(
        self,
        post_message: PostMessage,
        catalog_path: str = DEFAULT_CATALOG_PATH,
        config: Optional[TrainingConfig] = None,
    ) -> None:
        super().__init__(post_message, catalog_path)
        self.config = config or TrainingConfig()
        self.model: Optional[tf.keras.Model] = None

    def fit(self, training_data: TrainingData) -> None:
        def report_epoch(epoch: int, logs: Dict[str, float]) -> None:
            self.post(
                WorkerEvent.TRAINING_LOG,
                epoch=epoch,
                loss=logs.get("loss"),
                accuracy=logs.get("accuracy"),
            )

        # previous model does not match the new context
        self.model = None
        try:
            self.model, _ = train_affinity_model(training_data, self.config, report_epoch)
        except Exception as e:
            logger.error(f"Training failed: {e}", exc_info=True)
            raise TrainingError(e) from e

    def recommend(self, user: User) -> None:
        """Post ranked products for a user.

        Raises:
            ModelNotTrainedError: If no training run has completed.
        """
        if self.model is None or self.context is None:
            raise ModelNotTrainedError()

        recommendations = recommend_products_for_user(user, self.context, self.model)
        self.post(
            WorkerEvent.RECOMMEND,
            user=user.model_dump(),
            recommendations=recommendations,
        )
