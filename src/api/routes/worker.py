"""Worker endpoints for the ShopAffinity API.

This module relays worker messages over HTTP: each request carries one
inbound ``{"action": ..., **payload}`` message and the response lists the
outbound messages the worker posted while handling it.
"""

import logging
import threading
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from src.recommender.train import TrainingConfig
from src.recommender.utils import DEFAULT_CATALOG_PATH
from src.worker.training_worker import (
    DEFAULT_STUB_DELAY,
    BaseTrainingWorker,
    ModelTrainingWorker,
    StubTrainingWorker,
)

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/worker",
    tags=["worker"],
)

WorkerMode = Literal["model", "stub"]

DEFAULT_WORKER_MODE: WorkerMode = "model"

# Single worker for the process; each training run replaces its context
_worker: Optional[BaseTrainingWorker] = None
_outbox: List[Dict[str, Any]] = []
# Serializes messages so the worker handles one at a time
_worker_lock = threading.Lock()


class WorkerMessage(BaseModel):
    """Inbound worker message. Payload fields sit next to ``action``."""

    model_config = ConfigDict(extra="allow")

    action: str = Field(..., description="Handler name, e.g. 'train:model'")


class WorkerResponse(BaseModel):
    """Outbound messages posted while handling one inbound message."""

    messages: List[Dict[str, Any]] = Field(
        default_factory=list, description="Messages in the order they were posted"
    )


class WorkerStatus(BaseModel):
    mode: WorkerMode
    trained: bool
    num_products: int = 0
    num_users: int = 0
    dimensions: int = 0


def configure_worker(
    mode: WorkerMode = DEFAULT_WORKER_MODE,
    catalog_path: str = DEFAULT_CATALOG_PATH,
    config: Optional[TrainingConfig] = None,
    completion_delay: float = DEFAULT_STUB_DELAY,
) -> BaseTrainingWorker:
    """Replace the process worker.

    Args:
        mode: ``"model"`` trains a real network, ``"stub"`` reports synthetic
            progress only.
        catalog_path: Catalog used when training messages carry no products.
        config: Training configuration for the model worker.
        completion_delay: Completion delay for the stub worker.

    Returns:
        The new worker.
    """
    with _worker_lock:
        return _configure_worker(mode, catalog_path, config, completion_delay)


def _configure_worker(
    mode: WorkerMode,
    catalog_path: str,
    config: Optional[TrainingConfig],
    completion_delay: float,
) -> BaseTrainingWorker:
    global _worker

    if mode == "stub":
        _worker = StubTrainingWorker(
            _outbox.append, catalog_path=catalog_path, completion_delay=completion_delay
        )
    else:
        _worker = ModelTrainingWorker(_outbox.append, catalog_path=catalog_path, config=config)

    logger.info(f"Configured {mode} worker with catalog {catalog_path}")
    return _worker


def _get_worker() -> BaseTrainingWorker:
    # caller holds _worker_lock
    if _worker is None:
        return _configure_worker(
            DEFAULT_WORKER_MODE, DEFAULT_CATALOG_PATH, None, DEFAULT_STUB_DELAY
        )
    return _worker


@router.post("/messages", response_model=WorkerResponse)
def post_message(message: WorkerMessage) -> WorkerResponse:
    """Dispatch one message to the worker.

    Messages with an unknown action are ignored and produce no output.

    Example:
        POST /worker/messages
        {"action": "train:model", "users": [...]}
    """
    logger.info(f"Dispatching worker action {message.action!r}")

    with _worker_lock:
        worker = _get_worker()
        _outbox.clear()
        try:
            worker.on_message(message.model_dump())
            return WorkerResponse(messages=list(_outbox))
        finally:
            _outbox.clear()


@router.get("/status", response_model=WorkerStatus)
def get_status() -> WorkerStatus:
    """Report whether the worker holds a trained context."""
    with _worker_lock:
        worker = _get_worker()
        context = worker.context
        trained = getattr(worker, "model", True) is not None

    mode: WorkerMode = "stub" if isinstance(worker, StubTrainingWorker) else "model"
    if context is None:
        return WorkerStatus(mode=mode, trained=False)

    return WorkerStatus(
        mode=mode,
        trained=trained,
        num_products=len(context.products),
        num_users=len(context.users),
        dimensions=context.dimensions,
    )
