"""Tests for the FastAPI application endpoints."""

import threading
import time

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.api.routes import worker
from src.recommender.train import TrainingConfig
from src.worker import training_worker

# Create test client
client = TestClient(app)

PRODUCTS = [
    {"name": "A", "category": "x", "color": "red", "price": 10},
    {"name": "B", "category": "y", "color": "blue", "price": 20},
]
USERS = [
    {"name": "u1", "age": 20, "purchases": [PRODUCTS[0]]},
    {"name": "u2", "age": 35, "purchases": [PRODUCTS[1]]},
]


@pytest.fixture
def stub_worker():
    worker.configure_worker("stub", completion_delay=0)
    yield
    worker.configure_worker()


@pytest.fixture
def model_worker():
    worker.configure_worker(
        "model", config=TrainingConfig(epochs=2, batch_size=4, hidden_units=(8,))
    )
    yield
    worker.configure_worker()


def test_ping_endpoint():
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_status_before_training(model_worker):
    response = client.get("/worker/status")

    assert response.status_code == 200
    assert response.json() == {
        "mode": "model",
        "trained": False,
        "num_products": 0,
        "num_users": 0,
        "dimensions": 0,
    }


def test_stub_training_returns_posted_messages(stub_worker):
    response = client.post(
        "/worker/messages",
        json={"action": "train:model", "users": USERS, "products": PRODUCTS},
    )

    assert response.status_code == 200
    types = [message["type"] for message in response.json()["messages"]]
    assert types == [
        "progress:update",
        "training:log",
        "progress:update",
        "training:complete",
    ]

    status = client.get("/worker/status").json()
    assert status["mode"] == "stub"
    assert status["trained"] is True
    assert status["dimensions"] == 2 + 2 + 2


def test_model_training_then_recommend(model_worker):
    response = client.post(
        "/worker/messages",
        json={"action": "train:model", "users": USERS, "products": PRODUCTS},
    )
    assert response.status_code == 200
    logs = [m for m in response.json()["messages"] if m["type"] == "training:log"]
    assert [log["epoch"] for log in logs] == [1, 2]

    response = client.post(
        "/worker/messages", json={"action": "recommend", "user": USERS[0]}
    )

    assert response.status_code == 200
    messages = response.json()["messages"]
    assert len(messages) == 1
    assert messages[0]["type"] == "recommend"
    assert len(messages[0]["recommendations"]) == 2


def test_unknown_action_produces_no_messages(stub_worker):
    response = client.post("/worker/messages", json={"action": "nope"})

    assert response.status_code == 200
    assert response.json() == {"messages": []}


def test_recommend_before_training_returns_409(model_worker):
    response = client.post(
        "/worker/messages", json={"action": "recommend", "user": USERS[0]}
    )

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "ModelNotTrainedError"
    assert "message" in data


def test_invalid_payload_returns_400(stub_worker):
    response = client.post(
        "/worker/messages", json={"action": "train:model", "products": PRODUCTS}
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "InvalidPayloadError"
    assert data["details"]["action"] == "train:model"


def test_missing_catalog_returns_503(tmp_path):
    worker.configure_worker(
        "stub", catalog_path=str(tmp_path / "missing.json"), completion_delay=0
    )
    try:
        response = client.post(
            "/worker/messages", json={"action": "train:model", "users": USERS}
        )
    finally:
        worker.configure_worker()

    assert response.status_code == 503
    assert response.json()["error"] == "CatalogNotFoundError"


def test_missing_action_returns_422():
    response = client.post("/worker/messages", json={"users": USERS})

    assert response.status_code == 422


def test_failed_training_returns_500(model_worker, monkeypatch):
    def failing_fit(*args, **kwargs):
        raise RuntimeError("out of memory")

    monkeypatch.setattr(training_worker, "train_affinity_model", failing_fit)

    response = client.post(
        "/worker/messages",
        json={"action": "train:model", "users": USERS, "products": PRODUCTS},
    )

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "TrainingError"
    assert data["details"]["error_type"] == "RuntimeError"


def test_concurrent_messages_are_handled_one_at_a_time():
    worker.configure_worker("stub", completion_delay=0.5)
    responses = {}

    def train():
        responses["train"] = client.post(
            "/worker/messages",
            json={"action": "train:model", "users": USERS, "products": PRODUCTS},
        )

    try:
        thread = threading.Thread(target=train)
        thread.start()
        time.sleep(0.2)
        responses["other"] = client.post("/worker/messages", json={"action": "nope"})
        thread.join()
    finally:
        worker.configure_worker()

    assert responses["train"].status_code == 200
    types = [message["type"] for message in responses["train"].json()["messages"]]
    assert types == [
        "progress:update",
        "training:log",
        "progress:update",
        "training:complete",
    ]
    assert responses["other"].json() == {"messages": []}
