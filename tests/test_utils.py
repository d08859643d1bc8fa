"""Tests for loading JSON records."""

import json
from pathlib import Path

import pytest

from src.recommender.utils import load_json_records, load_products_catalog, load_users

DATA_DIR = Path(__file__).parent.parent / "data"


def test_load_bundled_catalog():
    products = load_products_catalog(DATA_DIR / "products.json")

    assert len(products) == 10
    assert products[0].name == "Fones Bluetooth"
    assert products[0].meta()["id"] == 1


def test_load_bundled_users():
    users = load_users(DATA_DIR / "users.json")

    assert len(users) == 5
    assert users[0].purchases[0].name == "Fones Bluetooth"
    assert users[-1].purchases == []


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_json_records(tmp_path / "missing.json")


def test_non_list_raises(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"name": "A"}))

    with pytest.raises(ValueError, match="JSON list"):
        load_json_records(path)


def test_empty_list_raises(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("[]")

    with pytest.raises(ValueError, match="No records"):
        load_json_records(path)
