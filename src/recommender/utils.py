"""Utility functions for loading catalog and user records.

This module reads the JSON record files the training workers and scripts
consume and validates them into Product / User models.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from src.recommender.schemas import Product, User

# Configure module logger
logger = logging.getLogger(__name__)

# Default record locations
DEFAULT_CATALOG_PATH = "data/products.json"
DEFAULT_USERS_PATH = "data/users.json"


def load_json_records(json_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load a JSON file holding a list of records.

    Args:
        json_path: Path to the JSON file.

    Returns:
        The list of record dictionaries.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON list or holds no records.
    """
    json_file = Path(json_path)
    if not json_file.exists():
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    logger.info(f"Loading records from {json_path}")
    with json_file.open(encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON list of records in {json_path}")

    if not records:
        raise ValueError(f"No records found in {json_path}")

    logger.info(f"Loaded {len(records)} records")
    return records


def load_products_catalog(json_path: Union[str, Path] = DEFAULT_CATALOG_PATH) -> List[Product]:
    """Load and validate the product catalog.

    Example:
        >>> products = load_products_catalog("data/products.json")
        >>> products[0].name
    """
    return [Product.model_validate(record) for record in load_json_records(json_path)]


def load_users(json_path: Union[str, Path] = DEFAULT_USERS_PATH) -> List[User]:
    """Load and validate users with their purchase histories."""
    return [User.model_validate(record) for record in load_json_records(json_path)]
