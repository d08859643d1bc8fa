"""Custom exceptions for ShopAffinity.

Defines specific exception types for the training workers and the API.
"""

from typing import Any, Dict, Optional


class AffinityError(Exception):
    """Base exception for ShopAffinity errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class InvalidPayloadError(AffinityError):
    """Raised when a worker message payload is missing or malformed."""

    def __init__(self, action: str, reason: str):
        message = f"Invalid payload for '{action}': {reason}"
        super().__init__(
            message=message,
            status_code=400,
            details={"action": action, "reason": reason},
        )


class ModelNotTrainedError(AffinityError):
    """Raised when recommendations are requested before any training run."""

    def __init__(self):
        super().__init__(
            message="No trained model available. Send a training request first.",
            status_code=409,
        )


class CatalogNotFoundError(AffinityError):
    """Raised when the product catalog cannot be found."""

    def __init__(self, catalog_path: str):
        message = f"Product catalog not found or unreadable at '{catalog_path}'."
        super().__init__(
            message=message,
            status_code=503,
            details={"catalog_path": catalog_path},
        )


class TrainingError(AffinityError):
    """Raised when a training run fails."""

    def __init__(self, error: Exception):
        message = f"Training failed: {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
