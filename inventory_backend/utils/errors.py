"""Error taxonomy shared by services and the HTTP layer."""
from typing import Any, Dict, Optional


class InventoryError(Exception):
    """Base exception for inventory backend errors."""

    status_code = 500
    default_message = "An error occurred in the inventory backend"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Error message shown to the caller
            status_code: HTTP status overriding the class default
            details: Additional context for logs
        """
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to the JSON error body."""
        return {"error": self.message}


class ValidationError(InventoryError):
    """Missing or malformed input, raised before touching the database."""
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(InventoryError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(InventoryError):
    """Foreign-key or uniqueness violation."""
    status_code = 409
    default_message = "Request conflicts with existing records"


class BusinessRuleError(ConflictError):
    """Insufficient stock, terminal-state re-transition and similar rejections."""
    status_code = 400
    default_message = "Request violates a business rule"


class UpstreamServiceError(InventoryError):
    """Translation or language-model call failed; callers degrade instead of raising."""
    status_code = 502
    default_message = "Upstream service unavailable"


class InternalError(InventoryError):
    status_code = 500
    default_message = "Internal server error"


class AuthenticationError(InventoryError):
    status_code = 401
    default_message = "Invalid email or password."
