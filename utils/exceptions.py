"""
Custom exception classes for the record gateway handler and services.

Every class carries the HTTP status code and the client-facing message it
maps to, so the handler decorator can build a response without inspecting
exception types.
"""
from typing import Optional, List


class GatewayError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        """
        Initialize gateway error.

        Args:
            message: Client-facing message (defaults to the class message)
        """
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        """Return the JSON body sent to the client."""
        return {"message": self.message}


class ValidationError(GatewayError):
    """Exception raised when a request body fails schema validation."""

    status_code = 400
    default_message = "Invalid request body"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[str]] = None,
        field: Optional[str] = None,
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            errors: Individual violations, one string per failed rule
            field: Field name when only one field failed
        """
        super().__init__(message)
        self.errors = list(errors or [])
        self.field = field

    def to_body(self) -> dict:
        body = super().to_body()
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidRequestError(GatewayError):
    """Exception raised when the store rejects a request as malformed."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(GatewayError):
    """Exception raised when a conditional create finds the key already present."""

    status_code = 400
    default_message = "Item already exists"

    def __init__(self, message: Optional[str] = None, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id


class AuthenticationError(GatewayError):
    """Exception raised when the API key is missing or unknown."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(GatewayError):
    """Exception raised when a conditional update finds no live record."""

    status_code = 404
    default_message = "Item not found or already deleted"

    def __init__(self, message: Optional[str] = None, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id


class RouteNotFoundError(GatewayError):
    """Exception raised when no route matches the request path."""

    status_code = 404
    default_message = "Not Found"


class MethodNotAllowedError(GatewayError):
    """Exception raised when a known path is called with an unsupported method."""

    status_code = 405
    default_message = "Method Not Allowed"


class BackendError(GatewayError):
    """Exception raised for store failures other than a failed condition."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        operation: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        """
        Initialize backend error.

        Args:
            message: Error message
            operation: Store operation name if available
            error_code: Store error code if available
        """
        super().__init__(message)
        self.operation = operation
        self.error_code = error_code
