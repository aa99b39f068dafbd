"""
Shared error handling for the analytics services.
"""

from typing import Dict, Any, Optional, Iterable
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class AnalyticsException(Exception):
    """Base exception for analytics services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class UnknownActivityError(AnalyticsException):
    """Raised when a simulation is requested for an activity kind the engine does not know."""

    def __init__(self, activity: str, available: Iterable[str] = ()):
        super().__init__(
            "UNKNOWN_ACTIVITY",
            "Unknown simulation type",
            {"type": activity, "available": sorted(available)}
        )


class UnknownSeriesError(AnalyticsException):
    """Raised when a tag combination was never pre-registered for an instrument."""

    def __init__(self, metric: str, tags: Optional[Dict[str, str]] = None):
        super().__init__(
            "UNKNOWN_SERIES",
            f"No series registered for {metric}",
            {"metric": metric, "tags": tags or {}}
        )


class RegistrationError(AnalyticsException):
    """Raised when a definition conflicts with an instrument already registered under its name."""

    status_code = 500

    def __init__(self, metric: str, message: str = "Conflicting instrument definition"):
        super().__init__("REGISTRATION_ERROR", f"{metric}: {message}", {"metric": metric})
