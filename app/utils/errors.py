"""Custom exception hierarchy for the Blogbase API."""

from __future__ import annotations


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class ForbiddenError(AppError):
    """Raised when the user lacks permission for the action."""

    def __init__(self, reason: str = "You don't have permission") -> None:
        super().__init__(message=reason, code="FORBIDDEN", status_code=403)


class UnauthorizedError(AppError):
    """Raised when the caller is not authenticated."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(message=reason, code="UNAUTHORIZED", status_code=401)


class InvalidInputError(AppError):
    """Raised for request payload or parameter validation issues."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_INPUT", status_code=422)


class AuthOperationError(AppError):
    """Raised when the auth provider rejects a sign-in, sign-up or sign-out.

    ``message`` is safe to show to end users; ``vendor_code`` keeps the raw
    provider code for logs.
    """

    def __init__(self, message: str, vendor_code: str | None = None) -> None:
        self.vendor_code = vendor_code
        super().__init__(message=message, code="AUTH_ERROR", status_code=400)


class DataCorruptionError(AppError):
    """Raised when a stored row is missing fields it must always carry."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            message=f"Invalid {resource} data structure",
            code="DATA_CORRUPTION",
            status_code=500,
        )


class EventPublishError(AppError):
    """Raised when an event cannot be delivered to the workflow service."""

    def __init__(self, event_name: str) -> None:
        super().__init__(
            message=f"Failed to publish event {event_name}",
            code="EVENT_PUBLISH_FAILED",
            status_code=502,
        )
