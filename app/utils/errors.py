"""Custom exception hierarchy for the resource tracker API."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class ValidationError(AppError):
    """Raised when an entry field is missing, malformed or outside its enumeration."""

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message=reason, code="VALIDATION_ERROR", status_code=422)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class SyncError(AppError):
    """Raised when the backend does not acknowledge a submitted or requested entry set."""

    retryable = True

    def __init__(self, reason: str = "The backend did not acknowledge the request") -> None:
        super().__init__(message=reason, code="SYNC_FAILED", status_code=503)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["retryable"] = self.retryable
        return payload


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class InvalidInputError(AppError):
    """Raised for request payload or parameter validation issues."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_INPUT", status_code=422)
