"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class ConflictError(AppError):
    """Conflict (e.g., unique constraint)."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class NotSignedInError(AppError):
    """No signed-in user or bearer token available."""

    def __init__(self, message: str = "Not signed in", details: Any | None = None) -> None:
        super().__init__(code="not_signed_in", message=message, status_code=401, details=details)


class RemoteError(AppError):
    """Base class for failures talking to the remote backend.

    All remote failures are transient from the engine's point of view: callers
    may retry on the next poll tick or user action.
    """

    def __init__(
        self,
        message: str = "Remote call failed",
        details: Any | None = None,
        *,
        code: str = "remote_error",
        status_code: int = 502,
    ) -> None:
        super().__init__(code=code, message=message, status_code=status_code, details=details)


class RemoteTimeoutError(RemoteError):
    """The remote call did not answer within its timeout."""

    def __init__(self, message: str = "Request timed out", details: Any | None = None) -> None:
        super().__init__(message, details, code="remote_timeout", status_code=504)


class RemoteNetworkError(RemoteError):
    """Connection-level failure (DNS, refused, reset, TLS)."""

    def __init__(self, message: str = "Network error", details: Any | None = None) -> None:
        super().__init__(message, details, code="remote_network_error")


class RemoteHTTPError(RemoteError):
    """Remote answered with a non-success status code."""

    def __init__(self, upstream_status: int, message: str = "Remote API error", details: Any | None = None) -> None:
        super().__init__(message, details, code="remote_http_error")
        self.upstream_status = upstream_status


class RemoteDecodeError(RemoteError):
    """Remote payload was not valid JSON or failed schema validation."""

    def __init__(self, message: str = "Invalid response from server", details: Any | None = None) -> None:
        super().__init__(message, details, code="remote_decode_error")


class SubmissionRejectedError(RemoteError):
    """Remote accepted the request but its body declares the submission failed."""

    def __init__(self, message: str = "Server indicated submission failed", details: Any | None = None) -> None:
        super().__init__(message, details, code="submission_rejected", status_code=409)
