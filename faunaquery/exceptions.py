"""Fauna client exceptions."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import FaunaErrors


class FaunaError(Exception):
    """Base exception for Fauna client errors."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ConnectionError(FaunaError):
    """Failed to reach the Fauna endpoint."""

    pass


class TimeoutError(FaunaError):
    """The request did not complete before the configured timeout."""

    pass


class Unauthorized(FaunaError):
    """The secret was rejected (HTTP 401)."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "unauthorized")


class BadRequest(FaunaError):
    """The query was rejected by the server (HTTP 400)."""

    def __init__(self, errors: "FaunaErrors"):
        super().__init__(f"Bad request: {errors}", errors.first_code)
        self.errors = errors


class NotFound(FaunaError):
    """The referenced resource does not exist (HTTP 404)."""

    def __init__(self, errors: "FaunaErrors"):
        super().__init__(f"Not found: {errors}", errors.first_code)
        self.errors = errors


class DatabaseError(FaunaError):
    """Any other failed response. Carries the raw body text."""

    def __init__(self, body: str, status: int | None = None):
        super().__init__(f"Database error (status {status}): {body}")
        self.body = body
        self.status = status


class EmptyResponse(FaunaError):
    """The response carried no body to decode."""

    def __init__(self, message: str = "Empty response"):
        super().__init__(message)


class OtherError(FaunaError):
    """Request failed for a reason outside the other categories."""

    pass


class ConfigurationError(FaunaError):
    """The client could not be built from its configuration."""

    pass


class SerializationError(FaunaError):
    """An expression could not be serialized to JSON."""

    pass
