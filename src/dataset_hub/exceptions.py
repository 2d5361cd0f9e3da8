from __future__ import annotations


class DatasetHubError(Exception):
    """Base error. Carries the HTTP status it should surface as."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DatasetHubError):
    status_code = 400
    default_message = "Missing required fields"


class FormatError(DatasetHubError):
    """Submitted dataset JSON could not be parsed or is missing fields."""

    status_code = 400
    default_message = "Invalid JSON format"


class AuthError(DatasetHubError):
    status_code = 401
    default_message = "Invalid passcode"


class NotFoundError(DatasetHubError):
    status_code = 404
    default_message = "Teammate not found"


class PersistenceError(DatasetHubError):
    status_code = 500
    default_message = "Database operation failed"


class ExportError(DatasetHubError):
    status_code = 500
    default_message = "Export failed"


__all__ = [
    "DatasetHubError",
    "ValidationError",
    "FormatError",
    "AuthError",
    "NotFoundError",
    "PersistenceError",
    "ExportError",
]
