from .exceptions import (
    AuthError,
    DatasetHubError,
    ExportError,
    FormatError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DatasetHubError",
    "ValidationError",
    "FormatError",
    "AuthError",
    "NotFoundError",
    "PersistenceError",
    "ExportError",
]
