"""Exception classes for archimodel."""

from .exceptions import (
    ArchiModelError,
    InvalidDocumentError,
    NotFoundError,
    UnknownKindError,
    ValidationRejectedError,
    log_exception,
)

__all__ = [
    "ArchiModelError",
    "InvalidDocumentError",
    "NotFoundError",
    "UnknownKindError",
    "ValidationRejectedError",
    "log_exception",
]
