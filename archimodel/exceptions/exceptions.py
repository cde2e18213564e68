"""
Custom exceptions for archimodel.

This module defines all custom exceptions raised by the codecs, the classifier
and the relationship rules, so callers get the offending path, tag, kind or
reference id without parsing the message.
"""

from datetime import datetime, timezone
from typing import List, Optional


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ArchiModelError(Exception):
    """Base class for all archimodel errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.timestamp = _utc_now()


class NotFoundError(ArchiModelError):
    """
    Raised when a referenced file or reference id does not exist.

    Used by the codecs for a missing model file, and by the model operations
    when a view, element, relationship or diagram object id cannot be resolved.
    """

    def __init__(self, message: str, path: Optional[str] = None, reference_id: Optional[str] = None):
        """
        Initialize not-found error.

        Args:
            message: Error message
            path: Optional path of the missing file
            reference_id: Optional id that could not be resolved
        """
        super().__init__(message)
        self.path = path
        self.reference_id = reference_id

    def __str__(self):
        base = super().__str__()
        if self.path:
            return f"{base} | Path: {self.path}"
        if self.reference_id:
            return f"{base} | Reference: {self.reference_id}"
        return base


class InvalidDocumentError(ArchiModelError):
    """
    Raised when an XML document cannot be turned into a model.

    Covers malformed XML, a missing root model element and missing
    required attributes.
    """

    def __init__(self, message: str, path: Optional[str] = None, tag: Optional[str] = None):
        """
        Initialize invalid document error.

        Args:
            message: Error message
            path: Optional path of the offending file
            tag: Optional XML tag that was missing or malformed
        """
        super().__init__(message)
        self.path = path
        self.tag = tag

    def __str__(self):
        parts = [super().__str__()]
        if self.tag:
            parts.append(f"Tag: {self.tag}")
        if self.path:
            parts.append(f"Path: {self.path}")
        return " | ".join(parts)


class UnknownKindError(ArchiModelError):
    """Raised by ``layer_of`` when an element kind is not in the taxonomy."""

    def __init__(self, message: str, kind: str):
        super().__init__(message)
        self.kind = kind


class ValidationRejectedError(ArchiModelError):
    """
    Raised when a relationship fails the legality rules.

    The core never raises this on its own; callers convert a failed
    ``ValidationResult`` with ``raise_if_invalid()``. The legal alternatives
    are always attached so the caller can self-correct.
    """

    def __init__(
        self,
        message: str,
        source_kind: str,
        target_kind: str,
        relationship_kind: str,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize validation rejected error.

        Args:
            message: Error message
            source_kind: Element kind at the relationship source
            target_kind: Element kind at the relationship target
            relationship_kind: The rejected relationship kind
            suggestions: Legal relationship kinds between the two element kinds
        """
        super().__init__(message)
        self.source_kind = source_kind
        self.target_kind = target_kind
        self.relationship_kind = relationship_kind
        self.suggestions = suggestions or []

    def __str__(self):
        base = super().__str__()
        if self.suggestions:
            return f"{base} | Suggestions: {', '.join(self.suggestions)}"
        return base


# Convenience function for error logging
def log_exception(exception: Exception, logger, context: dict = None):
    """
    Log exception with full context.

    Args:
        exception: Exception to log
        logger: Logger instance
        context: Optional context dictionary
    """
    error_type = type(exception).__name__

    log_data = {
        "error_type": error_type,
        "error_message": str(exception),
        "logged_at": _utc_now(),
    }

    if context:
        log_data.update(context)

    if hasattr(exception, "timestamp"):
        log_data["exception_timestamp"] = exception.timestamp

    if isinstance(exception, NotFoundError):
        log_data["missing_path"] = exception.path
        log_data["missing_reference"] = exception.reference_id

    elif isinstance(exception, InvalidDocumentError):
        log_data["document_path"] = exception.path
        log_data["document_tag"] = exception.tag

    elif isinstance(exception, UnknownKindError):
        log_data["kind"] = exception.kind

    elif isinstance(exception, ValidationRejectedError):
        log_data["relationship_kind"] = exception.relationship_kind
        log_data["suggestions"] = exception.suggestions

    logger.error(f"Exception occurred: {error_type}", extra=log_data)
