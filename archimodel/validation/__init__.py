"""
Validation module for ArchiMate relationship legality.

This module implements the rules engine that decides which relationship kinds
may connect which element kinds, and explains rejections with alternatives.
"""

from .relationship_rules import (
    RELATIONSHIP_RULES,
    ValidationResult,
    guidance,
    is_valid,
    valid_kinds,
    valid_targets,
    validate,
)

__all__ = [
    "RELATIONSHIP_RULES",
    "ValidationResult",
    "guidance",
    "is_valid",
    "valid_kinds",
    "valid_targets",
    "validate",
]
