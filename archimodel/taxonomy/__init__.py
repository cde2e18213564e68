"""
Taxonomy module - ArchiMate element and relationship kinds.

Holds the static taxonomy tables and the classifier that maps element kinds
to structural categories and architectural layers.
"""

from .types import (
    ALL_ELEMENT_KINDS,
    RELATIONSHIP_KINDS,
    Category,
    Layer,
)
from .classifier import classify, folder_tag_for, layer_of, layer_order

__all__ = [
    "ALL_ELEMENT_KINDS",
    "RELATIONSHIP_KINDS",
    "Category",
    "Layer",
    "classify",
    "folder_tag_for",
    "layer_of",
    "layer_order",
]
