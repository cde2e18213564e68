"""
archimodel - ArchiMate model management.

Reads and writes ArchiMate models in the folder-organized ``.archimate`` format
and the flat Open Exchange format, classifies element kinds into categories and
layers, and decides which relationships may legally connect two elements.
"""

__version__ = "0.1.0"
__author__ = "Enterprise Architecture Team"

from .taxonomy.classifier import classify, layer_of, layer_order
from .validation.relationship_rules import (
    ValidationResult,
    guidance,
    is_valid,
    valid_kinds,
    valid_targets,
    validate,
)
from .model.entities import (
    Diagram,
    DiagramConnection,
    DiagramObject,
    Element,
    Folder,
    Model,
    Relationship,
)
from .model.operations import (
    add_diagram,
    add_element,
    add_relationship,
    create_empty_model,
    remove_element,
    remove_relationship,
    update_element,
)
from .archimate.parser import read_hierarchical, read_hierarchical_with_diagnostics
from .archimate.writer import write_hierarchical
from .exchange.reader import read_flat, read_flat_file, read_flat_with_diagnostics
from .exchange.writer import write_flat, write_flat_file

__all__ = [
    "classify",
    "layer_of",
    "layer_order",
    "ValidationResult",
    "guidance",
    "is_valid",
    "valid_kinds",
    "valid_targets",
    "validate",
    "Diagram",
    "DiagramConnection",
    "DiagramObject",
    "Element",
    "Folder",
    "Model",
    "Relationship",
    "add_diagram",
    "add_element",
    "add_relationship",
    "create_empty_model",
    "remove_element",
    "remove_relationship",
    "update_element",
    "read_hierarchical",
    "read_hierarchical_with_diagnostics",
    "write_hierarchical",
    "read_flat",
    "read_flat_file",
    "read_flat_with_diagnostics",
    "write_flat",
    "write_flat_file",
]
