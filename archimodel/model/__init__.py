"""
Model module - in-memory ArchiMate model and the operations that mutate it.
"""

from .entities import (
    Bendpoint,
    Bounds,
    Diagram,
    DiagramConnection,
    DiagramObject,
    Element,
    Folder,
    Model,
    Property,
    Relationship,
)

__all__ = [
    "Bendpoint",
    "Bounds",
    "Diagram",
    "DiagramConnection",
    "DiagramObject",
    "Element",
    "Folder",
    "Model",
    "Property",
    "Relationship",
]
