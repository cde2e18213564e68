"""
ArchiMate module for reading and writing Archi ``.archimate`` model files.

This is the folder-organized format: elements sit in layer folders, while
relationships and views are stored in the Relations and Views folders.
"""

from .parser import (
    ArchiMateModelParser,
    parse_hierarchical_string,
    read_hierarchical,
    read_hierarchical_with_diagnostics,
)
from .writer import serialize_hierarchical, write_hierarchical

__all__ = [
    "ArchiMateModelParser",
    "parse_hierarchical_string",
    "read_hierarchical",
    "read_hierarchical_with_diagnostics",
    "serialize_hierarchical",
    "write_hierarchical",
]
