"""Open Exchange Format codec (flat, container-organized XML)."""

from .reader import (
    ExchangeFormatReader,
    create_folder_structure,
    map_element_kind,
    map_relationship_kind,
    read_flat,
    read_flat_file,
    read_flat_with_diagnostics,
)
from .writer import ExchangeFormatWriter, write_flat, write_flat_file

__all__ = [
    "ExchangeFormatReader",
    "ExchangeFormatWriter",
    "create_folder_structure",
    "map_element_kind",
    "map_relationship_kind",
    "read_flat",
    "read_flat_file",
    "read_flat_with_diagnostics",
    "write_flat",
    "write_flat_file",
]
