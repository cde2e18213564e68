"""
Taxonomy classifier.

Pure functions over the taxonomy tables: the structural category and the
architectural layer of an element kind, and the fixed ordering of layers used
as a directionality signal by the relationship rules.

The two lookups deliberately differ on unknown kinds: ``classify`` falls back
to ``Category.COMPOSITE`` while ``layer_of`` raises ``UnknownKindError``.
"""

import logging

from ..exceptions import UnknownKindError
from .types import (
    ELEMENT_CATEGORY_MAPPING,
    ELEMENT_LAYER_MAPPING,
    LAYER_FOLDER_TAGS,
    LAYER_ORDER,
    Category,
    Layer,
)

logger = logging.getLogger(__name__)


def classify(kind: str) -> Category:
    """
    Return the structural category of an element kind.

    Args:
        kind: Element kind, e.g. "BusinessActor"

    Returns:
        The kind's Category, or Category.COMPOSITE for unrecognized kinds
    """
    category = ELEMENT_CATEGORY_MAPPING.get(kind)
    if category is None:
        logger.debug(f"No category for kind '{kind}', defaulting to Composite")
        return Category.COMPOSITE
    return category


def layer_of(kind: str) -> Layer:
    """
    Return the architectural layer of an element kind.

    Args:
        kind: Element kind, e.g. "Node"

    Returns:
        The kind's Layer (Physical kinds report Layer.PHYSICAL)

    Raises:
        UnknownKindError: If the kind is not in the taxonomy
    """
    layer = ELEMENT_LAYER_MAPPING.get(kind)
    if layer is None:
        raise UnknownKindError(f"Unknown element type: {kind}", kind=kind)
    return layer


def layer_order(layer: Layer) -> int:
    """Position of a layer in the stack, Motivation=0 through Composite=6."""
    return LAYER_ORDER[Layer(layer)]


def folder_tag_for(kind: str) -> str:
    """Folder kind-tag an element of this kind is filed under."""
    return LAYER_FOLDER_TAGS[layer_of(kind)]
