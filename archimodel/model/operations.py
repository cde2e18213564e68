"""
Model operations - construction, queries and in-place mutation.

Mutations keep the model's cross-references consistent: deleting an element
also deletes the relationships that touch it and its diagram occurrences, and
deleting a relationship deletes its diagram connections. None of these
operations check relationship legality; call
``archimodel.validation.validate`` before constructing a relationship.

All mutating functions change the model in place and return it.
"""

import logging
import re
import uuid
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..config.constants import CODEC_CONFIG, VIEW_LAYOUT
from ..exceptions import NotFoundError
from ..taxonomy.classifier import folder_tag_for, layer_of
from ..taxonomy.types import DEFAULT_FOLDERS
from .entities import (
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

logger = logging.getLogger(__name__)

UPDATABLE_ELEMENT_FIELDS = ("name", "documentation", "properties")
DIRECTIONS = ("incoming", "outgoing", "both")


# ============================================================================
# CONSTRUCTION
# ============================================================================

def generate_id() -> str:
    """Generate an id in Archi's format: "id-" followed by 32 hex characters."""
    return f"id-{uuid.uuid4().hex}"


def create_empty_model(name: str, model_id: Optional[str] = None) -> Model:
    """
    Create a new model with the standard nine-folder skeleton.

    Args:
        name: Model name
        model_id: Optional model id; generated when omitted

    Returns:
        Empty Model with one folder per layer plus Relations and Views
    """
    folders = [Folder(id=generate_id(), name=folder_name, tag=tag) for tag, folder_name in DEFAULT_FOLDERS]
    model = Model(
        id=model_id or generate_id(),
        name=name,
        version=CODEC_CONFIG.DEFAULT_MODEL_VERSION,
        folders=folders,
    )
    logger.info(f"Created empty model '{name}' ({model.id})")
    return model


# ============================================================================
# QUERIES
# ============================================================================

def all_elements(model: Model) -> List[Element]:
    """All elements of the model, in folder order."""
    return list(model.iter_elements())


def get_element(model: Model, element_id: str) -> Optional[Element]:
    for element in model.iter_elements():
        if element.id == element_id:
            return element
    return None


def elements_by_kind(model: Model, kind: str) -> List[Element]:
    return [element for element in model.iter_elements() if element.kind == kind]


def find_elements_by_name(model: Model, pattern: str) -> List[Element]:
    """
    Find elements whose name matches a regular expression, case-insensitively.

    Args:
        model: Model to search
        pattern: Regular expression searched anywhere in the name

    Returns:
        Matching elements in folder order
    """
    regex = re.compile(pattern, re.IGNORECASE)
    return [element for element in model.iter_elements() if regex.search(element.name)]


def get_relationship(model: Model, relationship_id: str) -> Optional[Relationship]:
    for relationship in model.relationships:
        if relationship.id == relationship_id:
            return relationship
    return None


def get_diagram(model: Model, diagram_id: str) -> Optional[Diagram]:
    for diagram in model.diagrams:
        if diagram.id == diagram_id:
            return diagram
    return None


def relationships_for_element(model: Model, element_id: str, direction: str = "both") -> List[Relationship]:
    """
    Relationships touching an element.

    Args:
        model: Model to search
        element_id: Element id
        direction: "outgoing" (element is source), "incoming" (element is
                   target) or "both"

    Returns:
        Matching relationships in model order
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")

    result = []
    for rel in model.relationships:
        outgoing = rel.source_id == element_id
        incoming = rel.target_id == element_id
        if direction == "outgoing" and outgoing:
            result.append(rel)
        elif direction == "incoming" and incoming:
            result.append(rel)
        elif direction == "both" and (outgoing or incoming):
            result.append(rel)
    return result


def get_folder_by_tag(model: Model, tag: str) -> Optional[Folder]:
    """First folder (depth first) carrying the given kind-tag."""
    for folder in model.iter_folders():
        if folder.tag == tag:
            return folder
    return None


def find_dangling_relationships(model: Model) -> List[Relationship]:
    """Relationships whose source or target id matches no element in the model."""
    element_ids = {element.id for element in model.iter_elements()}
    return [
        rel for rel in model.relationships
        if rel.source_id not in element_ids or rel.target_id not in element_ids
    ]


def layer_summary(model: Model) -> Dict:
    """
    Count elements per layer and kind.

    Returns:
        Dictionary with model name, totals and a ``by_layer`` mapping of
        layer name to {kind: count}
    """
    by_layer: Dict[str, Dict[str, int]] = {}
    elements = all_elements(model)
    for element in elements:
        layer = layer_of(element.kind).value
        kinds = by_layer.setdefault(layer, {})
        kinds[element.kind] = kinds.get(element.kind, 0) + 1

    return {
        "model_name": model.name,
        "total_elements": len(elements),
        "total_relationships": len(model.relationships),
        "total_views": len(model.diagrams),
        "by_layer": by_layer,
    }


def impact_analysis(model: Model, element_id: str, direction: str = "both", max_depth: int = 2) -> Dict:
    """
    Find the elements reachable from an element through relationships.

    Walks relationships depth first up to ``max_depth`` hops, visiting each
    element once.

    Args:
        model: Model to analyze
        element_id: Root element id
        direction: "incoming", "outgoing" or "both"
        max_depth: Maximum number of hops from the root

    Returns:
        Dictionary with the root element, the settings used and the list of
        impacted elements (depth, direction, relationship kind, id, name, kind)

    Raises:
        NotFoundError: If the root element does not exist
    """
    root = get_element(model, element_id)
    if root is None:
        raise NotFoundError(f"Element not found: {element_id}", reference_id=element_id)

    visited: Set[str] = set()
    impacted: List[Dict] = []

    def analyze(current_id: str, depth: int) -> None:
        if depth > max_depth or current_id in visited:
            return
        visited.add(current_id)

        for rel in relationships_for_element(model, current_id, direction):
            is_source = rel.source_id == current_id
            other_id = rel.target_id if is_source else rel.source_id
            if other_id in visited:
                continue
            other = get_element(model, other_id)
            impacted.append({
                "depth": depth,
                "direction": "outgoing" if is_source else "incoming",
                "relationship": rel.kind,
                "element_id": other_id,
                "element_name": other.name if other else "Unknown",
                "element_kind": other.kind if other else "Unknown",
            })
            analyze(other_id, depth + 1)

    analyze(element_id, 1)

    return {
        "root": {"id": root.id, "name": root.name, "kind": root.kind},
        "direction": direction,
        "max_depth": max_depth,
        "impacted": impacted,
        "total_impacted": len(impacted),
    }


# ============================================================================
# MUTATIONS
# ============================================================================

def add_element(model: Model, element: Element) -> Model:
    """
    File an element into the first folder whose tag matches its layer.

    Folders are searched depth first. If no folder carries the tag, the
    model is left unchanged.

    Raises:
        UnknownKindError: If the element kind is not in the taxonomy
    """
    tag = folder_tag_for(element.kind)
    for folder in model.iter_folders():
        if folder.tag == tag:
            folder.elements.append(element)
            logger.debug(f"Added {element.kind} '{element.name}' to folder '{folder.name}'")
            return model

    logger.warning(f"No '{tag}' folder in model {model.id}; element {element.id} not added")
    return model


def add_relationship(model: Model, relationship: Relationship) -> Model:
    model.relationships.append(relationship)
    return model


def add_diagram(model: Model, diagram: Diagram) -> Model:
    model.diagrams.append(diagram)
    return model


def remove_element(model: Model, element_id: str) -> Model:
    """
    Remove an element and everything that refers to it.

    Removes the element from its folder, every relationship using it as
    source or target (with those relationships' diagram connections), and
    every diagram object showing it at any nesting depth.
    """
    for folder in model.iter_folders():
        folder.elements = [e for e in folder.elements if e.id != element_id]

    removed_rel_ids = {
        rel.id for rel in model.relationships
        if rel.source_id == element_id or rel.target_id == element_id
    }
    model.relationships = [rel for rel in model.relationships if rel.id not in removed_rel_ids]

    for diagram in model.diagrams:
        _prune_diagram(
            diagram,
            drop_object=lambda obj: obj.element_id == element_id,
            drop_connection=lambda conn: conn.relationship_id in removed_rel_ids,
        )

    logger.debug(f"Removed element {element_id} and {len(removed_rel_ids)} relationship(s)")
    return model


def remove_relationship(model: Model, relationship_id: str) -> Model:
    """Remove a relationship and every diagram connection drawing it."""
    model.relationships = [rel for rel in model.relationships if rel.id != relationship_id]
    for diagram in model.diagrams:
        _prune_diagram(
            diagram,
            drop_object=lambda obj: False,
            drop_connection=lambda conn: conn.relationship_id == relationship_id,
        )
    return model


def update_element(model: Model, element_id: str, updates: Mapping) -> Model:
    """
    Update name, documentation and/or properties of an element in place.

    Args:
        model: Model holding the element
        element_id: Element to update
        updates: Mapping with any of "name", "documentation", "properties";
                 keys that are absent leave the field untouched. Properties
                 may be Property objects, (key, value) pairs or
                 {"key": ..., "value": ...} mappings.

    Returns:
        The same model

    Raises:
        ValueError: If ``updates`` names a field that cannot be updated
    """
    unknown = set(updates) - set(UPDATABLE_ELEMENT_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update element fields: {sorted(unknown)}")

    element = get_element(model, element_id)
    if element is None:
        logger.warning(f"update_element: element {element_id} not found in model {model.id}")
        return model

    if "name" in updates:
        element.name = updates["name"]
    if "documentation" in updates:
        element.documentation = updates["documentation"]
    if "properties" in updates:
        element.properties = _coerce_properties(updates["properties"])
    return model


# ============================================================================
# VIEW EDITING
# ============================================================================

def add_element_to_view(
    model: Model,
    diagram_id: str,
    element_id: str,
    x: Optional[int] = None,
    y: Optional[int] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> DiagramObject:
    """
    Place an element on a view as a new top-level diagram object.

    Missing coordinates come from the auto-placement grid, missing sizes
    from the codec defaults.

    Returns:
        The created DiagramObject

    Raises:
        NotFoundError: If the view or the element does not exist
    """
    diagram = _require_diagram(model, diagram_id)
    if get_element(model, element_id) is None:
        raise NotFoundError(f"Element not found: {element_id}", reference_id=element_id)

    default_x, default_y = VIEW_LAYOUT.position_for(len(diagram.objects))
    obj = DiagramObject(
        id=generate_id(),
        element_id=element_id,
        bounds=Bounds(
            x=default_x if x is None else x,
            y=default_y if y is None else y,
            width=CODEC_CONFIG.DEFAULT_OBJECT_WIDTH if width is None else width,
            height=CODEC_CONFIG.DEFAULT_OBJECT_HEIGHT if height is None else height,
        ),
    )
    diagram.objects.append(obj)
    return obj


def add_connection_to_view(
    model: Model,
    diagram_id: str,
    relationship_id: str,
    source_object_id: str,
    target_object_id: str,
) -> DiagramConnection:
    """
    Draw a relationship between two objects already on a view.

    The connection is owned by the source object; its id is recorded on the
    target object's incoming list.

    Returns:
        The created DiagramConnection

    Raises:
        NotFoundError: If the view, relationship or either object does not exist
    """
    diagram = _require_diagram(model, diagram_id)
    if get_relationship(model, relationship_id) is None:
        raise NotFoundError(f"Relationship not found: {relationship_id}", reference_id=relationship_id)

    source = diagram.find_object(source_object_id)
    if source is None:
        raise NotFoundError(f"Source diagram object not found: {source_object_id}", reference_id=source_object_id)
    target = diagram.find_object(target_object_id)
    if target is None:
        raise NotFoundError(f"Target diagram object not found: {target_object_id}", reference_id=target_object_id)

    connection = DiagramConnection(
        id=generate_id(),
        source_object_id=source_object_id,
        target_object_id=target_object_id,
        relationship_id=relationship_id,
    )
    source.outgoing_connections.append(connection)
    target.incoming_connection_ids.append(connection.id)
    return connection


# ============================================================================
# HELPERS
# ============================================================================

def _require_diagram(model: Model, diagram_id: str) -> Diagram:
    diagram = get_diagram(model, diagram_id)
    if diagram is None:
        raise NotFoundError(f"View not found: {diagram_id}", reference_id=diagram_id)
    return diagram


def _coerce_properties(values: Iterable) -> List[Property]:
    properties = []
    for value in values:
        if isinstance(value, Property):
            properties.append(value)
        elif isinstance(value, Mapping):
            properties.append(Property(key=value["key"], value=value["value"]))
        else:
            key, val = value
            properties.append(Property(key=key, value=val))
    return properties


def _prune_objects(objects: List[DiagramObject], drop_object) -> Tuple[List[DiagramObject], List[DiagramObject]]:
    """Split an object list into (kept, removed); removed subtrees go whole."""
    kept, removed = [], []
    for obj in objects:
        if drop_object(obj):
            removed.append(obj)
            continue
        obj.children, removed_children = _prune_objects(obj.children, drop_object)
        removed.extend(removed_children)
        kept.append(obj)
    return kept, removed


def _prune_diagram(diagram: Diagram, drop_object, drop_connection) -> None:
    diagram.objects, removed = _prune_objects(diagram.objects, drop_object)

    removed_object_ids = set()
    removed_connection_ids = set()
    for subtree in removed:
        for obj in subtree.walk():
            removed_object_ids.add(obj.id)
            removed_connection_ids.update(conn.id for conn in obj.outgoing_connections)

    for obj in diagram.iter_objects():
        kept_connections = []
        for conn in obj.outgoing_connections:
            if drop_connection(conn) or conn.target_object_id in removed_object_ids:
                removed_connection_ids.add(conn.id)
            else:
                kept_connections.append(conn)
        obj.outgoing_connections = kept_connections

    if removed_connection_ids:
        for obj in diagram.iter_objects():
            obj.incoming_connection_ids = [
                conn_id for conn_id in obj.incoming_connection_ids
                if conn_id not in removed_connection_ids
            ]
