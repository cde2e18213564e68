"""
ArchiMate Model Writer - write Archi's folder-organized ``.archimate`` files.

Relationships and diagrams live at model level in memory; on write they are
placed back into the folders tagged ``relations`` and ``diagrams``. When the
model has no such folder, one is synthesized. All other folders are written
with their name, id, tag and subfolders as they are.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Union

from ..config.constants import CODEC_CONFIG, NAMESPACES
from ..model.entities import (
    Diagram,
    DiagramConnection,
    DiagramObject,
    Element,
    Folder,
    Model,
    Property,
    Relationship,
)
from ..model.operations import generate_id
from ..taxonomy.types import (
    ACCESS_TYPE_TO_CODE,
    CONNECTION_XML_TYPE,
    DEFAULT_FOLDERS,
    DIAGRAM_MODEL_XML_TYPE,
    DIAGRAM_OBJECT_XML_TYPE,
    DIAGRAMS_FOLDER_TAG,
    ELEMENT_KIND_TO_XML_TYPE,
    RELATIONSHIP_KIND_TO_XML_TYPE,
    RELATIONS_FOLDER_TAG,
)
from ..utils.file_utils import write_text_atomic
from .parser import resolve_model_path

logger = logging.getLogger(__name__)

# Qualified names are written literally so serialization does not depend on
# ElementTree's global namespace registry.
XSI_TYPE = "xsi:type"
_DEFAULT_FOLDER_NAMES = dict(DEFAULT_FOLDERS)


def _add_documentation(parent: ET.Element, documentation: Optional[str]) -> None:
    if documentation is not None:
        ET.SubElement(parent, "documentation").text = documentation


def _add_properties(parent: ET.Element, properties: List[Property]) -> None:
    for prop in properties:
        ET.SubElement(parent, "property", {"key": prop.key, "value": prop.value})


def _build_element(parent: ET.Element, element: Element) -> None:
    xml_type = ELEMENT_KIND_TO_XML_TYPE.get(element.kind)
    if xml_type is None:
        logger.warning(f"Element {element.id} has unknown kind '{element.kind}', not written")
        return
    node = ET.SubElement(parent, "element", {XSI_TYPE: xml_type, "name": element.name, "id": element.id})
    _add_documentation(node, element.documentation)
    _add_properties(node, element.properties)


def _build_relationship(parent: ET.Element, rel: Relationship) -> None:
    xml_type = RELATIONSHIP_KIND_TO_XML_TYPE.get(rel.kind)
    if xml_type is None:
        logger.warning(f"Relationship {rel.id} has unknown kind '{rel.kind}', not written")
        return

    attrs = {XSI_TYPE: xml_type, "id": rel.id, "source": rel.source_id, "target": rel.target_id}
    if rel.name is not None:
        attrs["name"] = rel.name
    if rel.kind == "Access" and rel.access_type:
        attrs["accessType"] = ACCESS_TYPE_TO_CODE.get(rel.access_type, "3")
    if rel.kind == "Influence" and rel.influence_modifier:
        attrs["modifier"] = rel.influence_modifier

    node = ET.SubElement(parent, "element", attrs)
    _add_documentation(node, rel.documentation)
    _add_properties(node, rel.properties)


def _build_connection(parent: ET.Element, conn: DiagramConnection) -> None:
    attrs = {
        XSI_TYPE: CONNECTION_XML_TYPE,
        "id": conn.id,
        "source": conn.source_object_id,
        "target": conn.target_object_id,
    }
    if conn.relationship_id:
        attrs["archimateRelationship"] = conn.relationship_id

    node = ET.SubElement(parent, "sourceConnection", attrs)
    for bendpoint in conn.bendpoints:
        ET.SubElement(node, "bendpoint", {"x": str(bendpoint.x), "y": str(bendpoint.y)})


def _build_diagram_object(parent: ET.Element, obj: DiagramObject) -> None:
    attrs = {XSI_TYPE: DIAGRAM_OBJECT_XML_TYPE, "id": obj.id}
    if obj.incoming_connection_ids:
        attrs["targetConnections"] = " ".join(obj.incoming_connection_ids)
    if obj.element_id:
        attrs["archimateElement"] = obj.element_id

    node = ET.SubElement(parent, "child", attrs)
    ET.SubElement(node, "bounds", {
        "x": str(obj.bounds.x),
        "y": str(obj.bounds.y),
        "width": str(obj.bounds.width),
        "height": str(obj.bounds.height),
    })
    for conn in obj.outgoing_connections:
        _build_connection(node, conn)
    for child in obj.children:
        _build_diagram_object(node, child)


def _build_diagram(parent: ET.Element, diagram: Diagram) -> None:
    attrs = {XSI_TYPE: DIAGRAM_MODEL_XML_TYPE, "name": diagram.name, "id": diagram.id}
    if diagram.viewpoint:
        attrs["viewpoint"] = diagram.viewpoint

    node = ET.SubElement(parent, "element", attrs)
    _add_documentation(node, diagram.documentation)
    for obj in diagram.objects:
        _build_diagram_object(node, obj)


def _folder_node(parent: ET.Element, folder: Folder) -> ET.Element:
    attrs = {"name": folder.name, "id": folder.id}
    if folder.tag:
        attrs["type"] = folder.tag
    return ET.SubElement(parent, "folder", attrs)


def _build_folder(parent: ET.Element, folder: Folder) -> None:
    node = _folder_node(parent, folder)
    for element in folder.elements:
        _build_element(node, element)
    for subfolder in folder.subfolders:
        _build_folder(node, subfolder)


def _special_folder(model: Model, tag: str) -> Folder:
    for folder in model.folders:
        if folder.tag == tag:
            return folder
    logger.debug(f"Model {model.id} has no '{tag}' folder, synthesizing one")
    return Folder(id=generate_id(), name=_DEFAULT_FOLDER_NAMES[tag], tag=tag)


def build_model_tree(model: Model) -> ET.Element:
    """
    Build the XML tree for a model.

    Returns:
        The ``archimate:model`` root element
    """
    root = ET.Element("archimate:model", {
        "xmlns:xsi": NAMESPACES.XSI,
        "xmlns:archimate": NAMESPACES.ARCHIMATE,
        "name": model.name,
        "id": model.id,
        "version": model.version or CODEC_CONFIG.DEFAULT_MODEL_VERSION,
    })

    relations = _special_folder(model, RELATIONS_FOLDER_TAG)
    diagrams = _special_folder(model, DIAGRAMS_FOLDER_TAG)
    folders = list(model.folders)
    for special in (relations, diagrams):
        if special not in folders:
            folders.append(special)

    for folder in folders:
        if folder is relations:
            node = _folder_node(root, folder)
            for rel in model.relationships:
                _build_relationship(node, rel)
            for subfolder in folder.subfolders:
                _build_folder(node, subfolder)
        elif folder is diagrams:
            node = _folder_node(root, folder)
            for diagram in model.diagrams:
                _build_diagram(node, diagram)
            for subfolder in folder.subfolders:
                _build_folder(node, subfolder)
        else:
            _build_folder(root, folder)

    _add_documentation(root, model.documentation)
    return root


def serialize_hierarchical(model: Model) -> str:
    """Serialize a model to ``.archimate`` XML text."""
    root = build_model_tree(model)
    ET.indent(root, space=CODEC_CONFIG.INDENT)
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="{CODEC_CONFIG.ENCODING}"?>\n{body}\n'


def write_hierarchical(model: Model, path: Union[str, Path]) -> Path:
    """
    Write a model as a ``.archimate`` file, atomically.

    Args:
        model: Model to write
        path: Target ``.archimate`` file, or a directory (then
              ``model.archimate`` inside it is written)

    Returns:
        The path actually written
    """
    file_path = resolve_model_path(path)
    written = write_text_atomic(file_path, serialize_hierarchical(model), encoding=CODEC_CONFIG.ENCODING)
    logger.info(
        f"Wrote model '{model.name}' to {written}: {len(model.relationships)} relationships, "
        f"{len(model.diagrams)} diagrams"
    )
    return written
