"""
ArchiMate Open Exchange Format Reader.

Parses the flat, container-organized exchange format: ``elements``,
``relationships`` and ``views/diagrams`` lists whose entries carry a bare
``xsi:type`` (``BusinessActor``, ``Serving``). The format has no folders, so
elements are filed into a fresh nine-folder skeleton by layer, while
relationships and views go straight to the model.

Tags are matched by local name, so documents with or without the Open Group
default namespace are both accepted.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..config.constants import CODEC_CONFIG, NAMESPACES
from ..exceptions import InvalidDocumentError, NotFoundError
from ..model.entities import (
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
from ..taxonomy.classifier import folder_tag_for
from ..taxonomy.types import (
    ACCESS_TYPES,
    ELEMENT_LAYER_MAPPING,
    RELATIONSHIP_KINDS,
)
from ..utils.diagnostics import ParseDiagnostics
from ..utils.file_utils import read_text_file

logger = logging.getLogger(__name__)

XSI_TYPE = f"{{{NAMESPACES.XSI}}}type"
XML_LANG = f"{{{NAMESPACES.XML}}}lang"

# Skeleton used for elements read from the exchange format: (id, name, tag)
EXCHANGE_FOLDERS: Tuple[Tuple[str, str, str], ...] = (
    ("folder-motivation", "Motivation", "motivation"),
    ("folder-strategy", "Strategy", "strategy"),
    ("folder-business", "Business", "business"),
    ("folder-application", "Application", "application"),
    ("folder-technology", "Technology & Physical", "technology"),
    ("folder-implementation", "Implementation & Migration", "implementation_migration"),
    ("folder-other", "Other", "other"),
    ("folder-relations", "Relations", "relations"),
    ("folder-diagrams", "Views", "diagrams"),
)


def _local_name(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _children(node: Optional[ET.Element], name: str) -> Iterator[ET.Element]:
    if node is None:
        return
    for child in node:
        if _local_name(child.tag) == name:
            yield child


def _child(node: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    return next(_children(node, name), None)


def _type_of(node: ET.Element) -> str:
    return node.get(XSI_TYPE) or node.get("xsi:type") or node.get("type") or ""


def _localized_text(node: ET.Element, name: str) -> Optional[str]:
    """
    Text of a language-tagged child such as ``<name xml:lang="en">``.

    Prefers the configured language and falls back to the first variant.
    The text is returned as written, whitespace included.
    """
    variants = list(_children(node, name))
    if not variants:
        return None
    for variant in variants:
        if variant.get(XML_LANG) == CODEC_CONFIG.DEFAULT_LANGUAGE:
            return variant.text or ""
    return variants[0].text or ""


def _int_attr(node: ET.Element, name: str, default: int) -> int:
    raw = node.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(float(raw))
    except ValueError as e:
        raise InvalidDocumentError(f"Attribute {name}={raw!r} is not a number", tag=_local_name(node.tag)) from e


def map_element_kind(type_name: str) -> Optional[str]:
    """Element kind for a bare exchange type name, or None if unknown."""
    return type_name if type_name in ELEMENT_LAYER_MAPPING else None


def map_relationship_kind(type_name: str) -> Optional[str]:
    """Relationship kind for a bare exchange type name; a trailing "Relationship" is ignored."""
    if type_name.endswith("Relationship"):
        type_name = type_name[: -len("Relationship")]
    return type_name if type_name in RELATIONSHIP_KINDS else None


def create_folder_structure() -> List[Folder]:
    """Fresh nine-folder skeleton for an imported model."""
    return [Folder(id=folder_id, name=name, tag=tag) for folder_id, name, tag in EXCHANGE_FOLDERS]


class ExchangeFormatReader:
    """
    Reader for the Open Exchange format.

    One reader instance reads one document; skipped entries are collected
    on ``self.diagnostics``.
    """

    def __init__(self, source: Optional[str] = None):
        self.source = source
        self.diagnostics = ParseDiagnostics(source=source)
        self._property_names: Dict[str, str] = {}

    def parse(self, xml_text: str) -> Model:
        """
        Parse an exchange-format document.

        Raises:
            InvalidDocumentError: If the XML is malformed or the root is not a model
        """
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            logger.error(f"XML parsing error in exchange document: {e}")
            raise InvalidDocumentError(f"Malformed XML: {e}", path=self.source) from e

        if _local_name(root.tag) != "model":
            raise InvalidDocumentError(
                "Invalid exchange document: missing model root element",
                path=self.source,
                tag=root.tag,
            )

        self._property_names = self._parse_property_definitions(_child(root, "propertyDefinitions"))

        model_name = _localized_text(root, "name")
        model = Model(
            id=root.get("identifier") or "model-1",
            name=model_name if model_name is not None else "Imported Model",
            version=root.get("version") or CODEC_CONFIG.DEFAULT_MODEL_VERSION,
            documentation=_localized_text(root, "documentation"),
            folders=create_folder_structure(),
        )

        folders_by_tag = {folder.tag: folder for folder in model.folders}
        for node in _children(_child(root, "elements"), "element"):
            element = self._parse_element(node)
            if element:
                folders_by_tag[folder_tag_for(element.kind)].elements.append(element)

        for node in _children(_child(root, "relationships"), "relationship"):
            relationship = self._parse_relationship(node)
            if relationship:
                model.relationships.append(relationship)

        views = _child(root, "views")
        # Some tools write views/view without the diagrams wrapper
        container = _child(views, "diagrams")
        if container is None:
            container = views
        for node in _children(container, "view"):
            model.diagrams.append(self._parse_view(node))

        logger.info(
            f"Imported exchange model '{model.name}': {sum(1 for _ in model.iter_elements())} elements, "
            f"{len(model.relationships)} relationships, {len(model.diagrams)} views"
        )
        return model

    def _parse_property_definitions(self, container: Optional[ET.Element]) -> Dict[str, str]:
        names = {}
        for node in _children(container, "propertyDefinition"):
            def_id = node.get("identifier", "")
            names[def_id] = _localized_text(node, "name") or def_id
        return names

    def _parse_properties(self, node: ET.Element) -> List[Property]:
        properties = []
        for prop in _children(_child(node, "properties"), "property"):
            ref = prop.get("propertyDefinitionRef", "")
            properties.append(Property(
                key=self._property_names.get(ref, ref),
                value=_localized_text(prop, "value") or "",
            ))
        return properties

    def _parse_element(self, node: ET.Element) -> Optional[Element]:
        type_name = _type_of(node)
        kind = map_element_kind(type_name)
        if kind is None:
            self.diagnostics.skip("elements", type_name, node.get("identifier"), "unknown element type")
            return None

        return Element(
            id=node.get("identifier", ""),
            kind=kind,
            name=_localized_text(node, "name") or "",
            documentation=_localized_text(node, "documentation"),
            properties=self._parse_properties(node),
        )

    def _parse_relationship(self, node: ET.Element) -> Optional[Relationship]:
        type_name = _type_of(node)
        kind = map_relationship_kind(type_name)
        if kind is None:
            self.diagnostics.skip("relationships", type_name, node.get("identifier"), "unknown relationship type")
            return None

        relationship = Relationship(
            id=node.get("identifier", ""),
            kind=kind,
            source_id=node.get("source", ""),
            target_id=node.get("target", ""),
            name=_localized_text(node, "name"),
            documentation=_localized_text(node, "documentation"),
            properties=self._parse_properties(node),
        )
        if kind == "Access":
            access = node.get("accessType")
            relationship.access_type = access if access in ACCESS_TYPES else None
        elif kind == "Influence":
            relationship.influence_modifier = node.get("modifier")
        return relationship

    def _parse_node(self, node: ET.Element, objects_by_id: Dict[str, DiagramObject]) -> DiagramObject:
        try:
            bounds = Bounds(
                x=_int_attr(node, "x", 0),
                y=_int_attr(node, "y", 0),
                width=_int_attr(node, "w", CODEC_CONFIG.DEFAULT_OBJECT_WIDTH),
                height=_int_attr(node, "h", CODEC_CONFIG.DEFAULT_OBJECT_HEIGHT),
            )
        except ValueError as e:
            raise InvalidDocumentError(str(e), path=self.source, tag="node") from e

        obj = DiagramObject(
            id=node.get("identifier", ""),
            element_id=node.get("elementRef", ""),
            bounds=bounds,
        )
        objects_by_id[obj.id] = obj
        obj.children = [self._parse_node(child, objects_by_id) for child in _children(node, "node")]
        return obj

    def _parse_view(self, node: ET.Element) -> Diagram:
        objects_by_id: Dict[str, DiagramObject] = {}
        diagram = Diagram(
            id=node.get("identifier", ""),
            name=_localized_text(node, "name") or "",
            viewpoint=node.get("viewpoint") or None,
            documentation=_localized_text(node, "documentation"),
            objects=[self._parse_node(child, objects_by_id) for child in _children(node, "node")],
        )

        for conn_node in _children(node, "connection"):
            connection = DiagramConnection(
                id=conn_node.get("identifier", ""),
                source_object_id=conn_node.get("source", ""),
                target_object_id=conn_node.get("target", ""),
                relationship_id=conn_node.get("relationshipRef", ""),
                bendpoints=[
                    Bendpoint(x=_int_attr(bp, "x", 0), y=_int_attr(bp, "y", 0))
                    for bp in _children(conn_node, "bendpoint")
                ],
            )
            source = objects_by_id.get(connection.source_object_id)
            if source is None:
                self.diagnostics.skip(f"view:{diagram.id}", _type_of(conn_node), connection.id,
                                      f"source node {connection.source_object_id} not on view")
                continue
            source.outgoing_connections.append(connection)
            target = objects_by_id.get(connection.target_object_id)
            if target is not None:
                target.incoming_connection_ids.append(connection.id)

        return diagram


def read_flat_with_diagnostics(xml_text: str, source: Optional[str] = None) -> Tuple[Model, ParseDiagnostics]:
    """
    Parse an exchange-format document and report skipped entries.

    Returns:
        (model, diagnostics)
    """
    reader = ExchangeFormatReader(source=source)
    model = reader.parse(xml_text)
    return model, reader.diagnostics


def read_flat(xml_text: str) -> Model:
    """
    Parse an Open Exchange Format XML string into a model.

    Raises:
        InvalidDocumentError: If the XML is malformed or the root is not a model
    """
    model, _ = read_flat_with_diagnostics(xml_text)
    return model


def read_flat_file(path: Union[str, Path]) -> Model:
    """
    Read and parse an Open Exchange Format file.

    Raises:
        NotFoundError: If the file does not exist
        InvalidDocumentError: If the XML is malformed or the root is not a model
    """
    try:
        content = read_text_file(path, encoding=CODEC_CONFIG.ENCODING)
    except FileNotFoundError as e:
        logger.error(f"Exchange file not found: {path}")
        raise NotFoundError(f"Exchange file not found: {path}", path=str(path)) from e
    model, _ = read_flat_with_diagnostics(content, source=str(path))
    return model
