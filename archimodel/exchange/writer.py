"""
ArchiMate Open Exchange Format Writer.

Serializes a model into the flat exchange format. Folder structure is not
part of the format and is dropped; nested diagram objects are written as
nested ``node`` entries and every connection of a view is listed once at view
level.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ..config.constants import CODEC_CONFIG, NAMESPACES
from ..model.entities import Diagram, DiagramObject, Model, Property
from ..taxonomy.types import ELEMENT_LAYER_MAPPING, RELATIONSHIP_KINDS
from ..utils.file_utils import write_text_atomic

logger = logging.getLogger(__name__)

XSI_TYPE = "xsi:type"
XML_LANG = "xml:lang"


class ExchangeFormatWriter:
    """Builds one exchange document from one model."""

    def __init__(self, model: Model, language: Optional[str] = None):
        self.model = model
        self.language = language or CODEC_CONFIG.DEFAULT_LANGUAGE
        self._property_refs: Dict[str, str] = {}

    def _localized(self, parent: ET.Element, tag: str, text: Optional[str]) -> None:
        if text is not None:
            ET.SubElement(parent, tag, {XML_LANG: self.language}).text = text

    def _collect_property_keys(self) -> None:
        """Assign one propertyDefinition id per distinct key, in first-use order."""
        owners: List[Iterable[Property]] = [element.properties for element in self.model.iter_elements()]
        owners.extend(rel.properties for rel in self.model.relationships)
        for properties in owners:
            for prop in properties:
                if prop.key not in self._property_refs:
                    self._property_refs[prop.key] = f"propid-{len(self._property_refs) + 1}"

    def _properties(self, parent: ET.Element, properties: List[Property]) -> None:
        if not properties:
            return
        container = ET.SubElement(parent, "properties")
        for prop in properties:
            node = ET.SubElement(container, "property", {"propertyDefinitionRef": self._property_refs[prop.key]})
            ET.SubElement(node, "value", {XML_LANG: self.language}).text = prop.value

    def _elements(self, root: ET.Element) -> None:
        container = ET.SubElement(root, "elements")
        for element in self.model.iter_elements():
            if element.kind not in ELEMENT_LAYER_MAPPING:
                logger.warning(f"Element {element.id} has unknown kind '{element.kind}', not written")
                continue
            node = ET.SubElement(container, "element", {"identifier": element.id, XSI_TYPE: element.kind})
            self._localized(node, "name", element.name)
            self._localized(node, "documentation", element.documentation)
            self._properties(node, element.properties)

    def _relationships(self, root: ET.Element) -> None:
        container = ET.SubElement(root, "relationships")
        for rel in self.model.relationships:
            if rel.kind not in RELATIONSHIP_KINDS:
                logger.warning(f"Relationship {rel.id} has unknown kind '{rel.kind}', not written")
                continue
            attrs = {
                "identifier": rel.id,
                "source": rel.source_id,
                "target": rel.target_id,
                XSI_TYPE: rel.kind,
            }
            if rel.kind == "Access" and rel.access_type:
                attrs["accessType"] = rel.access_type
            if rel.kind == "Influence" and rel.influence_modifier:
                attrs["modifier"] = rel.influence_modifier
            node = ET.SubElement(container, "relationship", attrs)
            self._localized(node, "name", rel.name)
            self._localized(node, "documentation", rel.documentation)
            self._properties(node, rel.properties)

    def _property_definitions(self, root: ET.Element) -> None:
        if not self._property_refs:
            return
        container = ET.SubElement(root, "propertyDefinitions")
        for key, ref in self._property_refs.items():
            node = ET.SubElement(container, "propertyDefinition", {"identifier": ref, "type": "string"})
            self._localized(node, "name", key)

    def _node(self, parent: ET.Element, obj: DiagramObject) -> None:
        attrs = {"identifier": obj.id}
        if obj.element_id:
            attrs["elementRef"] = obj.element_id
            attrs[XSI_TYPE] = "Element"
        else:
            attrs[XSI_TYPE] = "Container"
        attrs.update({
            "x": str(obj.bounds.x),
            "y": str(obj.bounds.y),
            "w": str(obj.bounds.width),
            "h": str(obj.bounds.height),
        })
        node = ET.SubElement(parent, "node", attrs)
        for child in obj.children:
            self._node(node, child)

    def _view(self, parent: ET.Element, diagram: Diagram) -> None:
        attrs = {"identifier": diagram.id, XSI_TYPE: "Diagram"}
        if diagram.viewpoint:
            attrs["viewpoint"] = diagram.viewpoint
        view = ET.SubElement(parent, "view", attrs)
        self._localized(view, "name", diagram.name)
        self._localized(view, "documentation", diagram.documentation)

        for obj in diagram.objects:
            self._node(view, obj)
        for conn in diagram.iter_connections():
            conn_attrs = {"identifier": conn.id}
            if conn.relationship_id:
                conn_attrs["relationshipRef"] = conn.relationship_id
                conn_attrs[XSI_TYPE] = "Relationship"
            else:
                conn_attrs[XSI_TYPE] = "Line"
            conn_attrs["source"] = conn.source_object_id
            conn_attrs["target"] = conn.target_object_id
            node = ET.SubElement(view, "connection", conn_attrs)
            for bendpoint in conn.bendpoints:
                ET.SubElement(node, "bendpoint", {"x": str(bendpoint.x), "y": str(bendpoint.y)})

    def build(self) -> ET.Element:
        """Build the ``model`` root element."""
        root = ET.Element("model", {
            "xmlns": NAMESPACES.EXCHANGE,
            "xmlns:xsi": NAMESPACES.XSI,
            "xsi:schemaLocation": NAMESPACES.EXCHANGE_SCHEMA_LOCATION,
            "identifier": self.model.id,
            "version": self.model.version or CODEC_CONFIG.DEFAULT_MODEL_VERSION,
        })
        self._localized(root, "name", self.model.name)
        self._localized(root, "documentation", self.model.documentation)

        self._collect_property_keys()
        self._elements(root)
        self._relationships(root)
        self._property_definitions(root)

        if self.model.diagrams:
            diagrams = ET.SubElement(ET.SubElement(root, "views"), "diagrams")
            for diagram in self.model.diagrams:
                self._view(diagrams, diagram)
        return root


def write_flat(model: Model) -> str:
    """
    Serialize a model to Open Exchange Format XML.

    Args:
        model: Model to serialize

    Returns:
        The XML document text, including the declaration
    """
    root = ExchangeFormatWriter(model).build()
    ET.indent(root, space=CODEC_CONFIG.INDENT)
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="{CODEC_CONFIG.ENCODING}"?>\n{body}\n'


def write_flat_file(model: Model, path: Union[str, Path]) -> Path:
    """Write a model as an exchange-format file, atomically."""
    written = write_text_atomic(path, write_flat(model), encoding=CODEC_CONFIG.ENCODING)
    logger.info(f"Exported model '{model.name}' to {written}")
    return written
