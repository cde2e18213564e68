"""
ArchiMate Model Parser - read Archi's folder-organized ``.archimate`` files.

The document root carries the model id, name, version and documentation, and
holds a tree of ``folder`` elements. Inside the folder tagged ``relations``
every ``element`` is a relationship; inside the folder tagged ``diagrams``
every ``element`` is a view whose nested ``child`` elements are diagram
objects carrying ``bounds``, ``sourceConnection`` and ``bendpoint`` entries.
Everything else is a model element.

Entries whose ``xsi:type`` is not in the taxonomy are left out of the model
and recorded in the ParseDiagnostics returned by
``read_hierarchical_with_diagnostics``.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple, Union

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
from ..taxonomy.types import (
    ACCESS_CODE_TO_TYPE,
    DEFAULT_ACCESS_TYPE,
    DIAGRAM_MODEL_XML_TYPE,
    DIAGRAM_OBJECT_XML_TYPE,
    DIAGRAMS_FOLDER_TAG,
    RELATIONS_FOLDER_TAG,
    XML_TYPE_TO_ELEMENT_KIND,
    XML_TYPE_TO_RELATIONSHIP_KIND,
)
from ..utils.diagnostics import ParseDiagnostics

logger = logging.getLogger(__name__)

XSI_TYPE = f"{{{NAMESPACES.XSI}}}type"


def resolve_model_path(path: Union[str, Path]) -> Path:
    """Return ``path`` itself for ``.archimate`` files, else ``path/model.archimate``."""
    model_path = Path(path)
    if model_path.suffix == CODEC_CONFIG.MODEL_SUFFIX:
        return model_path
    return model_path / CODEC_CONFIG.MODEL_FILENAME


def _local_name(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _xsi_type(xml_element: ET.Element) -> str:
    # Namespaced attribute first; tolerate documents that never declared xsi
    return xml_element.get(XSI_TYPE) or xml_element.get("xsi:type") or ""


def _text_of(xml_element: ET.Element, child_tag: str) -> Optional[str]:
    child = xml_element.find(child_tag)
    if child is None:
        return None
    return child.text or ""


def _int_attr(xml_element: Optional[ET.Element], name: str, default: int) -> int:
    if xml_element is None:
        return default
    raw = xml_element.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(float(raw))
    except ValueError as e:
        raise InvalidDocumentError(f"Attribute {name}={raw!r} is not a number", tag=xml_element.tag) from e


def _parse_properties(xml_element: ET.Element) -> List[Property]:
    return [
        Property(key=prop.get("key", ""), value=prop.get("value", ""))
        for prop in xml_element.findall("property")
    ]


class ArchiMateModelParser:
    """
    Parser for Archi's ``.archimate`` model files.

    One parser instance reads one document; after ``parse`` the collected
    diagnostics are available on ``self.diagnostics``.
    """

    def __init__(self):
        """Initialize the parser."""
        self.model_path: Optional[str] = None
        self.diagnostics = ParseDiagnostics()

    def parse_file(self, path: Union[str, Path]) -> Model:
        """
        Load a model from a ``.archimate`` file or a directory containing one.

        Args:
            path: File path, or directory holding ``model.archimate``

        Returns:
            The parsed Model

        Raises:
            NotFoundError: If the file does not exist
            InvalidDocumentError: If the XML is malformed or has no model root
        """
        model_path = resolve_model_path(path)
        self.model_path = str(model_path)
        self.diagnostics = ParseDiagnostics(source=self.model_path)

        if not model_path.is_file():
            logger.error(f"Model file not found: {model_path}")
            raise NotFoundError(f"Model file not found: {model_path}", path=str(model_path))

        logger.info(f"Loading ArchiMate model from: {model_path}")
        try:
            root = ET.parse(model_path).getroot()
        except ET.ParseError as e:
            logger.error(f"XML parsing error in {model_path}: {e}")
            raise InvalidDocumentError(f"Malformed XML: {e}", path=str(model_path)) from e

        return self._parse_root(root)

    def parse_string(self, xml_text: str, source: Optional[str] = None) -> Model:
        """
        Parse a model from an in-memory ``.archimate`` document.

        Raises:
            InvalidDocumentError: If the XML is malformed or has no model root
        """
        self.model_path = source
        self.diagnostics = ParseDiagnostics(source=source)
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise InvalidDocumentError(f"Malformed XML: {e}", path=source) from e
        return self._parse_root(root)

    def _parse_root(self, root: ET.Element) -> Model:
        if _local_name(root.tag) != "model":
            logger.error(f"Missing archimate:model root element, found {root.tag}")
            raise InvalidDocumentError(
                "Invalid ArchiMate model: missing archimate:model root element",
                path=self.model_path,
                tag=root.tag,
            )

        model_id = root.get("id")
        if not model_id:
            raise InvalidDocumentError("Model root has no id attribute", path=self.model_path, tag=root.tag)

        documentation = _text_of(root, "documentation")
        if documentation is None:
            documentation = _text_of(root, "purpose")

        model = Model(
            id=model_id,
            name=root.get("name", ""),
            version=root.get("version") or CODEC_CONFIG.DEFAULT_MODEL_VERSION,
            documentation=documentation,
        )

        for xml_folder in root.findall("folder"):
            model.folders.append(self._parse_folder(xml_folder, model, inherited_tag=""))

        logger.info(
            f"Loaded model '{model.name}': {sum(1 for _ in model.iter_elements())} elements, "
            f"{len(model.relationships)} relationships, {len(model.diagrams)} diagrams"
        )
        return model

    def _parse_folder(self, xml_folder: ET.Element, model: Model, inherited_tag: str) -> Folder:
        """
        Parse a folder and its subfolders.

        User subfolders carry no type attribute; they inherit the tag of the
        enclosing top-level folder so that relations and views nested in
        them are still recognized.
        """
        folder_id = xml_folder.get("id")
        if not folder_id:
            raise InvalidDocumentError("Folder has no id attribute", path=self.model_path, tag="folder")

        folder = Folder(id=folder_id, name=xml_folder.get("name", ""), tag=xml_folder.get("type", ""))
        context = folder.tag or inherited_tag

        for xml_element in xml_folder.findall("element"):
            if context == RELATIONS_FOLDER_TAG:
                relationship = self._parse_relationship(xml_element, context)
                if relationship:
                    model.relationships.append(relationship)
            elif context == DIAGRAMS_FOLDER_TAG:
                diagram = self._parse_diagram(xml_element, context)
                if diagram:
                    model.diagrams.append(diagram)
            else:
                element = self._parse_element(xml_element, context)
                if element:
                    folder.elements.append(element)

        for xml_subfolder in xml_folder.findall("folder"):
            folder.subfolders.append(self._parse_folder(xml_subfolder, model, context))

        return folder

    def _parse_element(self, xml_element: ET.Element, context: str) -> Optional[Element]:
        xsi_type = _xsi_type(xml_element)
        kind = XML_TYPE_TO_ELEMENT_KIND.get(xsi_type)
        if kind is None:
            self.diagnostics.skip(f"folder:{context or 'untagged'}", xsi_type, xml_element.get("id"),
                                  "unknown element type")
            return None

        element = Element(
            id=xml_element.get("id", ""),
            kind=kind,
            name=xml_element.get("name", ""),
            documentation=_text_of(xml_element, "documentation"),
            properties=_parse_properties(xml_element),
        )
        logger.debug(f"Parsed element: {element}")
        return element

    def _parse_relationship(self, xml_element: ET.Element, context: str) -> Optional[Relationship]:
        xsi_type = _xsi_type(xml_element)
        kind = XML_TYPE_TO_RELATIONSHIP_KIND.get(xsi_type)
        if kind is None:
            self.diagnostics.skip(f"folder:{context}", xsi_type, xml_element.get("id"),
                                  "unknown relationship type")
            return None

        relationship = Relationship(
            id=xml_element.get("id", ""),
            kind=kind,
            source_id=xml_element.get("source", ""),
            target_id=xml_element.get("target", ""),
            name=xml_element.get("name"),
            documentation=_text_of(xml_element, "documentation"),
            properties=_parse_properties(xml_element),
        )

        if kind == "Access":
            code = xml_element.get("accessType")
            relationship.access_type = ACCESS_CODE_TO_TYPE.get(code, DEFAULT_ACCESS_TYPE)
        elif kind == "Influence":
            relationship.influence_modifier = xml_element.get("modifier")

        return relationship

    def _parse_diagram(self, xml_element: ET.Element, context: str) -> Optional[Diagram]:
        xsi_type = _xsi_type(xml_element)
        if xsi_type != DIAGRAM_MODEL_XML_TYPE:
            self.diagnostics.skip(f"folder:{context}", xsi_type, xml_element.get("id"),
                                  "not an ArchiMate diagram")
            return None

        diagram = Diagram(
            id=xml_element.get("id", ""),
            name=xml_element.get("name", ""),
            viewpoint=xml_element.get("viewpoint") or None,
            documentation=_text_of(xml_element, "documentation"),
        )
        diagram.objects = self._parse_children(xml_element, diagram.id)
        self._drop_dangling_connections(diagram)
        return diagram

    def _parse_children(self, xml_parent: ET.Element, diagram_id: str) -> List[DiagramObject]:
        objects = []
        for xml_child in xml_parent.findall("child"):
            xsi_type = _xsi_type(xml_child)
            # Notes, groups and diagram references have no model element behind them
            if xsi_type and xsi_type != DIAGRAM_OBJECT_XML_TYPE:
                self.diagnostics.skip(f"view:{diagram_id}", xsi_type, xml_child.get("id"),
                                      "not an ArchiMate diagram object")
                continue
            objects.append(self._parse_diagram_object(xml_child, diagram_id))
        return objects

    def _parse_diagram_object(self, xml_child: ET.Element, diagram_id: str) -> DiagramObject:
        incoming = xml_child.get("targetConnections", "")
        return DiagramObject(
            id=xml_child.get("id", ""),
            element_id=xml_child.get("archimateElement", ""),
            bounds=self._parse_bounds(xml_child.find("bounds")),
            outgoing_connections=[
                self._parse_connection(conn) for conn in xml_child.findall("sourceConnection")
            ],
            incoming_connection_ids=incoming.split() if incoming else [],
            children=self._parse_children(xml_child, diagram_id),
        )

    def _drop_dangling_connections(self, diagram: Diagram) -> None:
        """Remove connections that touch an object skipped while parsing the view."""
        object_ids = {obj.id for obj in diagram.iter_objects()}
        for obj in diagram.iter_objects():
            kept = []
            for connection in obj.outgoing_connections:
                if connection.target_object_id in object_ids:
                    kept.append(connection)
                else:
                    self.diagnostics.skip(f"view:{diagram.id}", "connection", connection.id,
                                          f"target object {connection.target_object_id} is not on the view")
            obj.outgoing_connections = kept

        connection_ids = {connection.id for connection in diagram.iter_connections()}
        for obj in diagram.iter_objects():
            obj.incoming_connection_ids = [
                connection_id for connection_id in obj.incoming_connection_ids if connection_id in connection_ids
            ]

    def _parse_bounds(self, xml_bounds: Optional[ET.Element]) -> Bounds:
        width = _int_attr(xml_bounds, "width", CODEC_CONFIG.DEFAULT_OBJECT_WIDTH)
        height = _int_attr(xml_bounds, "height", CODEC_CONFIG.DEFAULT_OBJECT_HEIGHT)
        # Archi writes -1 for "default size"
        if width == -1:
            width = CODEC_CONFIG.DEFAULT_OBJECT_WIDTH
        if height == -1:
            height = CODEC_CONFIG.DEFAULT_OBJECT_HEIGHT
        try:
            return Bounds(
                x=_int_attr(xml_bounds, "x", 0),
                y=_int_attr(xml_bounds, "y", 0),
                width=width,
                height=height,
            )
        except ValueError as e:
            raise InvalidDocumentError(str(e), path=self.model_path, tag="bounds") from e

    def _parse_connection(self, xml_conn: ET.Element) -> DiagramConnection:
        bendpoints = []
        for xml_bp in xml_conn.findall("bendpoint"):
            # Archi itself writes startX/startY; x/y is the plain form
            x = _int_attr(xml_bp, "x", _int_attr(xml_bp, "startX", 0))
            y = _int_attr(xml_bp, "y", _int_attr(xml_bp, "startY", 0))
            bendpoints.append(Bendpoint(x=x, y=y))

        return DiagramConnection(
            id=xml_conn.get("id", ""),
            source_object_id=xml_conn.get("source", ""),
            target_object_id=xml_conn.get("target", ""),
            relationship_id=xml_conn.get("archimateRelationship", ""),
            bendpoints=bendpoints,
        )


def read_hierarchical_with_diagnostics(path: Union[str, Path]) -> Tuple[Model, ParseDiagnostics]:
    """
    Read a ``.archimate`` model and report skipped entries.

    Returns:
        (model, diagnostics)
    """
    parser = ArchiMateModelParser()
    model = parser.parse_file(path)
    return model, parser.diagnostics


def read_hierarchical(path: Union[str, Path]) -> Model:
    """
    Read a ``.archimate`` model file.

    Args:
        path: File path, or directory holding ``model.archimate``

    Returns:
        The parsed Model

    Raises:
        NotFoundError: If the file does not exist
        InvalidDocumentError: If the XML is malformed or has no model root
    """
    model, _ = read_hierarchical_with_diagnostics(path)
    return model


def parse_hierarchical_string(xml_text: str) -> Model:
    """Parse a ``.archimate`` document held in memory."""
    return ArchiMateModelParser().parse_string(xml_text)
