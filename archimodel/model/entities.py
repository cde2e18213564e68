"""
ArchiMate domain model.

In-memory representation shared by both codecs and the model operations.
The Model owns its Folders (which own Elements) and owns Relationships and
Diagrams directly; diagram objects and connections refer to elements and
relationships by id only.

A Model is a plain value: nothing here holds process-wide state, so any
number of models can be loaded side by side.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass
class Property:
    """A single key/value property attached to an element or relationship."""
    key: str
    value: str


@dataclass
class Element:
    """
    A model element of one of the enumerated element kinds.

    The ``id`` must be unique within its Model.
    """
    id: str                                   # Unique within the model
    kind: str                                 # Element kind, e.g. "BusinessActor"
    name: str
    documentation: Optional[str] = None
    properties: List[Property] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.kind}: {self.name}"


@dataclass
class Relationship:
    """
    A typed edge between two elements.

    ``access_type`` is only meaningful for Access relationships and
    ``influence_modifier`` only for Influence relationships; the codecs
    ignore them on other kinds. Endpoints are not checked against the model.
    """
    id: str
    kind: str                                 # Relationship kind, e.g. "Serving"
    source_id: str
    target_id: str
    name: Optional[str] = None
    documentation: Optional[str] = None
    access_type: Optional[str] = None         # Read | Write | ReadWrite
    influence_modifier: Optional[str] = None  # ++ | + | 0 | - | --
    properties: List[Property] = field(default_factory=list)


@dataclass
class Bounds:
    """Position and size of a diagram object, in layout units."""
    x: int = 0
    y: int = 0
    width: int = 120
    height: int = 55

    def __post_init__(self):
        """Validate bounds are non-negative."""
        for field_name in ("x", "y", "width", "height"):
            value = getattr(self, field_name)
            if value < 0:
                raise ValueError(f"Bounds {field_name}={value} must be non-negative")


@dataclass
class Bendpoint:
    """Intermediate routing point of a diagram connection."""
    x: int
    y: int


@dataclass
class DiagramConnection:
    """A drawn relationship between two diagram objects."""
    id: str
    source_object_id: str
    target_object_id: str
    relationship_id: str
    bendpoints: List[Bendpoint] = field(default_factory=list)


@dataclass
class DiagramObject:
    """
    A positioned occurrence of an element on a diagram.

    Outgoing connections are owned by their source object; the target only
    records the connection ids in ``incoming_connection_ids``.
    """
    id: str
    element_id: str
    bounds: Bounds = field(default_factory=Bounds)
    outgoing_connections: List[DiagramConnection] = field(default_factory=list)
    incoming_connection_ids: List[str] = field(default_factory=list)
    children: List["DiagramObject"] = field(default_factory=list)

    def walk(self) -> Iterator["DiagramObject"]:
        """Yield this object and all nested children, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class Diagram:
    """A view: a positioned projection of elements and relationships."""
    id: str
    name: str
    viewpoint: Optional[str] = None
    documentation: Optional[str] = None
    objects: List[DiagramObject] = field(default_factory=list)

    def iter_objects(self) -> Iterator[DiagramObject]:
        """Yield every diagram object at any nesting depth."""
        for obj in self.objects:
            yield from obj.walk()

    def iter_connections(self) -> Iterator[DiagramConnection]:
        for obj in self.iter_objects():
            yield from obj.outgoing_connections

    def find_object(self, object_id: str) -> Optional[DiagramObject]:
        for obj in self.iter_objects():
            if obj.id == object_id:
                return obj
        return None


@dataclass
class Folder:
    """
    A folder in the model tree.

    ``tag`` is the folder kind-tag (motivation, strategy, business,
    application, technology, implementation_migration, other, relations,
    diagrams); nested user folders may leave it empty.
    """
    id: str
    name: str
    tag: str = ""
    elements: List[Element] = field(default_factory=list)
    subfolders: List["Folder"] = field(default_factory=list)

    def walk(self) -> Iterator["Folder"]:
        """Yield this folder and all nested subfolders, depth first."""
        yield self
        for subfolder in self.subfolders:
            yield from subfolder.walk()


@dataclass
class Model:
    """An ArchiMate model."""
    id: str
    name: str
    version: str = "5.0.0"
    documentation: Optional[str] = None
    folders: List[Folder] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    diagrams: List[Diagram] = field(default_factory=list)

    def iter_folders(self) -> Iterator[Folder]:
        for folder in self.folders:
            yield from folder.walk()

    def iter_elements(self) -> Iterator[Element]:
        """Yield every element in folder order."""
        for folder in self.iter_folders():
            yield from folder.elements
