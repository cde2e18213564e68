"""
ArchiMate 3.2 taxonomy tables.

Static enumeration of every element kind and relationship kind, the layer and
category vocabularies, the folder tags used by the ``.archimate`` format, and
the qualified XML type names used by both codecs. Element and relationship
kinds are plain strings (e.g. ``"BusinessActor"``, ``"Serving"``) so they can be
written to and read from XML without conversion.
"""

from enum import Enum
from typing import Dict, Tuple


class Category(str, Enum):
    """Structural category of an element kind, drives the relationship rules."""
    ACTIVE_STRUCTURE = "ActiveStructure"
    INTERFACE = "Interface"
    BEHAVIOR_INTERNAL = "BehaviorInternal"
    BEHAVIOR_EXTERNAL = "BehaviorExternal"
    EVENT = "Event"
    PASSIVE_STRUCTURE = "PassiveStructure"
    STRATEGY = "Strategy"
    MOTIVATION = "Motivation"
    IMPLEMENTATION_MIGRATION = "ImplementationMigration"
    COMPOSITE = "Composite"


class Layer(str, Enum):
    """Architectural layer of an element kind."""
    MOTIVATION = "Motivation"
    STRATEGY = "Strategy"
    BUSINESS = "Business"
    APPLICATION = "Application"
    TECHNOLOGY = "Technology"
    PHYSICAL = "Physical"
    IMPLEMENTATION = "Implementation"
    COMPOSITE = "Composite"


# ============================================================================
# ELEMENT KINDS (grouped by ArchiMate chapter)
# ============================================================================

MOTIVATION_ELEMENT_KINDS: Tuple[str, ...] = (
    "Stakeholder",
    "Driver",
    "Assessment",
    "Goal",
    "Outcome",
    "Principle",
    "Requirement",
    "Constraint",
    "Meaning",
    "Value",
)

STRATEGY_ELEMENT_KINDS: Tuple[str, ...] = (
    "Resource",
    "Capability",
    "ValueStream",
    "CourseOfAction",
)

BUSINESS_ELEMENT_KINDS: Tuple[str, ...] = (
    # Active structure
    "BusinessActor",
    "BusinessRole",
    "BusinessCollaboration",
    "BusinessInterface",
    # Behavior
    "BusinessProcess",
    "BusinessFunction",
    "BusinessInteraction",
    "BusinessEvent",
    "BusinessService",
    # Passive structure
    "BusinessObject",
    "Contract",
    "Representation",
    # Composite
    "Product",
)

APPLICATION_ELEMENT_KINDS: Tuple[str, ...] = (
    "ApplicationComponent",
    "ApplicationCollaboration",
    "ApplicationInterface",
    "ApplicationFunction",
    "ApplicationInteraction",
    "ApplicationProcess",
    "ApplicationEvent",
    "ApplicationService",
    "DataObject",
)

PHYSICAL_ELEMENT_KINDS: Tuple[str, ...] = (
    "Equipment",
    "Facility",
    "DistributionNetwork",
    "Material",
)

# Physical kinds are listed with Technology, as the standard does
TECHNOLOGY_ELEMENT_KINDS: Tuple[str, ...] = (
    "Node",
    "Device",
    "SystemSoftware",
    "TechnologyCollaboration",
    "TechnologyInterface",
    "Path",
    "CommunicationNetwork",
    "TechnologyFunction",
    "TechnologyProcess",
    "TechnologyInteraction",
    "TechnologyEvent",
    "TechnologyService",
    "Artifact",
) + PHYSICAL_ELEMENT_KINDS

IMPLEMENTATION_ELEMENT_KINDS: Tuple[str, ...] = (
    "WorkPackage",
    "Deliverable",
    "ImplementationEvent",
    "Plateau",
    "Gap",
)

COMPOSITE_ELEMENT_KINDS: Tuple[str, ...] = (
    "Grouping",
    "Location",
)

ALL_ELEMENT_KINDS: Tuple[str, ...] = (
    MOTIVATION_ELEMENT_KINDS
    + STRATEGY_ELEMENT_KINDS
    + BUSINESS_ELEMENT_KINDS
    + APPLICATION_ELEMENT_KINDS
    + TECHNOLOGY_ELEMENT_KINDS
    + IMPLEMENTATION_ELEMENT_KINDS
    + COMPOSITE_ELEMENT_KINDS
)

# ============================================================================
# RELATIONSHIP KINDS
# ============================================================================

# Order matters: suggestions are reported in this order
RELATIONSHIP_KINDS: Tuple[str, ...] = (
    # Structural
    "Composition",
    "Aggregation",
    "Assignment",
    "Realization",
    # Dependency
    "Serving",
    "Access",
    "Influence",
    "Association",
    # Dynamic
    "Triggering",
    "Flow",
    # Other
    "Specialization",
)

ACCESS_TYPES: Tuple[str, ...] = ("Read", "Write", "ReadWrite")
INFLUENCE_MODIFIERS: Tuple[str, ...] = ("++", "+", "0", "-", "--")

# ============================================================================
# CATEGORY MEMBERSHIP
# ============================================================================

# Interfaces are listed separately but classified as ActiveStructure
ACTIVE_STRUCTURE_KINDS: Tuple[str, ...] = (
    "BusinessActor", "BusinessRole", "BusinessCollaboration",
    "ApplicationComponent", "ApplicationCollaboration",
    "Node", "Device", "SystemSoftware", "TechnologyCollaboration",
    "Equipment", "Facility",
)
INTERFACE_KINDS: Tuple[str, ...] = (
    "BusinessInterface", "ApplicationInterface", "TechnologyInterface",
)
BEHAVIOR_INTERNAL_KINDS: Tuple[str, ...] = (
    "BusinessProcess", "BusinessFunction", "BusinessInteraction",
    "ApplicationFunction", "ApplicationInteraction", "ApplicationProcess",
    "TechnologyFunction", "TechnologyProcess", "TechnologyInteraction",
)
BEHAVIOR_EXTERNAL_KINDS: Tuple[str, ...] = (
    "BusinessService", "ApplicationService", "TechnologyService",
)
EVENT_KINDS: Tuple[str, ...] = (
    "BusinessEvent", "ApplicationEvent", "TechnologyEvent", "ImplementationEvent",
)
PASSIVE_STRUCTURE_KINDS: Tuple[str, ...] = (
    "BusinessObject", "Contract", "Representation",
    "DataObject", "Artifact", "Material",
)
IMPLEMENTATION_MIGRATION_KINDS: Tuple[str, ...] = (
    "WorkPackage", "Deliverable", "Plateau", "Gap",
)
COMPOSITE_KINDS: Tuple[str, ...] = ("Grouping", "Location", "Product")

# Path, CommunicationNetwork and DistributionNetwork have no explicit
# category and fall through to Composite.
ELEMENT_CATEGORY_MAPPING: Dict[str, Category] = {}
for _kinds, _category in (
    (ACTIVE_STRUCTURE_KINDS, Category.ACTIVE_STRUCTURE),
    (INTERFACE_KINDS, Category.ACTIVE_STRUCTURE),
    (BEHAVIOR_INTERNAL_KINDS, Category.BEHAVIOR_INTERNAL),
    (BEHAVIOR_EXTERNAL_KINDS, Category.BEHAVIOR_EXTERNAL),
    (EVENT_KINDS, Category.EVENT),
    (PASSIVE_STRUCTURE_KINDS, Category.PASSIVE_STRUCTURE),
    (STRATEGY_ELEMENT_KINDS, Category.STRATEGY),
    (MOTIVATION_ELEMENT_KINDS, Category.MOTIVATION),
    (IMPLEMENTATION_MIGRATION_KINDS, Category.IMPLEMENTATION_MIGRATION),
    (COMPOSITE_KINDS, Category.COMPOSITE),
):
    for _kind in _kinds:
        ELEMENT_CATEGORY_MAPPING[_kind] = _category

# ============================================================================
# LAYERS AND FOLDERS
# ============================================================================

ELEMENT_LAYER_MAPPING: Dict[str, Layer] = {}
for _kinds, _layer in (
    (MOTIVATION_ELEMENT_KINDS, Layer.MOTIVATION),
    (STRATEGY_ELEMENT_KINDS, Layer.STRATEGY),
    (BUSINESS_ELEMENT_KINDS, Layer.BUSINESS),
    (APPLICATION_ELEMENT_KINDS, Layer.APPLICATION),
    (TECHNOLOGY_ELEMENT_KINDS, Layer.TECHNOLOGY),
    (PHYSICAL_ELEMENT_KINDS, Layer.PHYSICAL),
    (IMPLEMENTATION_ELEMENT_KINDS, Layer.IMPLEMENTATION),
    (COMPOSITE_ELEMENT_KINDS, Layer.COMPOSITE),
):
    for _kind in _kinds:
        ELEMENT_LAYER_MAPPING[_kind] = _layer

LAYER_ORDER: Dict[Layer, int] = {
    Layer.MOTIVATION: 0,
    Layer.STRATEGY: 1,
    Layer.BUSINESS: 2,
    Layer.APPLICATION: 3,
    Layer.TECHNOLOGY: 4,
    Layer.PHYSICAL: 4,
    Layer.IMPLEMENTATION: 5,
    Layer.COMPOSITE: 6,
}

FOLDER_TAGS: Tuple[str, ...] = (
    "motivation",
    "strategy",
    "business",
    "application",
    "technology",
    "implementation_migration",
    "other",
    "relations",
    "diagrams",
)

RELATIONS_FOLDER_TAG = "relations"
DIAGRAMS_FOLDER_TAG = "diagrams"

LAYER_FOLDER_TAGS: Dict[Layer, str] = {
    Layer.MOTIVATION: "motivation",
    Layer.STRATEGY: "strategy",
    Layer.BUSINESS: "business",
    Layer.APPLICATION: "application",
    Layer.TECHNOLOGY: "technology",
    Layer.PHYSICAL: "technology",  # Physical lives in the Technology folder
    Layer.IMPLEMENTATION: "implementation_migration",
    Layer.COMPOSITE: "other",
}

# Default folder skeleton as (tag, display name), in the order Archi writes it
DEFAULT_FOLDERS: Tuple[Tuple[str, str], ...] = (
    ("strategy", "Strategy"),
    ("business", "Business"),
    ("application", "Application"),
    ("technology", "Technology & Physical"),
    ("motivation", "Motivation"),
    ("implementation_migration", "Implementation & Migration"),
    ("other", "Other"),
    ("relations", "Relations"),
    ("diagrams", "Views"),
)

# ============================================================================
# QUALIFIED XML TYPE NAMES (folder-organized format)
# ============================================================================

XML_TYPE_PREFIX = "archimate"
DIAGRAM_MODEL_XML_TYPE = f"{XML_TYPE_PREFIX}:ArchimateDiagramModel"
DIAGRAM_OBJECT_XML_TYPE = f"{XML_TYPE_PREFIX}:DiagramObject"
CONNECTION_XML_TYPE = f"{XML_TYPE_PREFIX}:Connection"

XML_TYPE_TO_ELEMENT_KIND: Dict[str, str] = {
    f"{XML_TYPE_PREFIX}:{kind}": kind for kind in ALL_ELEMENT_KINDS
}
ELEMENT_KIND_TO_XML_TYPE: Dict[str, str] = {
    kind: xml_type for xml_type, kind in XML_TYPE_TO_ELEMENT_KIND.items()
}

XML_TYPE_TO_RELATIONSHIP_KIND: Dict[str, str] = {
    f"{XML_TYPE_PREFIX}:{kind}Relationship": kind for kind in RELATIONSHIP_KINDS
}
RELATIONSHIP_KIND_TO_XML_TYPE: Dict[str, str] = {
    kind: xml_type for xml_type, kind in XML_TYPE_TO_RELATIONSHIP_KIND.items()
}

# accessType attribute codes, numeric (Archi) or word form
ACCESS_CODE_TO_TYPE: Dict[str, str] = {
    "1": "Read",
    "2": "Write",
    "3": "ReadWrite",
    "read": "Read",
    "write": "Write",
    "readWrite": "ReadWrite",
}
ACCESS_TYPE_TO_CODE: Dict[str, str] = {
    "Read": "1",
    "Write": "2",
    "ReadWrite": "3",
}
DEFAULT_ACCESS_TYPE = "ReadWrite"

# ============================================================================
# DESCRIPTIONS (used by guidance text)
# ============================================================================

ELEMENT_DESCRIPTIONS: Dict[str, str] = {
    # Motivation
    "Stakeholder": "Represents the role of an individual, team, or organization that has interests in the architecture",
    "Driver": "Represents an external or internal condition that motivates an organization to define its goals",
    "Assessment": "Represents the result of an analysis of the state of affairs with respect to some driver",
    "Goal": "Represents a high-level statement of intent, direction, or desired end state",
    "Outcome": "Represents an end result, effect, or consequence of a certain state of affairs",
    "Principle": "Represents a statement of intent defining a general property that applies to any system",
    "Requirement": "Represents a statement of need defining a property that applies to a specific system",
    "Constraint": "Represents a limitation on aspects of the architecture, its implementation, or realization",
    "Meaning": "Represents the knowledge or expertise present in, or interpretation given to, a concept",
    "Value": "Represents the relative worth, utility, or importance of a concept",
    # Strategy
    "Resource": "Represents an asset owned or controlled by an individual or organization",
    "Capability": "Represents an ability that an active structure element possesses",
    "ValueStream": "Represents a sequence of activities that create an overall result for a stakeholder",
    "CourseOfAction": "Represents an approach or plan for configuring capabilities and resources",
    # Business
    "BusinessActor": "Represents a business entity that is capable of performing behavior",
    "BusinessRole": "Represents the responsibility for performing specific behavior",
    "BusinessCollaboration": "Represents an aggregate of business elements working together",
    "BusinessInterface": "Represents a point of access where business services are made available",
    "BusinessProcess": "Represents a sequence of business behaviors that achieves a specific result",
    "BusinessFunction": "Represents a collection of business behavior based on specific criteria",
    "BusinessInteraction": "Represents a unit of collective business behavior performed by a collaboration",
    "BusinessEvent": "Represents a business-related state change",
    "BusinessService": "Represents explicitly defined behavior that is exposed to the environment",
    "BusinessObject": "Represents a concept used within a particular business domain",
    "Contract": "Represents a formal or informal specification of an agreement",
    "Representation": "Represents a perceptible form of the information carried by a business object",
    "Product": "Represents a coherent collection of services and/or passive structure elements",
    # Application
    "ApplicationComponent": "Represents an encapsulation of application functionality",
    "ApplicationCollaboration": "Represents an aggregate of application components working together",
    "ApplicationInterface": "Represents a point of access where application services are made available",
    "ApplicationFunction": "Represents automated behavior that can be performed by an application component",
    "ApplicationInteraction": "Represents a unit of collective application behavior",
    "ApplicationProcess": "Represents a sequence of application behaviors that achieves a specific result",
    "ApplicationEvent": "Represents an application state change",
    "ApplicationService": "Represents an explicitly defined exposed application behavior",
    "DataObject": "Represents data structured for automated processing",
    # Technology
    "Node": "Represents a computational or physical resource that hosts other resources",
    "Device": "Represents a physical IT resource upon which software may be deployed",
    "SystemSoftware": "Represents software that provides an environment for other software",
    "TechnologyCollaboration": "Represents an aggregate of technology elements working together",
    "TechnologyInterface": "Represents a point of access where technology services are offered",
    "Path": "Represents a link between technology elements for data/energy/material exchange",
    "CommunicationNetwork": "Represents a set of structures that connects devices",
    "TechnologyFunction": "Represents a collection of technology behavior",
    "TechnologyProcess": "Represents a sequence of technology behaviors",
    "TechnologyInteraction": "Represents a unit of collective technology behavior",
    "TechnologyEvent": "Represents a technology state change",
    "TechnologyService": "Represents an explicitly defined exposed technology behavior",
    "Artifact": "Represents a piece of data used or produced in software development or deployment",
    # Physical
    "Equipment": "Represents physical machines, tools, or instruments",
    "Facility": "Represents a physical structure or environment",
    "DistributionNetwork": "Represents a physical network used to transport materials or energy",
    "Material": "Represents tangible physical matter or energy",
    # Implementation
    "WorkPackage": "Represents a series of actions to achieve specific results",
    "Deliverable": "Represents a precisely defined result of a work package",
    "ImplementationEvent": "Represents a state change related to implementation or migration",
    "Plateau": "Represents a relatively stable state of the architecture",
    "Gap": "Represents a statement of difference between two plateaus",
    # Composite
    "Grouping": "Aggregates or composes concepts that belong together",
    "Location": "Represents a conceptual or physical place where concepts are located",
}

RELATIONSHIP_DESCRIPTIONS: Dict[str, str] = {
    "Composition": "Represents that an element consists of one or more other concepts",
    "Aggregation": "Represents that an element combines one or more other concepts",
    "Assignment": "Represents the allocation of responsibility, performance, storage, or execution",
    "Realization": "Represents that an element plays a critical role in creating a more abstract element",
    "Serving": "Represents that an element provides its functionality to another element",
    "Access": "Represents the ability to observe or act upon passive structure elements",
    "Influence": "Represents that an element affects the implementation of some motivation element",
    "Association": "Represents an unspecified relationship",
    "Triggering": "Represents a temporal or causal relationship between elements",
    "Flow": "Represents transfer from one element to another",
    "Specialization": "Represents that an element is a particular kind of another element",
}


def is_element_kind(kind: str) -> bool:
    """Return True if ``kind`` is one of the enumerated element kinds."""
    return kind in ELEMENT_LAYER_MAPPING


def is_relationship_kind(kind: str) -> bool:
    """Return True if ``kind`` is one of the enumerated relationship kinds."""
    return kind in RELATIONSHIP_KINDS
