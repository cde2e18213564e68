# tests/conftest.py
import dataclasses

import pytest

from archimodel.config.constants import CODEC_CONFIG, apply_config
from archimodel.model.entities import (
    Bendpoint,
    Bounds,
    Diagram,
    DiagramConnection,
    DiagramObject,
    Element,
    Property,
    Relationship,
)
from archimodel.model.operations import add_diagram, add_element, add_relationship, create_empty_model


@pytest.fixture
def sample_model():
    """
    Small model spanning four layers with one view.

    Elements: actor, process, component, data object, node, equipment, goal.
    Relationships: actor -Assignment-> process, component -Serving-> process,
    process -Access(Read)-> data, process -Influence(+)-> goal.
    View: actor and process connected, component box nesting the data object.
    """
    model = create_empty_model("Sample", model_id="model-sample")
    model.documentation = "Sample model for tests"

    for element in (
        Element(id="actor", kind="BusinessActor", name="Customer",
                properties=[Property(key="owner", value="Sales")]),
        Element(id="process", kind="BusinessProcess", name="Handle Order", documentation="Order intake"),
        Element(id="component", kind="ApplicationComponent", name="Order System"),
        Element(id="data", kind="DataObject", name="Order Record"),
        Element(id="node", kind="Node", name="App Server"),
        Element(id="equipment", kind="Equipment", name="Rack"),
        Element(id="goal", kind="Goal", name="Faster Delivery"),
    ):
        add_element(model, element)

    for rel in (
        Relationship(id="rel-assign", kind="Assignment", source_id="actor", target_id="process"),
        Relationship(id="rel-serve", kind="Serving", source_id="component", target_id="process",
                     name="serves", properties=[Property(key="owner", value="IT")]),
        Relationship(id="rel-access", kind="Access", source_id="process", target_id="data", access_type="Read"),
        Relationship(id="rel-influence", kind="Influence", source_id="process", target_id="goal",
                     influence_modifier="+"),
    ):
        add_relationship(model, rel)

    connection = DiagramConnection(
        id="conn-assign",
        source_object_id="obj-actor",
        target_object_id="obj-process",
        relationship_id="rel-assign",
        bendpoints=[Bendpoint(x=10, y=20)],
    )
    diagram = Diagram(
        id="view-main",
        name="Main View",
        viewpoint="Layered",
        objects=[
            DiagramObject(id="obj-actor", element_id="actor", bounds=Bounds(x=10, y=10),
                          outgoing_connections=[connection]),
            DiagramObject(id="obj-process", element_id="process", bounds=Bounds(x=200, y=10),
                          incoming_connection_ids=["conn-assign"]),
            DiagramObject(
                id="obj-component", element_id="component", bounds=Bounds(x=10, y=200, width=300, height=200),
                children=[DiagramObject(id="obj-data", element_id="data", bounds=Bounds(x=20, y=40))],
            ),
        ],
    )
    add_diagram(model, diagram)
    return model


@pytest.fixture(autouse=True)
def restore_codec_config():
    """Undo any load_config/apply_config a test made to the global codec config."""
    snapshot = dataclasses.replace(CODEC_CONFIG)
    yield
    apply_config(snapshot)
