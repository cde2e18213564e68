"""
Unit tests for the Open Exchange Format codec.

Tests round-tripping, folder placement of imported elements, tolerance of
type-name variants, and error reporting.
"""

import pytest

from archimodel.exceptions import InvalidDocumentError, NotFoundError
from archimodel.exchange import (
    map_relationship_kind,
    read_flat,
    read_flat_file,
    read_flat_with_diagnostics,
    write_flat,
    write_flat_file,
)
from archimodel.model.entities import Element, Relationship
from archimodel.model.operations import add_element, create_empty_model, get_folder_by_tag

EXCHANGE_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<model xmlns="http://www.opengroup.org/xsd/archimate/3.0/"
       xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
       identifier="id-exchange">
  <name xml:lang="nl">Voorbeeld</name>
  <name xml:lang="en">Example</name>
  <elements>
    <element identifier="e-1" xsi:type="BusinessActor"><name xml:lang="en">Clerk</name></element>
    <element identifier="e-2" xsi:type="ApplicationService"><name xml:lang="en">Lookup</name></element>
    <element identifier="e-3" xsi:type="Facility"><name xml:lang="en">Plant</name></element>
    <element identifier="e-4" xsi:type="Gizmo"><name xml:lang="en">Unknown</name></element>
  </elements>
  <relationships>
    <relationship identifier="r-1" source="e-2" target="e-1" xsi:type="ServingRelationship"/>
    <relationship identifier="r-2" source="e-1" target="e-3" xsi:type="Association"/>
    <relationship identifier="r-3" source="e-1" target="e-2" xsi:type="Uses"/>
  </relationships>
  <views>
    <diagrams>
      <view identifier="v-1" xsi:type="Diagram">
        <name xml:lang="en">Overview</name>
        <node identifier="n-1" elementRef="e-1" xsi:type="Element" x="10" y="20" w="100" h="50"/>
        <node identifier="n-2" elementRef="e-2" xsi:type="Element" x="200" y="20"/>
        <connection identifier="c-1" relationshipRef="r-1" xsi:type="Relationship" source="n-2" target="n-1"/>
        <connection identifier="c-2" relationshipRef="r-2" xsi:type="Relationship" source="n-9" target="n-1"/>
      </view>
    </diagrams>
  </views>
</model>
"""


class TestRoundTrip:
    """Test write then read."""

    def test_round_trip_preserves_content(self, sample_model):
        """Test elements, relationships and views survive a round trip."""
        loaded = read_flat(write_flat(sample_model))

        assert loaded.id == sample_model.id
        assert loaded.name == sample_model.name
        assert loaded.version == sample_model.version
        assert loaded.documentation == sample_model.documentation
        assert {e.id: e for e in loaded.iter_elements()} == {e.id: e for e in sample_model.iter_elements()}
        assert loaded.relationships == sample_model.relationships
        assert loaded.diagrams == sample_model.diagrams

    def test_round_trip_through_file(self, sample_model, tmp_path):
        """Test the file variants write atomically and read back."""
        path = write_flat_file(sample_model, tmp_path / "out" / "model.xml")
        assert path.is_file()
        assert list(path.parent.glob("*.tmp")) == []
        assert read_flat_file(path).relationships == sample_model.relationships

    def test_serialized_text(self, sample_model):
        """Test namespace, bare type names and language tags are written."""
        text = write_flat(sample_model)
        assert 'xmlns="http://www.opengroup.org/xsd/archimate/3.0/"' in text
        assert "xsi:schemaLocation=" in text
        assert 'xsi:type="BusinessActor"' in text
        assert 'xsi:type="Access"' in text
        assert 'accessType="Read"' in text
        assert '<name xml:lang="en">Customer</name>' in text
        assert "propertyDefinitionRef=" in text

    def test_text_round_trips_verbatim(self):
        """Test padded names, multi-line and empty documentation survive unchanged."""
        model = create_empty_model("", model_id="m-text")
        model.documentation = ""
        add_element(model, Element(id="e", kind="Goal", name="  Grow ", documentation="Line 1\nLine 2\n"))
        add_element(model, Element(id="f", kind="Goal", name="", documentation=""))
        model.relationships.append(
            Relationship(id="r", kind="Influence", source_id="e", target_id="f", name="", documentation=" x "))

        loaded = read_flat(write_flat(model))
        assert loaded.name == ""
        assert loaded.documentation == ""
        by_id = {e.id: e for e in loaded.iter_elements()}
        assert by_id["e"].name == "  Grow "
        assert by_id["e"].documentation == "Line 1\nLine 2\n"
        assert (by_id["f"].name, by_id["f"].documentation) == ("", "")
        assert (loaded.relationships[0].name, loaded.relationships[0].documentation) == ("", " x ")

    def test_absent_documentation_stays_absent(self, sample_model):
        """Test fields that were never set read back as None."""
        loaded = read_flat(write_flat(sample_model))
        actor = next(e for e in loaded.iter_elements() if e.id == "actor")
        assert actor.documentation is None
        assert loaded.relationships[0].name is None

    def test_views_only_when_diagrams_exist(self):
        """Test a model without views writes no views container."""
        model = create_empty_model("No Views", model_id="m")
        add_element(model, Element(id="e", kind="Goal", name="Grow"))
        text = write_flat(model)
        assert "<elements>" in text
        assert "<relationships" in text
        assert "<views>" not in text


class TestReader:
    """Test reading exchange documents."""

    def test_model_header(self):
        """Test the configured language wins among localized names."""
        model = read_flat(EXCHANGE_DOCUMENT)
        assert model.id == "id-exchange"
        assert model.name == "Example"
        assert model.version == "5.0.0"

    def test_folder_skeleton(self):
        """Test imported elements are filed by layer into the nine-folder skeleton."""
        model = read_flat(EXCHANGE_DOCUMENT)
        assert [f.id for f in model.folders] == [
            "folder-motivation", "folder-strategy", "folder-business", "folder-application",
            "folder-technology", "folder-implementation", "folder-other", "folder-relations",
            "folder-diagrams",
        ]
        assert [e.id for e in get_folder_by_tag(model, "business").elements] == ["e-1"]
        assert [e.id for e in get_folder_by_tag(model, "application").elements] == ["e-2"]
        assert [e.id for e in get_folder_by_tag(model, "technology").elements] == ["e-3"]

    def test_relationship_suffix_and_unknown_types(self):
        """Test a Relationship suffix is stripped and unknown types are reported."""
        model, diagnostics = read_flat_with_diagnostics(EXCHANGE_DOCUMENT)
        assert [(r.id, r.kind) for r in model.relationships] == [("r-1", "Serving"), ("r-2", "Association")]
        skipped = {(entry.container, entry.type_name) for entry in diagnostics.skipped}
        assert ("elements", "Gizmo") in skipped
        assert ("relationships", "Uses") in skipped

    def test_view_connections(self):
        """Test connections attach to their source node and register on the target."""
        model, diagnostics = read_flat_with_diagnostics(EXCHANGE_DOCUMENT)
        view = model.diagrams[0]
        assert view.name == "Overview"
        source = view.find_object("n-2")
        assert [c.id for c in source.outgoing_connections] == ["c-1"]
        assert view.find_object("n-1").incoming_connection_ids == ["c-1"]
        assert (source.bounds.width, source.bounds.height) == (120, 55)
        # c-2 names a node that is not on the view
        assert any(entry.identifier == "c-2" for entry in diagnostics.skipped)

    def test_document_without_namespace(self):
        """Test documents without the default namespace are accepted."""
        document = (
            '<model identifier="m"><elements>'
            '<element identifier="e" type="Goal"><name>Grow</name></element>'
            '</elements></model>'
        )
        model = read_flat(document)
        assert [e.name for e in model.iter_elements()] == ["Grow"]

    def test_map_relationship_kind(self):
        """Test bare and suffixed relationship type names."""
        assert map_relationship_kind("Flow") == "Flow"
        assert map_relationship_kind("FlowRelationship") == "Flow"
        assert map_relationship_kind("Relationship") is None


class TestErrors:
    """Test error reporting."""

    def test_wrong_root(self):
        """Test a document without a model root is rejected."""
        with pytest.raises(InvalidDocumentError):
            read_flat("<elements/>")

    def test_malformed_xml(self):
        """Test malformed XML is rejected."""
        with pytest.raises(InvalidDocumentError):
            read_flat("<model")

    def test_missing_file(self, tmp_path):
        """Test a missing file raises NotFoundError."""
        with pytest.raises(NotFoundError):
            read_flat_file(tmp_path / "missing.xml")
