"""
Unit tests for the folder-organized .archimate codec.

Tests round-tripping through files, folder placement of relationships and
views, Archi-specific attribute forms, and error reporting.
"""

import pytest

from archimodel.archimate import (
    parse_hierarchical_string,
    read_hierarchical,
    read_hierarchical_with_diagnostics,
    serialize_hierarchical,
    write_hierarchical,
)
from archimodel.exceptions import InvalidDocumentError, NotFoundError
from archimodel.model.entities import Element, Folder, Model, Relationship
from archimodel.model.operations import get_folder_by_tag

ARCHI_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<archimate:model xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xmlns:archimate="http://www.archimatetool.com/archimate" name="Archi" id="m-1" version="4.9.0">
  <folder name="Business" id="f-business" type="business">
    <element xsi:type="archimate:BusinessActor" name="Clerk" id="e-actor">
      <property key="team" value="Ops"/>
    </element>
    <element xsi:type="archimate:BusinessProcess" name="Archive" id="e-process"/>
    <element xsi:type="archimate:Widget" name="Gadget" id="e-widget"/>
    <folder name="Objects" id="f-objects">
      <element xsi:type="archimate:BusinessObject" name="File" id="e-object"/>
    </folder>
  </folder>
  <folder name="Relations" id="f-relations" type="relations">
    <element xsi:type="archimate:AssignmentRelationship" id="r-assign" source="e-actor" target="e-process"/>
    <folder name="Data" id="f-rel-sub">
      <element xsi:type="archimate:AccessRelationship" id="r-access" source="e-process" target="e-object"/>
      <element xsi:type="archimate:AccessRelationship" id="r-read" source="e-process" target="e-object" accessType="1"/>
    </folder>
  </folder>
  <folder name="Views" id="f-views" type="diagrams">
    <element xsi:type="archimate:ArchimateDiagramModel" name="Default View" id="v-1">
      <child xsi:type="archimate:DiagramObject" id="o-actor" archimateElement="e-actor">
        <bounds x="12" y="24" width="-1" height="-1"/>
        <sourceConnection xsi:type="archimate:Connection" id="c-1" source="o-actor" target="o-process" archimateRelationship="r-assign">
          <bendpoint startX="5" startY="6"/>
        </sourceConnection>
      </child>
      <child xsi:type="archimate:DiagramObject" id="o-process" targetConnections="c-1" archimateElement="e-process">
        <bounds x="200" y="24"/>
      </child>
    </element>
    <element xsi:type="archimate:SketchModel" name="Sketch" id="v-sketch"/>
  </folder>
  <purpose>Imported from Archi</purpose>
</archimate:model>
"""


class TestRoundTrip:
    """Test write then read through the file system."""

    def test_round_trip_preserves_model(self, sample_model, tmp_path):
        """Test a written model reads back equal."""
        path = write_hierarchical(sample_model, tmp_path / "sample.archimate")
        assert path == tmp_path / "sample.archimate"
        assert read_hierarchical(path) == sample_model

    def test_directory_path_uses_default_filename(self, sample_model, tmp_path):
        """Test a directory resolves to model.archimate inside it."""
        written = write_hierarchical(sample_model, tmp_path / "repo")
        assert written == tmp_path / "repo" / "model.archimate"
        assert read_hierarchical(tmp_path / "repo").id == sample_model.id

    def test_missing_special_folders_are_synthesized(self, tmp_path):
        """Test relationships survive when the model has no relations folder."""
        model = Model(id="m", name="Bare", folders=[
            Folder(id="f-b", name="Business", tag="business", elements=[
                Element(id="a", kind="BusinessActor", name="A"),
                Element(id="b", kind="BusinessRole", name="B"),
            ]),
        ])
        model.relationships.append(Relationship(id="r", kind="Assignment", source_id="a", target_id="b"))

        loaded = read_hierarchical(write_hierarchical(model, tmp_path / "bare.archimate"))
        assert [r.id for r in loaded.relationships] == ["r"]
        assert get_folder_by_tag(loaded, "relations") is not None
        assert get_folder_by_tag(loaded, "diagrams") is not None

    def test_text_round_trips_verbatim(self, tmp_path):
        """Test padded names, multi-line and empty documentation survive unchanged."""
        model = Model(id="m", name=" Padded ", documentation="", folders=[
            Folder(id="f-m", name="Motivation", tag="motivation", elements=[
                Element(id="g", kind="Goal", name="  Grow ", documentation="Line 1\nLine 2\n"),
                Element(id="h", kind="Goal", name="", documentation=""),
            ]),
        ])
        model.relationships.append(
            Relationship(id="r", kind="Influence", source_id="g", target_id="h", name="", documentation=" x "))

        loaded = read_hierarchical(write_hierarchical(model, tmp_path / "text.archimate"))
        assert (loaded.name, loaded.documentation) == (" Padded ", "")
        assert list(loaded.iter_elements()) == list(model.iter_elements())
        assert (loaded.relationships[0].name, loaded.relationships[0].documentation) == ("", " x ")

    def test_serialized_text(self, sample_model):
        """Test the written document uses Archi's qualified type names."""
        text = serialize_hierarchical(sample_model)
        assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert 'xsi:type="archimate:BusinessActor"' in text
        assert 'xsi:type="archimate:AccessRelationship"' in text
        assert 'accessType="1"' in text
        assert 'xsi:type="archimate:ArchimateDiagramModel"' in text
        assert 'targetConnections="conn-assign"' in text


class TestArchiDocument:
    """Test reading a document written by Archi."""

    def test_model_attributes(self):
        """Test root attributes and purpose fallback for documentation."""
        model = parse_hierarchical_string(ARCHI_DOCUMENT)
        assert model.id == "m-1"
        assert model.name == "Archi"
        assert model.version == "4.9.0"
        assert model.documentation == "Imported from Archi"

    def test_elements_in_nested_folders(self):
        """Test elements in untyped subfolders stay in their folder."""
        model = parse_hierarchical_string(ARCHI_DOCUMENT)
        business = model.folders[0]
        assert [e.id for e in business.elements] == ["e-actor", "e-process"]
        assert [e.id for e in business.subfolders[0].elements] == ["e-object"]
        assert business.elements[0].properties[0].value == "Ops"

    def test_relationships_in_relation_subfolders(self):
        """Test relationships in untyped subfolders of Relations are found."""
        model = parse_hierarchical_string(ARCHI_DOCUMENT)
        assert [r.id for r in model.relationships] == ["r-assign", "r-access", "r-read"]

    def test_access_type_decoding(self):
        """Test a missing accessType decodes as ReadWrite and 1 as Read."""
        model = parse_hierarchical_string(ARCHI_DOCUMENT)
        by_id = {r.id: r for r in model.relationships}
        assert by_id["r-access"].access_type == "ReadWrite"
        assert by_id["r-read"].access_type == "Read"
        assert by_id["r-assign"].access_type is None

    def test_diagram_objects(self):
        """Test default sizes, Archi bendpoints and connections."""
        model = parse_hierarchical_string(ARCHI_DOCUMENT)
        assert [d.id for d in model.diagrams] == ["v-1"]
        view = model.diagrams[0]
        actor = view.find_object("o-actor")
        assert (actor.bounds.width, actor.bounds.height) == (120, 55)
        connection = actor.outgoing_connections[0]
        assert connection.relationship_id == "r-assign"
        assert (connection.bendpoints[0].x, connection.bendpoints[0].y) == (5, 6)
        assert view.find_object("o-process").incoming_connection_ids == ["c-1"]

    def test_unknown_types_reported(self, tmp_path):
        """Test unknown element types and non-ArchiMate views are skipped and reported."""
        path = tmp_path / "archi.archimate"
        path.write_text(ARCHI_DOCUMENT, encoding="utf-8")

        model, diagnostics = read_hierarchical_with_diagnostics(path)
        assert all(e.id != "e-widget" for e in model.iter_elements())
        assert diagnostics.has_skipped
        assert diagnostics.counts_by_type() == {"archimate:Widget": 1, "archimate:SketchModel": 1}
        assert diagnostics.source == str(path)

    def test_non_archimate_children_reported(self, tmp_path):
        """Test notes and groups on a view are skipped with their connections and reported."""
        document = ARCHI_DOCUMENT.replace(
            '<child xsi:type="archimate:DiagramObject" id="o-process" targetConnections="c-1"',
            '<child xsi:type="archimate:Group" id="o-group">'
            '<child xsi:type="archimate:DiagramObject" id="o-inner" archimateElement="e-object"/>'
            '</child>'
            '<child xsi:type="archimate:Note" id="o-process" targetConnections="c-1"',
        )
        path = tmp_path / "notes.archimate"
        path.write_text(document, encoding="utf-8")

        model, diagnostics = read_hierarchical_with_diagnostics(path)
        view = model.diagrams[0]
        assert [obj.id for obj in view.iter_objects()] == ["o-actor"]
        assert list(view.iter_connections()) == []
        skipped = {(entry.type_name, entry.identifier) for entry in diagnostics.skipped}
        assert ("archimate:Note", "o-process") in skipped
        assert ("archimate:Group", "o-group") in skipped
        assert ("connection", "c-1") in skipped

        text = serialize_hierarchical(model)
        assert "archimate:Note" not in text
        assert "archimate:Group" not in text
        assert "c-1" not in text


class TestErrors:
    """Test error reporting."""

    def test_missing_file(self, tmp_path):
        """Test a missing file raises NotFoundError with the path."""
        with pytest.raises(NotFoundError) as exc_info:
            read_hierarchical(tmp_path / "nope.archimate")
        assert exc_info.value.path.endswith("nope.archimate")

    def test_malformed_xml(self, tmp_path):
        """Test malformed XML raises InvalidDocumentError."""
        path = tmp_path / "broken.archimate"
        path.write_text("<archimate:model", encoding="utf-8")
        with pytest.raises(InvalidDocumentError):
            read_hierarchical(path)

    def test_wrong_root(self):
        """Test a document without a model root is rejected."""
        with pytest.raises(InvalidDocumentError) as exc_info:
            parse_hierarchical_string("<diagram id='x'/>")
        assert exc_info.value.tag == "diagram"

    def test_missing_model_id(self):
        """Test a model root without id is rejected."""
        with pytest.raises(InvalidDocumentError):
            parse_hierarchical_string("<model name='x'/>")

    def test_negative_bounds(self):
        """Test negative coordinates are rejected."""
        document = ARCHI_DOCUMENT.replace('x="200"', 'x="-5"')
        with pytest.raises(InvalidDocumentError):
            parse_hierarchical_string(document)
