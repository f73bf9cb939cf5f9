import json

import pytest

from schema_api.types import AttributeType, RelationshipKind
from viewer_platform.session import ViewerSession
from viewer_services.snapshot_service import SnapshotBuilder
from schema_source_json.plugin import JsonSchemaSource


# ── Plugin ───────────────────────────────────────────────────────

def test_plugin_name(json_plugin):
    assert json_plugin.get_plugin_name() == "JSON Schema Export"


def test_open_returns_source(json_plugin, json_export_path):
    source = json_plugin.open(json_export_path)
    assert isinstance(source, JsonSchemaSource)
    assert source.file_path == json_export_path


def test_open_missing_file(json_plugin, tmp_path):
    with pytest.raises(FileNotFoundError):
        json_plugin.open(str(tmp_path / "nope.json"))


# ── Namespaces ───────────────────────────────────────────────────

def test_namespaces_in_file_order(json_plugin, json_export_path):
    namespaces = json_plugin.open(json_export_path).list_namespaces()
    # Extra is only mentioned by an entity and comes last
    assert [ns.name for ns in namespaces] == ["Sales", "Catalog", "System", "Empty", "Extra"]


def test_marketplace_flag(json_plugin, json_export_path):
    namespaces = {ns.name: ns for ns in json_plugin.open(json_export_path).list_namespaces()}
    assert namespaces["Catalog"].from_marketplace
    assert not namespaces["Sales"].from_marketplace


def test_namespace_without_schema(json_plugin, json_export_path):
    source = json_plugin.open(json_export_path)
    source.list_namespaces()
    assert source.get_schema_for("Empty") is None


# ── Schemas ──────────────────────────────────────────────────────

def test_entities_and_attributes(json_plugin, json_export_path):
    source = json_plugin.open(json_export_path)
    schema = source.get_schema_for("Sales")
    assert [e.entity_id for e in schema.entities] == ["s1", "s2", "s3"]
    customer = schema.entities[0]
    assert customer.get_attribute("Name").type == AttributeType.STRING
    assert customer.get_attribute("Since").type == AttributeType.DATETIME
    assert schema.entities[1].generalization == "Sales.Document"


def test_unknown_attribute_type(json_plugin, json_export_path):
    schema = json_plugin.open(json_export_path).get_schema_for("Catalog")
    assert schema.entities[0].get_attribute("Picture").type == AttributeType.UNKNOWN


def test_relationships_split_by_owner(json_plugin, json_export_path):
    source = json_plugin.open(json_export_path)
    sales = source.get_schema_for("Sales")
    assert [r.relationship_id for r in sales.relationships] == ["a1"]
    assert [r.relationship_id for r in sales.cross_namespace_relationships] == ["a2", "a3"]
    assert sales.cross_namespace_relationships[0].kind == RelationshipKind.REFERENCE_SET
    # No namespace key: owned by the namespace of its source entity
    extra = source.get_schema_for("Extra")
    assert [r.relationship_id for r in extra.cross_namespace_relationships] == ["a4"]


# ── Through the viewer ───────────────────────────────────────────

def test_snapshot_from_export(json_plugin, json_export_path):
    snapshot = SnapshotBuilder().fetch(json_plugin.open(json_export_path))
    assert snapshot.get_number_of_entities() == 6
    assert snapshot.get_number_of_relationships() == 4
    assert snapshot.get_namespace("System").is_system
    assert snapshot.resolve("Catalog.Product") == "c1"
    assert [e.entity_id for e in snapshot.get_generalization_chain("s2")] == ["s3"]


def test_default_view(json_plugin, json_export_path):
    session = ViewerSession(json_plugin.open(json_export_path), source_name="json")
    assert session.load()
    # Sales, Empty and Extra are first-party
    assert session.state.selected_namespaces == frozenset({"Sales", "Empty", "Extra"})
    assert session.view.entity_ids == ["s1", "s2", "s3", "x1"]
    assert {r.relationship.relationship_id for r in session.view.relationships} == {"a1", "a4"}


def test_refresh_sees_edited_export(json_plugin, json_export_copy):
    session = ViewerSession(json_plugin.open(str(json_export_copy)))
    session.load()

    data = json.loads(json_export_copy.read_text(encoding="utf-8"))
    data['entities'].append({"id": "s4", "name": "Invoice", "namespace": "Sales"})
    json_export_copy.write_text(json.dumps(data), encoding="utf-8")

    assert session.refresh()
    assert "s4" in session.view.entity_ids


def test_broken_export_fails_refresh(json_plugin, json_export_copy):
    session = ViewerSession(json_plugin.open(str(json_export_copy)))
    session.load()

    json_export_copy.write_text("{ not json", encoding="utf-8")
    assert session.refresh() is False
    assert session.error.startswith("Failed to refresh data: ")
    assert session.snapshot.get_number_of_entities() == 6


def test_malformed_entity(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"entities": [{"name": "NoId", "namespace": "A"}]}),
                    encoding="utf-8")
    with pytest.raises(ValueError, match="Malformed schema export"):
        JsonSchemaSource(str(path)).list_namespaces()


def test_top_level_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonSchemaSource(str(path)).list_namespaces()
