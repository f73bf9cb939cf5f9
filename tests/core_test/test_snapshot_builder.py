# tests/core_test/test_snapshot_builder.py
"""
Snapshot building — namespace enumeration, system flags, cross-namespace
classification and fetch failures.
"""
import pytest

from schema_api.models.entity import Entity
from schema_api.models.namespace import NamespaceInfo, NamespaceSchema
from schema_api.models.relationship import Relationship

from viewer_services.exceptions import FetchFailure
from viewer_services.snapshot_service import SnapshotBuilder


@pytest.fixture
def builder():
    return SnapshotBuilder()


class TestNamespaces:

    def test_host_order_kept(self, builder, stub_source):
        snapshot = builder.fetch(stub_source)
        assert snapshot.namespace_names == ["App", "Lib", "System"]

    def test_system_namespace_flagged(self, builder, stub_source):
        snapshot = builder.fetch(stub_source)
        assert snapshot.get_namespace("System").is_system
        assert not snapshot.get_namespace("App").is_system
        assert snapshot.get_namespace("Lib").from_marketplace

    def test_custom_system_names(self, stub_source):
        snapshot = SnapshotBuilder(system_namespaces={"Lib"}).fetch(stub_source)
        assert snapshot.get_namespace("Lib").is_system
        assert not snapshot.get_namespace("System").is_system

    def test_host_system_flag_is_overridden(self, builder, source_factory):
        source = source_factory([NamespaceInfo("Core", is_system=True)], {})
        assert not builder.fetch(source).get_namespace("Core").is_system


class TestCrossNamespace:

    def test_flags_follow_resolved_endpoints(self, builder, stub_source):
        snapshot = builder.fetch(stub_source)
        flags = {r.relationship_id: r.is_cross_namespace for r in snapshot.relationships}
        assert flags == {"r1": False, "r2": False, "r3": True, "r4": True, "r5": False}

    def test_misfiled_relationship_corrected(self, builder, source_factory):
        # Declared as cross-namespace although both ends live in A
        source = source_factory([NamespaceInfo("A")], {
            "A": NamespaceSchema(
                entities=[Entity("1", "X", "A"), Entity("2", "Y", "A")],
                cross_namespace_relationships=[Relationship("r", "X_Y", "1", "A.Y")],
            ),
        })
        rel = builder.fetch(source).relationships[0]
        assert rel.is_cross_namespace is False

    def test_unresolved_keeps_host_classification(self, builder, source_factory):
        source = source_factory([NamespaceInfo("A")], {
            "A": NamespaceSchema(
                entities=[Entity("1", "X", "A")],
                cross_namespace_relationships=[Relationship("r", "X_Far", "1", "Far.Away")],
            ),
        })
        assert builder.fetch(source).relationships[0].is_cross_namespace is True

    def test_end_to_end_pair(self, builder, pair_source):
        snapshot = builder.fetch(pair_source)
        assert [e.entity_id for e in snapshot.entities] == ["E1", "E2"]
        assert snapshot.relationships[0].is_cross_namespace is True


class TestFetchFailures:

    def test_namespace_without_schema_contributes_nothing(self, builder, stub_source):
        stub_source.schemas["Lib"] = None
        snapshot = builder.fetch(stub_source)
        assert snapshot.get_entities_in("Lib") == []
        assert "Lib" in snapshot.namespace_names

    def test_listing_failure(self, builder, stub_source):
        stub_source.fail_on = "*"
        with pytest.raises(FetchFailure) as exc_info:
            builder.fetch(stub_source)
        assert "host unavailable" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_schema_failure_names_namespace(self, builder, stub_source):
        stub_source.fail_on = "Lib"
        with pytest.raises(FetchFailure) as exc_info:
            builder.fetch(stub_source)
        assert exc_info.value.namespace == "Lib"
        assert "timed out reading Lib" in str(exc_info.value)

    def test_duplicate_ids_across_namespaces(self, builder, source_factory):
        source = source_factory([NamespaceInfo("A"), NamespaceInfo("B")], {
            "A": NamespaceSchema(entities=[Entity("1", "X", "A")]),
            "B": NamespaceSchema(entities=[Entity("1", "Y", "B")]),
        })
        with pytest.raises(FetchFailure, match="Inconsistent schema"):
            builder.fetch(source)

    def test_empty_host(self, builder, source_factory):
        snapshot = builder.fetch(source_factory([], {}))
        assert snapshot.entities == []
        assert snapshot.namespaces == []
