# tests/conftest.py
"""
Shared test fixtures.
Stub schema: three namespaces (App first-party, Lib marketplace, System),
six entities, five relationships. Relationships mix identifier and
qualified-name endpoints; one is a ReferenceSet, two cross namespaces and
one points at an entity that does not exist.
"""
from typing import Dict, List, Optional

import pytest

from schema_api.models.entity import Entity
from schema_api.models.namespace import NamespaceInfo, NamespaceSchema
from schema_api.models.relationship import Relationship
from schema_api.models.snapshot import SchemaSnapshot
from schema_api.plugins.base import SchemaSource

from viewer_platform.config import PlatformConfig
from viewer_platform.session import ViewerSession
from viewer_services.snapshot_service import SnapshotBuilder


class StubSchemaSource(SchemaSource):
    """
    In-memory host. Tests may edit ``namespaces`` / ``schemas`` between
    fetches or set ``fail_on`` to a namespace name (or ``"*"`` for the
    namespace listing) to make the next fetch raise.
    """

    def __init__(self, namespaces: List[NamespaceInfo],
                 schemas: Dict[str, Optional[NamespaceSchema]]):
        self.namespaces = list(namespaces)
        self.schemas = dict(schemas)
        self.fail_on: Optional[str] = None
        self.calls = 0

    def list_namespaces(self) -> List[NamespaceInfo]:
        self.calls += 1
        if self.fail_on == "*":
            raise ConnectionError("host unavailable")
        return list(self.namespaces)

    def get_schema_for(self, namespace: str) -> Optional[NamespaceSchema]:
        if self.fail_on == namespace:
            raise TimeoutError(f"timed out reading {namespace}")
        return self.schemas.get(namespace)


# ── Entity definitions ───────────────────────────────────────────
_ENTITIES = {
    "App": [
        Entity.create("1", "Customer", "App", [("Name", "DomainModels$StringAttributeType"),
                                              ("Age", "Integer")]),
        Entity.create("2", "Order", "App", [("Total", "Decimal")], generalization="App.Document"),
        Entity.create("3", "Document", "App", [("Created", "DateTime")]),
    ],
    "Lib": [
        Entity.create("10", "Product", "Lib", [("Sku", "String")]),
    ],
    "System": [
        Entity.create("20", "User", "System", [("Login", "String")]),
        Entity.create("21", "Account", "System", generalization="20"),
    ],
}

# ── Relationship definitions (by declaring namespace) ────────────
_RELATIONSHIPS = {
    "App": [
        Relationship("r1", "Order_Customer", "2", "1"),
        Relationship("r2", "Order_Document", "App.Order", "3"),
        Relationship("r5", "Customer_Missing", "1", "Missing.Thing"),
    ],
}
_CROSS = {
    "App": [
        Relationship("r3", "Order_Product", "2", "Lib.Product", kind="ReferenceSet"),
        Relationship("r4", "Customer_User", "1", "20"),
    ],
}

_NAMESPACES = [
    NamespaceInfo("App"),
    NamespaceInfo("Lib", from_marketplace=True),
    NamespaceInfo("System"),
]


def build_stub_source() -> StubSchemaSource:
    schemas = {
        name: NamespaceSchema(
            entities=_ENTITIES.get(name, []),
            relationships=_RELATIONSHIPS.get(name, []),
            cross_namespace_relationships=_CROSS.get(name, []),
        )
        for name in ("App", "Lib", "System")
    }
    return StubSchemaSource(_NAMESPACES, schemas)


def two_namespace_source() -> StubSchemaSource:
    """E1 in A, E2 in B, one cross-namespace relationship E1 → E2."""
    return StubSchemaSource(
        [NamespaceInfo("A"), NamespaceInfo("B")],
        {
            "A": NamespaceSchema(
                entities=[Entity.create("E1", "First", "A")],
                cross_namespace_relationships=[Relationship("R1", "First_Second", "E1", "E2")],
            ),
            "B": NamespaceSchema(entities=[Entity.create("E2", "Second", "B")]),
        },
    )


# ── Pytest fixtures ──────────────────────────────────────────────

@pytest.fixture
def stub_source() -> StubSchemaSource:
    """Freshly built each time, tests may mutate it."""
    return build_stub_source()


@pytest.fixture
def stub_snapshot(stub_source) -> SchemaSnapshot:
    """Snapshot of the stub source (6 entities, 5 relationships, 3 namespaces)."""
    return SnapshotBuilder().fetch(stub_source)


@pytest.fixture
def platform_config() -> PlatformConfig:
    return PlatformConfig()


@pytest.fixture
def session(stub_source, platform_config) -> ViewerSession:
    """Session over the stub source, not loaded yet."""
    return ViewerSession(stub_source, source_name="stub", config=platform_config)


@pytest.fixture
def loaded_session(session) -> ViewerSession:
    assert session.load() is True
    return session


@pytest.fixture
def pair_source() -> StubSchemaSource:
    """Two namespaces, one entity each, one cross-namespace relationship."""
    return two_namespace_source()


@pytest.fixture
def source_factory():
    """The stub source class, for tests that assemble their own host."""
    return StubSchemaSource
