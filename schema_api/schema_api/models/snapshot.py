"""
    SchemaSnapshot - one complete, immutable fetch of a schema.

    Relationship endpoints may reference an entity either by identifier or by
    qualified name. Both forms are resolved through a single canonical index
    built once per snapshot.
"""
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .entity import Entity
from .namespace import NamespaceInfo
from .relationship import Relationship


def build_reference_index(entities: Iterable[Entity]) -> Dict[str, str]:
    """
    Map every identifier and qualified name to the canonical entity id.

    Identifiers are registered first, so an identifier wins over a qualified
    name when both spell the same key. Among qualified names the first
    entity seen wins.
    """
    entities = list(entities)
    index: Dict[str, str] = {e.entity_id: e.entity_id for e in entities}
    for entity in entities:
        index.setdefault(entity.qualified_name, entity.entity_id)
    return index


class SchemaSnapshot:
    """
        Immutable snapshot of entities, relationships and namespaces.
        Replaced wholesale on refresh, never patched.
    """

    def __init__(
            self,
            entities: Iterable[Entity] = (),
            relationships: Iterable[Relationship] = (),
            namespaces: Iterable[NamespaceInfo] = (),
            snapshot_id: Optional[str] = None,
    ):
        """
        Initialize a snapshot.

        Args:
            entities:      Entities in first-seen order.
            relationships: All relationships, renderable or not.
            namespaces:    Namespace descriptors in host order.
            snapshot_id:   Optional identifier (random UUID by default).

        Raises:
            ValueError: On a duplicate entity identifier or namespace name.
        """
        self.snapshot_id: str = snapshot_id or str(uuid.uuid4())
        self.created_at: datetime = datetime.now()

        self._entities: Dict[str, Entity] = {}
        for entity in entities:
            if entity.entity_id in self._entities:
                raise ValueError(f"Entity with id {entity.entity_id} already exists")
            self._entities[entity.entity_id] = entity

        self._namespaces: Dict[str, NamespaceInfo] = {}
        for ns in namespaces:
            if ns.name in self._namespaces:
                raise ValueError(f"Namespace {ns.name} listed twice")
            self._namespaces[ns.name] = ns

        # Entities may live in namespaces the host did not list
        for entity in self._entities.values():
            if entity.namespace not in self._namespaces:
                self._namespaces[entity.namespace] = NamespaceInfo(entity.namespace)

        self._relationships: Tuple[Relationship, ...] = tuple(relationships)
        self._index: Dict[str, str] = build_reference_index(self._entities.values())

    # ── Accessors ────────────────────────────────────────────────

    @property
    def entities(self) -> List[Entity]:
        return list(self._entities.values())

    @property
    def relationships(self) -> List[Relationship]:
        return list(self._relationships)

    @property
    def namespaces(self) -> List[NamespaceInfo]:
        return list(self._namespaces.values())

    @property
    def namespace_names(self) -> List[str]:
        return list(self._namespaces.keys())

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        return self._entities.get(entity_id)

    def get_namespace(self, name: str) -> Optional[NamespaceInfo]:
        return self._namespaces.get(name)

    def has_entity(self, entity_id: str) -> bool:
        return entity_id in self._entities

    # ── Reference resolution ─────────────────────────────────────

    def resolve(self, reference: Optional[str]) -> Optional[str]:
        """Return the canonical entity id for an id or qualified name."""
        if reference is None:
            return None
        return self._index.get(reference)

    def resolve_entity(self, reference: Optional[str]) -> Optional[Entity]:
        entity_id = self.resolve(reference)
        if entity_id is None:
            return None
        return self._entities[entity_id]

    def resolve_endpoints(self, relationship: Relationship) -> Tuple[Optional[str], Optional[str]]:
        """Canonical ids of both endpoints (``None`` where unresolvable)."""
        return self.resolve(relationship.source), self.resolve(relationship.target)

    def get_renderable_relationships(self) -> List[Relationship]:
        """Relationships whose both endpoints resolve to an entity in this snapshot."""
        result = []
        for rel in self._relationships:
            source_id, target_id = self.resolve_endpoints(rel)
            if source_id is not None and target_id is not None:
                result.append(rel)
        return result

    def get_related_relationships(self, entity_id: str) -> List[Relationship]:
        """All relationships that reference the entity by id or qualified name."""
        entity = self._entities.get(entity_id)
        if entity is None:
            return []
        return [rel for rel in self._relationships if rel.references_any(entity.keys)]

    def get_generalization_chain(self, entity_id: str) -> List[Entity]:
        """
        Ancestors of an entity, nearest first.

        The host does not guarantee generalizations are acyclic, so the walk
        stops at the first entity already visited, and at a parent reference
        that does not resolve.
        """
        chain: List[Entity] = []
        current = self._entities.get(entity_id)
        visited = {entity_id}
        while current is not None and current.generalization:
            parent = self.resolve_entity(current.generalization)
            if parent is None or parent.entity_id in visited:
                break
            visited.add(parent.entity_id)
            chain.append(parent)
            current = parent
        return chain

    # ── Grouping ─────────────────────────────────────────────────

    def get_entities_by_namespace(self) -> Dict[str, List[Entity]]:
        """Entities grouped by namespace, namespaces in first-seen order."""
        return group_by_namespace(self._entities.values())

    def get_entities_in(self, namespace: str) -> List[Entity]:
        return [e for e in self._entities.values() if e.namespace == namespace]

    def get_number_of_entities(self) -> int:
        return len(self._entities)

    def get_number_of_relationships(self) -> int:
        return len(self._relationships)

    def __repr__(self) -> str:
        return (f"SchemaSnapshot({self.snapshot_id[:8]}, entities={len(self._entities)}, "
                f"relationships={len(self._relationships)}, namespaces={len(self._namespaces)})")

    def to_dict(self) -> Dict:
        return {
            'id': self.snapshot_id,
            'namespaces': [ns.to_dict() for ns in self._namespaces.values()],
            'entities': [e.to_dict() for e in self._entities.values()],
            'relationships': [r.to_dict() for r in self._relationships],
        }


def group_by_namespace(entities: Sequence[Entity]) -> Dict[str, List[Entity]]:
    """Group entities by namespace, preserving first-seen namespace order."""
    groups: Dict[str, List[Entity]] = {}
    for entity in entities:
        groups.setdefault(entity.namespace, []).append(entity)
    return groups
