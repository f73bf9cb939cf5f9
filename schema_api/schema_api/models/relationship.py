"""
    Relationship model - a directed association between two entities.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Tuple

from ..types import RelationshipKind, TypeResolver


@dataclass(frozen=True, eq=False)
class Relationship:
    """
        Directed association from a source (parent) entity to a target
        (child) entity.

        Endpoints are raw references: each may be an entity identifier or a
        qualified name. They are resolved against a snapshot, never here.
    """
    relationship_id: str
    name: str
    source: str
    target: str
    kind: RelationshipKind = RelationshipKind.REFERENCE
    owner: str = "Default"
    is_cross_namespace: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'relationship_id', str(self.relationship_id))
        object.__setattr__(self, 'kind', TypeResolver.resolve_relationship_kind(self.kind))

    @property
    def multiplicity(self) -> str:
        return TypeResolver.multiplicity(self.kind)

    @property
    def is_reference_set(self) -> bool:
        return self.kind == RelationshipKind.REFERENCE_SET

    def get_endpoints(self) -> Tuple[str, str]:
        """Get raw source and target references"""
        return self.source, self.target

    def references_any(self, keys: Iterable[str]) -> bool:
        """Check if either endpoint is one of the given keys (ids or qualified names)"""
        key_set = set(keys)
        return self.source in key_set or self.target in key_set

    def with_cross_namespace(self, flag: bool) -> 'Relationship':
        """Copy of this relationship with the cross-namespace flag replaced."""
        if flag == self.is_cross_namespace:
            return self
        return replace(self, is_cross_namespace=flag)

    def __eq__(self, other) -> bool:
        """Two relationships are equal if they have the same ID"""
        if not isinstance(other, Relationship):
            return False
        return self.relationship_id == other.relationship_id

    def __hash__(self) -> int:
        return hash(self.relationship_id)

    def __repr__(self) -> str:
        arrow = "=>" if self.is_reference_set else "->"
        return f"Relationship({self.source} {arrow} {self.target})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Relationship':
        return cls(
            relationship_id=str(data['id']),
            name=str(data.get('name', '')),
            source=str(data['source']),
            target=str(data['target']),
            kind=data.get('kind', RelationshipKind.REFERENCE.value),
            owner=str(data.get('owner', 'Default')),
            is_cross_namespace=bool(data.get('cross_namespace', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.relationship_id,
            'name': self.name,
            'source': self.source,
            'target': self.target,
            'kind': self.kind.value,
            'owner': self.owner,
            'cross_namespace': self.is_cross_namespace,
        }
