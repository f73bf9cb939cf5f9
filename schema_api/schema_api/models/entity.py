"""
    Entity model - a typed record definition inside a namespace.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from ..types import AttributeType, TypeResolver


@dataclass(frozen=True)
class Attribute:
    """Named, typed attribute of an entity."""
    name: str
    type: AttributeType = AttributeType.UNKNOWN

    @classmethod
    def from_raw(cls, name: str, raw_type: Any) -> 'Attribute':
        """Build an attribute from a raw host type tag."""
        return cls(name, TypeResolver.resolve_attribute_type(raw_type))

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'type': self.type.value}


@dataclass(frozen=True, eq=False)
class Entity:
    """
    Immutable entity description.

    Attributes:
        entity_id:      Unique identifier within a snapshot.
        name:           Display name.
        namespace:      Name of the owning namespace.
        attributes:     Ordered attributes.
        generalization: Identifier or qualified name of the parent entity.
        qualified_name: ``"<namespace>.<name>"`` unless given explicitly;
                        used as an alternate join key by relationships.
    """
    entity_id: str
    name: str
    namespace: str
    attributes: Tuple[Attribute, ...] = field(default_factory=tuple)
    generalization: Optional[str] = None
    qualified_name: str = ""

    def __post_init__(self):
        # Ids are compared as strings everywhere
        object.__setattr__(self, 'entity_id', str(self.entity_id))
        object.__setattr__(self, 'attributes', tuple(self.attributes))
        if not self.qualified_name:
            object.__setattr__(self, 'qualified_name', f"{self.namespace}.{self.name}")

    @classmethod
    def create(cls, entity_id: Any, name: str, namespace: str,
               attributes: Iterable[Tuple[str, Any]] = (),
               generalization: Optional[str] = None,
               qualified_name: Optional[str] = None) -> 'Entity':
        """Convenience factory taking ``(name, raw_type)`` attribute pairs."""
        return cls(
            entity_id=str(entity_id),
            name=name,
            namespace=namespace,
            attributes=tuple(Attribute.from_raw(n, t) for n, t in attributes),
            generalization=generalization,
            qualified_name=qualified_name or "",
        )

    @property
    def keys(self) -> Tuple[str, str]:
        """Both forms a relationship may use to reference this entity."""
        return self.entity_id, self.qualified_name

    def get_attribute(self, name: str) -> Optional[Attribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def matches_text(self, term: str) -> bool:
        """
        Case-insensitive substring match on the entity name or the
        namespace name. An empty term matches everything.
        """
        if not term:
            return True
        term_lower = term.lower()
        return term_lower in self.name.lower() or term_lower in self.namespace.lower()

    def __eq__(self, other) -> bool:
        """Two entities are equal if they have the same ID"""
        if not isinstance(other, Entity):
            return False
        return self.entity_id == other.entity_id

    def __hash__(self) -> int:
        return hash(self.entity_id)

    def __repr__(self) -> str:
        return f"Entity({self.entity_id}, {self.qualified_name})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Entity':
        """Inverse of ``to_dict``; attribute types may be raw host tags."""
        return cls(
            entity_id=str(data['id']),
            name=str(data['name']),
            namespace=str(data['namespace']),
            attributes=tuple(Attribute.from_raw(a['name'], a.get('type'))
                             for a in data.get('attributes') or []),
            generalization=data.get('generalization'),
            qualified_name=data.get('qualified_name') or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.entity_id,
            'name': self.name,
            'namespace': self.namespace,
            'qualified_name': self.qualified_name,
            'attributes': [a.to_dict() for a in self.attributes],
            'generalization': self.generalization,
        }
