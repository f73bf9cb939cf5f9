"""
    Namespace descriptors and the per-namespace schema payload.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from .entity import Entity
from .relationship import Relationship


@dataclass(frozen=True)
class NamespaceInfo:
    """
    Descriptor of a namespace (schema module).

    Attributes:
        name:             Unique namespace name.
        from_marketplace: Installed from the marketplace (third-party).
        is_system:        Name matches a reserved system namespace.
    """
    name: str
    from_marketplace: bool = False
    is_system: bool = False

    @property
    def is_first_party(self) -> bool:
        """Shown by default: neither marketplace nor system origin."""
        return not (self.from_marketplace or self.is_system)

    def with_system_flag(self, flag: bool) -> 'NamespaceInfo':
        return replace(self, is_system=flag)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NamespaceInfo':
        return cls(
            name=str(data['name']),
            from_marketplace=bool(data.get('marketplace', False)),
            is_system=bool(data.get('system', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'marketplace': self.from_marketplace,
            'system': self.is_system,
        }


@dataclass(frozen=True)
class NamespaceSchema:
    """
    What the host returns for one namespace: its entities, the associations
    declared inside it, and the associations it declares towards other
    namespaces.
    """
    entities: Tuple[Entity, ...] = field(default_factory=tuple)
    relationships: Tuple[Relationship, ...] = field(default_factory=tuple)
    cross_namespace_relationships: Tuple[Relationship, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'entities', tuple(self.entities))
        object.__setattr__(self, 'relationships', tuple(self.relationships))
        object.__setattr__(self, 'cross_namespace_relationships',
                           tuple(self.cross_namespace_relationships))
