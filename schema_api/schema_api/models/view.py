"""
    GraphView - the derived record handed to render adapters.

    Everything a renderer needs to draw one frame: visible nodes with resolved
    positions, visible edges with resolved endpoints and highlight flags, the
    viewport, checkbox state for the namespace selector, the status strip,
    the legend and the detail panel of the selected entity.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .entity import Entity
from .position import Position
from .relationship import Relationship
from ..types import RelationshipKind


@dataclass(frozen=True)
class RenderedEntity:
    entity: Entity
    position: Position
    color: str
    is_selected: bool = False


@dataclass(frozen=True)
class RenderedRelationship:
    relationship: Relationship
    source_position: Position
    target_position: Position
    is_highlighted: bool = False
    color: str = "#666"

    @property
    def is_cross_namespace(self) -> bool:
        return self.relationship.is_cross_namespace

    @property
    def kind(self) -> RelationshipKind:
        return self.relationship.kind

    @property
    def label(self) -> str:
        """Multiplicity label drawn at the edge midpoint."""
        return self.relationship.multiplicity

    @property
    def is_dashed(self) -> bool:
        """ReferenceSet associations are drawn dashed."""
        return self.relationship.is_reference_set


@dataclass(frozen=True)
class NamespaceOption:
    """One checkbox of the namespace selector."""
    name: str
    selected: bool
    from_marketplace: bool
    is_system: bool
    color: str


@dataclass(frozen=True)
class StatusStrip:
    entity_count: int
    relationship_count: int
    namespace_count: int
    zoom_percent: int


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str
    dashed: bool = False


@dataclass(frozen=True)
class Legend:
    relationship_kinds: List[LegendEntry] = field(default_factory=list)
    namespaces: List[LegendEntry] = field(default_factory=list)
    hidden_namespace_count: int = 0


@dataclass(frozen=True)
class EntityDetail:
    """Detail panel content for the selected entity."""
    entity: Entity
    generalization_chain: List[Entity] = field(default_factory=list)
    related_relationships: List[Relationship] = field(default_factory=list)


@dataclass(frozen=True)
class GraphView:
    entities: List[RenderedEntity] = field(default_factory=list)
    relationships: List[RenderedRelationship] = field(default_factory=list)
    zoom: float = 1.0
    pan: Position = field(default_factory=Position)
    namespaces: List[NamespaceOption] = field(default_factory=list)
    status: Optional[StatusStrip] = None
    legend: Legend = field(default_factory=Legend)
    detail: Optional[EntityDetail] = None
    loading: bool = False
    error: Optional[str] = None
    can_refresh: bool = True

    @property
    def entity_ids(self) -> List[str]:
        return [r.entity.entity_id for r in self.entities]

    @property
    def highlighted_relationships(self) -> List[RenderedRelationship]:
        return [r for r in self.relationships if r.is_highlighted]

    def get_rendered_entity(self, entity_id: str) -> Optional[RenderedEntity]:
        for rendered in self.entities:
            if rendered.entity.entity_id == entity_id:
                return rendered
        return None
