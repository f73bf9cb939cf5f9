"""
    ViewerState — the single owned state of one interactive viewer.

    The state is an immutable value: every gesture produces a new state via
    ``dataclasses.replace`` so that a sequence of events can be replayed
    deterministically and a renderer never observes a half-applied
    transition.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Optional, Tuple

from schema_api.models.namespace import NamespaceInfo
from schema_api.models.position import Position


@dataclass(frozen=True)
class ViewerState:
    """
    Attributes:
        zoom:                Zoom factor, kept within the configured bounds.
        pan:                 Canvas translation.
        layout:              Most recent Layout Engine output.
        position_overrides:  Manually dragged positions (win over ``layout``).
        selected_entity:     Id of the selected entity, if any.
        selected_namespaces: Namespaces whose entities are shown.
        search_term:         Current search box content.
        namespaces:          Descriptors of the current snapshot's namespaces.
        is_dragging_node:    A node drag is in progress.
        dragged_entity:      Id of the node being dragged.
        drag_offset:         Pointer minus node position at drag start.
        is_panning_canvas:   A background drag is in progress.
        pan_anchor:          Pointer minus pan at pan start.
    """
    zoom: float = 1.0
    pan: Position = field(default_factory=Position)
    layout: Dict[str, Position] = field(default_factory=dict)
    position_overrides: Dict[str, Position] = field(default_factory=dict)
    selected_entity: Optional[str] = None
    selected_namespaces: FrozenSet[str] = frozenset()
    search_term: str = ""
    namespaces: Tuple[NamespaceInfo, ...] = ()
    is_dragging_node: bool = False
    dragged_entity: Optional[str] = None
    drag_offset: Position = field(default_factory=Position)
    is_panning_canvas: bool = False
    pan_anchor: Position = field(default_factory=Position)

    # ── Derived helpers ──────────────────────────────────────────

    def position_of(self, entity_id: str) -> Optional[Position]:
        """Render position: manual override first, then the layout."""
        if entity_id in self.position_overrides:
            return self.position_overrides[entity_id]
        return self.layout.get(entity_id)

    @property
    def namespace_names(self) -> Tuple[str, ...]:
        return tuple(ns.name for ns in self.namespaces)

    @property
    def first_party_namespaces(self) -> FrozenSet[str]:
        return frozenset(ns.name for ns in self.namespaces if ns.is_first_party)

    @property
    def zoom_percent(self) -> int:
        return int(round(self.zoom * 100))

    def evolve(self, **changes) -> 'ViewerState':
        """Copy of this state with the given fields replaced."""
        return replace(self, **changes)
