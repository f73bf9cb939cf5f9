"""
    Viewer events — every gesture and lifecycle step as an object.

    Design Pattern: Command
    ───────────────────────
    Each event encapsulates one state transition:
        • ``apply(state, config) → ViewerState``  — pure, never mutates

    This enables:
        • Decoupling the render adapter (which reports gestures) from the
          state owner (the session).
        • Deterministic replay of a recorded event log.
        • Logging / auditing of every transition.

    Supported events:
    ─────────────────
        SnapshotLoaded(snapshot, layout)      initial load, resets the view
        SnapshotRefreshed(snapshot, layout)   refresh, keeps the view
        ClickEntity(id)                       select
        ClickBackground()                     deselect
        PointerDownOnNode(id, pointer)        start node drag
        PointerDownOnCanvas(pointer)          start panning
        PointerMove(pointer)                  continue drag / pan
        PointerUp()                           end drag / pan
        Scroll(delta_y)                       wheel zoom
        ZoomIn() / ZoomOut()                  toolbar zoom
        ResetView()                           zoom 1, pan 0
        ToggleNamespace(name)                 namespace checkbox
        QuickSelectNamespaces(mode)           all / first-party / none
        SearchChanged(term)                   search box
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from schema_api.models.position import Position
from schema_api.models.snapshot import SchemaSnapshot

from .config import ViewerConfig
from .state import ViewerState

logger = logging.getLogger(__name__)


# ── Abstract base ────────────────────────────────────────────────

class ViewerEvent(ABC):
    """
    Abstract base for all viewer events.

    Design Pattern: Command
    """

    @abstractmethod
    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        """Return the state that follows ``state`` after this event."""
        ...

    @property
    def is_gesture(self) -> bool:
        """Whether the event originates from the user (vs. a fetch)."""
        return True


def reduce(state: ViewerState, event: ViewerEvent,
           config: Optional[ViewerConfig] = None) -> ViewerState:
    """
    The reducer: ``(state, event) -> state``.

    Raises:
        TypeError: If ``event`` is not a ``ViewerEvent``.
    """
    if not isinstance(event, ViewerEvent):
        raise TypeError(f"Not a viewer event: {event!r}")
    return event.apply(state, config or ViewerConfig())


# ═════════════════════════════════════════════════════════════════
#  LIFECYCLE EVENTS
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SnapshotLoaded(ViewerEvent):
    """
    Initial load: show first-party namespaces, fresh layout, no overrides,
    no selection, identity viewport.
    """
    snapshot: SchemaSnapshot
    layout: Dict[str, Position] = field(default_factory=dict)

    @property
    def is_gesture(self) -> bool:
        return False

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        namespaces = tuple(self.snapshot.namespaces)
        return ViewerState(
            layout=dict(self.layout),
            selected_namespaces=frozenset(ns.name for ns in namespaces if ns.is_first_party),
            namespaces=namespaces,
        )


@dataclass(frozen=True)
class SnapshotRefreshed(ViewerEvent):
    """
    Refresh: new layout; selection of namespaces kept minus vanished names;
    viewport kept; overrides and selection of vanished entities dropped.
    """
    snapshot: SchemaSnapshot
    layout: Dict[str, Position] = field(default_factory=dict)

    @property
    def is_gesture(self) -> bool:
        return False

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        present = set(self.snapshot.namespace_names)
        overrides = {
            entity_id: pos for entity_id, pos in state.position_overrides.items()
            if self.snapshot.has_entity(entity_id)
        }
        selected = state.selected_entity
        if selected is not None and not self.snapshot.has_entity(selected):
            selected = None

        return state.evolve(
            layout=dict(self.layout),
            position_overrides=overrides,
            selected_entity=selected,
            selected_namespaces=frozenset(n for n in state.selected_namespaces if n in present),
            namespaces=tuple(self.snapshot.namespaces),
            is_dragging_node=False,
            dragged_entity=None,
            is_panning_canvas=False,
        )


# ═════════════════════════════════════════════════════════════════
#  SELECTION
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ClickEntity(ViewerEvent):
    """
    Select an entity. The adapter must not also report ``ClickBackground``
    for the same click (propagation stops at the node).

    Ids without a position (not part of the current layout) are ignored
    and leave the selection unchanged.
    """
    entity_id: str

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        if state.position_of(self.entity_id) is None:
            logger.warning("Click on unknown entity '%s' ignored.", self.entity_id)
            return state
        return state.evolve(selected_entity=self.entity_id)


@dataclass(frozen=True)
class ClickBackground(ViewerEvent):
    """Deselect."""

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        return state.evolve(selected_entity=None)


# ═════════════════════════════════════════════════════════════════
#  POINTER: DRAG AND PAN
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PointerDownOnNode(ViewerEvent):
    entity_id: str
    pointer: Position

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        current = state.position_of(self.entity_id)
        if current is None:
            logger.warning("Drag of unknown entity '%s' ignored.", self.entity_id)
            return state
        return state.evolve(
            is_dragging_node=True,
            dragged_entity=self.entity_id,
            drag_offset=self.pointer - current,
            is_panning_canvas=False,
        )


@dataclass(frozen=True)
class PointerDownOnCanvas(ViewerEvent):
    """Pointer down on empty canvas area only (not on a node)."""
    pointer: Position

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        return state.evolve(
            is_panning_canvas=True,
            pan_anchor=self.pointer - state.pan,
        )


@dataclass(frozen=True)
class PointerMove(ViewerEvent):
    pointer: Position

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        if state.is_dragging_node and state.dragged_entity is not None:
            overrides = dict(state.position_overrides)
            overrides[state.dragged_entity] = self.pointer - state.drag_offset
            return state.evolve(position_overrides=overrides)
        if state.is_panning_canvas:
            return state.evolve(pan=self.pointer - state.pan_anchor)
        return state


@dataclass(frozen=True)
class PointerUp(ViewerEvent):
    """Ends a drag or pan; a dragged position stays as an override."""

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        if not (state.is_dragging_node or state.is_panning_canvas):
            return state
        return state.evolve(
            is_dragging_node=False,
            dragged_entity=None,
            is_panning_canvas=False,
        )


# ═════════════════════════════════════════════════════════════════
#  ZOOM
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Scroll(ViewerEvent):
    """Wheel zoom: positive ``delta_y`` scrolls away (zoom out)."""
    delta_y: float

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        factor = config.wheel_zoom_out if self.delta_y > 0 else config.wheel_zoom_in
        return state.evolve(zoom=config.clamp_zoom(state.zoom * factor))


@dataclass(frozen=True)
class ZoomIn(ViewerEvent):

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        return state.evolve(zoom=config.clamp_zoom(state.zoom * config.button_zoom_in))


@dataclass(frozen=True)
class ZoomOut(ViewerEvent):

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        return state.evolve(zoom=config.clamp_zoom(state.zoom * config.button_zoom_out))


@dataclass(frozen=True)
class ResetView(ViewerEvent):
    """Zoom 1 and pan 0; overrides and selection are untouched."""

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        return state.evolve(zoom=1.0, pan=Position.origin())


# ═════════════════════════════════════════════════════════════════
#  NAMESPACES AND SEARCH
# ═════════════════════════════════════════════════════════════════

class QuickSelect(Enum):
    ALL = "all"
    FIRST_PARTY = "default"
    NONE = "none"


@dataclass(frozen=True)
class ToggleNamespace(ViewerEvent):
    name: str

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        selected = set(state.selected_namespaces)
        if self.name in selected:
            selected.remove(self.name)
        else:
            selected.add(self.name)
        return state.evolve(selected_namespaces=frozenset(selected))


@dataclass(frozen=True)
class QuickSelectNamespaces(ViewerEvent):
    mode: QuickSelect

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        if self.mode == QuickSelect.ALL:
            selected = frozenset(state.namespace_names)
        elif self.mode == QuickSelect.FIRST_PARTY:
            selected = state.first_party_namespaces
        else:
            selected = frozenset()
        return state.evolve(selected_namespaces=selected)


@dataclass(frozen=True)
class SearchChanged(ViewerEvent):
    term: str

    def apply(self, state: ViewerState, config: ViewerConfig) -> ViewerState:
        return state.evolve(search_term=self.term or "")
