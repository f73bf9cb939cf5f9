"""
    CLI Commands — concrete command implementations.

    Design Pattern: Command
    ───────────────────────
    Each command encapsulates one viewer action as an object with
    ``execute(session) → CommandResult``. Interactive commands translate into
    the same gesture events a render adapter reports, so a scripted session
    goes through exactly the transitions a user would trigger.

    Supported commands:
    ───────────────────
        select <id>
        deselect
        zoom in|out|reset
        scroll up|down
        pan <dx> <dy>
        drag <id> <x> <y>
        toggle <namespace>
        namespaces all|default|none
        search [term]
        refresh
        info [id]
        status
        help
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from schema_api.models.position import Position

from viewer_services.exceptions import RefreshInProgressError

from ..events import (
    ClickBackground,
    ClickEntity,
    PointerDownOnCanvas,
    PointerDownOnNode,
    PointerMove,
    PointerUp,
    QuickSelect,
    QuickSelectNamespaces,
    ResetView,
    Scroll,
    SearchChanged,
    ToggleNamespace,
    ViewerEvent,
    ZoomIn,
    ZoomOut,
)
from ..session import ViewerSession


# ── Result wrapper ───────────────────────────────────────────────

@dataclass
class CommandResult:
    """
    Value object returned by every command execution.

    Attributes:
        success:  Whether the command completed without error.
        message:  Human-readable output.
        data:     Optional structured data for programmatic consumers.
    """
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = field(default_factory=dict)


# ── Abstract base ────────────────────────────────────────────────

class Command(ABC):
    """
    Abstract base for all CLI commands.

    Design Pattern: Command
    """

    @abstractmethod
    def execute(self, session: ViewerSession) -> CommandResult:
        """Execute the command against the given session."""
        ...

    @property
    def requires_snapshot(self) -> bool:
        """Whether the command is meaningless before the first load."""
        return True


class GestureCommand(Command):
    """Base for commands that replay one or more gesture events."""

    @abstractmethod
    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        """The gesture events this command stands for."""
        ...

    @abstractmethod
    def describe(self, session: ViewerSession) -> str:
        """Message reported once the events have been applied."""
        ...

    def execute(self, session: ViewerSession) -> CommandResult:
        session.dispatch_all(self.events(session))
        return CommandResult(True, self.describe(session), _state_summary(session))


def _state_summary(session: ViewerSession) -> Dict[str, Any]:
    state = session.state
    return {
        'zoom': state.zoom,
        'pan': state.pan.to_dict(),
        'selected': state.selected_entity,
        'namespaces': sorted(state.selected_namespaces),
        'search': state.search_term,
    }


# ═════════════════════════════════════════════════════════════════
#  SELECTION
# ═════════════════════════════════════════════════════════════════

class SelectCommand(GestureCommand):
    """
    Select an entity.

    Syntax:
        select <id>
    """

    def __init__(self, entity_id: str):
        self._entity_id = entity_id

    def execute(self, session: ViewerSession) -> CommandResult:
        if session.snapshot.get_entity(self._entity_id) is None:
            return CommandResult(False, f"Entity '{self._entity_id}' not found.")
        return super().execute(session)

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [ClickEntity(self._entity_id)]

    def describe(self, session: ViewerSession) -> str:
        entity = session.snapshot.get_entity(self._entity_id)
        return f"Selected '{entity.qualified_name}'."


class DeselectCommand(GestureCommand):
    """
    Clear the selection (click on the background).

    Syntax:
        deselect
    """

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [ClickBackground()]

    def describe(self, session: ViewerSession) -> str:
        return "Selection cleared."


# ═════════════════════════════════════════════════════════════════
#  VIEWPORT
# ═════════════════════════════════════════════════════════════════

class ZoomCommand(GestureCommand):
    """
    Toolbar zoom.

    Syntax:
        zoom in
        zoom out
        zoom reset
    """

    _EVENTS = {'in': ZoomIn, 'out': ZoomOut, 'reset': ResetView}

    def __init__(self, action: str):
        self._action = action

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [self._EVENTS[self._action]()]

    def describe(self, session: ViewerSession) -> str:
        return f"Zoom: {session.state.zoom_percent}%"


class ScrollCommand(GestureCommand):
    """
    Mouse wheel; scrolling down zooms out.

    Syntax:
        scroll up
        scroll down
    """

    def __init__(self, direction: str):
        self._delta_y = 1.0 if direction == 'down' else -1.0

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [Scroll(self._delta_y)]

    def describe(self, session: ViewerSession) -> str:
        return f"Zoom: {session.state.zoom_percent}%"


class PanCommand(GestureCommand):
    """
    Drag the canvas background by an offset.

    Syntax:
        pan <dx> <dy>
    """

    def __init__(self, dx: float, dy: float):
        self._delta = Position(dx, dy)

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        start = Position.origin()
        return [PointerDownOnCanvas(start), PointerMove(start + self._delta), PointerUp()]

    def describe(self, session: ViewerSession) -> str:
        pan = session.state.pan
        return f"Pan: ({pan.x:g}, {pan.y:g})"


class DragCommand(GestureCommand):
    """
    Drag an entity so that it ends up at the given position.

    Syntax:
        drag <id> <x> <y>
    """

    def __init__(self, entity_id: str, x: float, y: float):
        self._entity_id = entity_id
        self._target = Position(x, y)

    def execute(self, session: ViewerSession) -> CommandResult:
        if session.position_of(self._entity_id) is None:
            return CommandResult(False, f"Entity '{self._entity_id}' not found.")
        return super().execute(session)

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        # Grab the node at its own position so the drag offset is zero
        grab = session.position_of(self._entity_id)
        return [PointerDownOnNode(self._entity_id, grab), PointerMove(self._target), PointerUp()]

    def describe(self, session: ViewerSession) -> str:
        pos = session.position_of(self._entity_id)
        return f"Entity '{self._entity_id}' moved to ({pos.x:g}, {pos.y:g})."


# ═════════════════════════════════════════════════════════════════
#  NAMESPACES AND SEARCH
# ═════════════════════════════════════════════════════════════════

class ToggleNamespaceCommand(GestureCommand):
    """
    Tick / untick one namespace.

    Syntax:
        toggle <namespace>
    """

    def __init__(self, name: str):
        self._name = name

    def execute(self, session: ViewerSession) -> CommandResult:
        if self._name not in session.state.namespace_names:
            return CommandResult(False, f"Namespace '{self._name}' not found.")
        return super().execute(session)

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [ToggleNamespace(self._name)]

    def describe(self, session: ViewerSession) -> str:
        shown = self._name in session.state.selected_namespaces
        return f"Namespace '{self._name}' {'shown' if shown else 'hidden'}."


class NamespacesCommand(GestureCommand):
    """
    Quick selection of namespaces.

    Syntax:
        namespaces all        every namespace
        namespaces default    neither marketplace nor system
        namespaces none       nothing
    """

    def __init__(self, mode: QuickSelect):
        self._mode = mode

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [QuickSelectNamespaces(self._mode)]

    def describe(self, session: ViewerSession) -> str:
        return f"{len(session.state.selected_namespaces)} namespace(s) selected."


class SearchCommand(GestureCommand):
    """
    Set the search term; without a term the search is cleared.

    Syntax:
        search Customer
        search
    """

    def __init__(self, term: str):
        self._term = term

    def events(self, session: ViewerSession) -> List[ViewerEvent]:
        return [SearchChanged(self._term)]

    def describe(self, session: ViewerSession) -> str:
        count = len(session.view.entities)
        if not self._term:
            return f"Search cleared: {count} entity(ies) visible."
        return f"Search '{self._term}': {count} entity(ies) visible."


# ═════════════════════════════════════════════════════════════════
#  SESSION-LEVEL COMMANDS
# ═════════════════════════════════════════════════════════════════

class RefreshCommand(Command):
    """
    Fetch the schema again.

    Syntax:
        refresh
    """

    @property
    def requires_snapshot(self) -> bool:
        return False

    def execute(self, session: ViewerSession) -> CommandResult:
        try:
            refreshed = session.refresh()
        except RefreshInProgressError as e:
            return CommandResult(False, f"Refresh refused: {e}")
        if not refreshed:
            return CommandResult(False, session.error)
        snapshot = session.snapshot
        return CommandResult(
            True,
            f"Refreshed: {snapshot.get_number_of_entities()} entity(ies), "
            f"{snapshot.get_number_of_relationships()} relationship(s).",
            session.to_dict(),
        )


# ═════════════════════════════════════════════════════════════════
#  INFORMATIONAL COMMANDS (no state change)
# ═════════════════════════════════════════════════════════════════

class InfoCommand(Command):
    """
    Display details about an entity, or a snapshot summary.

    Syntax:
        info <id>
        info   (shows snapshot summary)
    """

    def __init__(self, entity_id: Optional[str] = None):
        self._entity_id = entity_id

    def execute(self, session: ViewerSession) -> CommandResult:
        snapshot = session.snapshot
        if self._entity_id is None:
            msg = (
                f"Snapshot {snapshot.snapshot_id[:8]}: "
                f"{snapshot.get_number_of_entities()} entity(ies), "
                f"{snapshot.get_number_of_relationships()} relationship(s), "
                f"{len(snapshot.namespaces)} namespace(s)"
            )
            return CommandResult(True, msg, session.to_dict())

        entity = snapshot.get_entity(self._entity_id)
        if entity is None:
            return CommandResult(False, f"Entity '{self._entity_id}' not found.")

        lines = [f"Entity '{entity.name}' ({entity.qualified_name})"]
        lines.append(f"  namespace: {entity.namespace}")
        chain = snapshot.get_generalization_chain(entity.entity_id)
        if chain:
            lines.append("  extends: " + " -> ".join(e.qualified_name for e in chain))
        elif entity.generalization:
            lines.append(f"  extends: {entity.generalization}")
        for attr in entity.attributes:
            lines.append(f"  {attr.name}: {attr.type.value}")

        related = snapshot.get_related_relationships(entity.entity_id)
        if related:
            lines.append(f"  associations ({len(related)}):")
            for rel in related:
                lines.append(f"    {rel.name}: {rel.source} -> {rel.target} [{rel.multiplicity}]")

        return CommandResult(True, "\n".join(lines), entity.to_dict())


class StatusCommand(Command):
    """
    Show the status strip.

    Syntax:
        status
    """

    @property
    def requires_snapshot(self) -> bool:
        return False

    def execute(self, session: ViewerSession) -> CommandResult:
        view = session.view
        status = view.status
        msg = (
            f"Entities: {status.entity_count} | "
            f"Associations: {status.relationship_count} | "
            f"Namespaces: {status.namespace_count} | "
            f"Zoom: {status.zoom_percent}%"
        )
        if view.loading:
            msg += " | loading"
        if view.error:
            msg += f"\n{view.error}"
        return CommandResult(True, msg, {
            'entities': status.entity_count,
            'relationships': status.relationship_count,
            'namespaces': status.namespace_count,
            'zoom_percent': status.zoom_percent,
            'error': view.error,
        })


class HelpCommand(Command):
    """
    Display available commands.

    Syntax:
        help
    """

    HELP_TEXT = """Available commands:
  select <id>                    Select an entity
  deselect                       Clear the selection
  zoom in|out|reset              Toolbar zoom / reset view
  scroll up|down                 Mouse wheel zoom
  pan <dx> <dy>                  Move the canvas
  drag <id> <x> <y>              Move an entity
  toggle <namespace>             Show / hide a namespace
  namespaces all|default|none    Quick namespace selection
  search [term]                  Filter by name (no term clears)
  refresh                        Fetch the schema again
  info [id]                      Entity details or snapshot summary
  status                         Visible counts and zoom
  help                           Show this help"""

    @property
    def requires_snapshot(self) -> bool:
        return False

    def execute(self, session: ViewerSession) -> CommandResult:
        return CommandResult(True, self.HELP_TEXT)
