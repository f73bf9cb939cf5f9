"""
    ViewerSession — one schema source combined with its interaction state.

    The session is the single owner of mutable viewer state. Every
    transition runs to completion before the next one starts; readers only
    ever see a fully formed ``ViewerState``.

    Each session holds:
        • source     – the host collaborator delivering schemas
        • snapshot   – the most recent successful fetch (or ``None``)
        • state      – the current ``ViewerState``
        • event log  – the dispatched events, bounded, for replay

    Fetches
    ───────
    ``load()`` / ``refresh()`` block; ``load_async()`` / ``refresh_async()``
    run the host calls and the layout in the default executor so the event
    loop stays responsive. Only one fetch may be pending at a time.
"""
import asyncio
import logging
import uuid
from typing import List, Optional, Tuple

from schema_api.models.position import Position
from schema_api.models.snapshot import SchemaSnapshot
from schema_api.models.view import GraphView
from schema_api.plugins.base import SchemaSource

from viewer_services.exceptions import FetchFailure, RefreshInProgressError

from .config import PlatformConfig
from .events import SnapshotLoaded, SnapshotRefreshed, ViewerEvent, reduce
from .state import ViewerState

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load data: {}"
REFRESH_ERROR = "Failed to refresh data: {}"


class ViewerSession:
    """
    Encapsulates one schema source and the interactive view over it.

    Attributes:
        session_id:  Unique identifier.
        name:        Human-readable label.
        source_name: Name of the schema source plugin that opened the source.
        location:    Path / URI the source was opened from.
    """

    def __init__(
        self,
        source: SchemaSource,
        source_name: str = "",
        location: str = "",
        name: Optional[str] = None,
        config: Optional[PlatformConfig] = None,
    ):
        self.session_id: str = str(uuid.uuid4())
        self.name: str = name or f"Session-{self.session_id[:8]}"
        self.source_name: str = source_name
        self.location: str = location

        self._config: PlatformConfig = config or PlatformConfig()
        self._source: SchemaSource = source
        self._snapshot: Optional[SchemaSnapshot] = None
        self._state: ViewerState = ViewerState()
        self._loading: bool = False
        self._error: Optional[str] = None

        # Events older than the log window are folded into the base state
        self._log_base: ViewerState = ViewerState()
        self._event_log: List[ViewerEvent] = []

        # Services (imported here to avoid circular imports)
        from viewer_services.snapshot_service import SnapshotBuilder
        from viewer_services.layout_service import LayoutService
        from viewer_services.view_service import ViewService

        self._builder = SnapshotBuilder(self._config.viewer.system_namespaces)
        self._layout_service = LayoutService(self._config.layout)
        self._view_service = ViewService(self._config.viewer)

    # ── Properties ───────────────────────────────────────────────

    @property
    def snapshot(self) -> Optional[SchemaSnapshot]:
        return self._snapshot

    @property
    def state(self) -> ViewerState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def can_refresh(self) -> bool:
        """The refresh trigger is disabled while a fetch is pending."""
        return not self._loading

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def event_log(self) -> List[ViewerEvent]:
        return list(self._event_log)

    @property
    def view(self) -> GraphView:
        """The derived render record for the current state."""
        return self._view_service.derive(
            self._snapshot, self._state,
            loading=self._loading, error=self._error, can_refresh=self.can_refresh,
        )

    def position_of(self, entity_id: str) -> Optional[Position]:
        return self._state.position_of(entity_id)

    # ── Fetching ─────────────────────────────────────────────────

    def load(self) -> bool:
        """
        Fetch the schema, compute the layout and reset the view.

        Returns:
            ``True`` on success; on failure ``error`` holds the message.

        Raises:
            RefreshInProgressError: If another fetch is pending.
        """
        self._begin_fetch()
        try:
            result = self._fetch_and_layout()
        except FetchFailure as exc:
            self._fail(LOAD_ERROR, exc)
            return False
        finally:
            self._loading = False
        self._complete(SnapshotLoaded(*result))
        return True

    def refresh(self) -> bool:
        """
        Fetch again and keep the viewport, namespace selection and drags.

        Before the first successful load this behaves like ``load()``. A
        failed refresh leaves the previous snapshot, layout and state in
        place.
        """
        if self._snapshot is None:
            return self.load()

        self._begin_fetch()
        try:
            result = self._fetch_and_layout()
        except FetchFailure as exc:
            self._fail(REFRESH_ERROR, exc)
            return False
        finally:
            self._loading = False
        self._complete(SnapshotRefreshed(*result))
        return True

    async def load_async(self) -> bool:
        """Non-blocking ``load()``; the host calls run in the default executor."""
        self._begin_fetch()
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self._fetch_and_layout)
        except FetchFailure as exc:
            self._fail(LOAD_ERROR, exc)
            return False
        finally:
            self._loading = False
        self._complete(SnapshotLoaded(*result))
        return True

    async def refresh_async(self) -> bool:
        """Non-blocking ``refresh()``."""
        if self._snapshot is None:
            return await self.load_async()

        self._begin_fetch()
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self._fetch_and_layout)
        except FetchFailure as exc:
            self._fail(REFRESH_ERROR, exc)
            return False
        finally:
            self._loading = False
        self._complete(SnapshotRefreshed(*result))
        return True

    def _begin_fetch(self) -> None:
        if self._loading:
            raise RefreshInProgressError(
                f"Session {self.session_id[:8]}: a fetch is already pending."
            )
        self._loading = True

    def _fetch_and_layout(self) -> Tuple[SchemaSnapshot, dict]:
        snapshot = self._builder.fetch(self._source)
        return snapshot, self._layout_service.layout(snapshot)

    def _fail(self, template: str, exc: FetchFailure) -> None:
        self._error = template.format(exc)
        logger.error("Session %s: %s", self.session_id[:8], self._error)

    def _complete(self, event: ViewerEvent) -> None:
        self._snapshot = event.snapshot
        self._error = None
        self._apply(event)
        logger.info("Session %s: %s (%d entities)", self.session_id[:8],
                    type(event).__name__, self._snapshot.get_number_of_entities())

    # ── Gestures ─────────────────────────────────────────────────

    def dispatch(self, event: ViewerEvent) -> ViewerState:
        """
        Apply a gesture to the current state.

        Gestures arriving before the first snapshot are ignored. Snapshots
        only enter through ``load()`` and ``refresh()``.

        Returns:
            The new current state.

        Raises:
            TypeError: If ``event`` is a lifecycle event.
        """
        if not event.is_gesture:
            raise TypeError(f"{type(event).__name__} is not a gesture; use load() or refresh().")
        if self._snapshot is None:
            logger.warning("Session %s: %s ignored, nothing loaded yet.",
                           self.session_id[:8], type(event).__name__)
            return self._state
        self._apply(event)
        logger.debug("Session %s: %r", self.session_id[:8], event)
        return self._state

    def dispatch_all(self, events: List[ViewerEvent]) -> ViewerState:
        for event in events:
            self.dispatch(event)
        return self._state

    def _apply(self, event: ViewerEvent) -> None:
        self._state = reduce(self._state, event, self._config.viewer)
        self._record(event)

    # ── Event log ────────────────────────────────────────────────

    def _record(self, event: ViewerEvent) -> None:
        if self._config.max_event_log <= 0:
            self._log_base = self._state
            return
        self._event_log.append(event)
        if len(self._event_log) > self._config.max_event_log:
            dropped = self._event_log.pop(0)  # Fold oldest event into the base
            self._log_base = reduce(self._log_base, dropped, self._config.viewer)

    def replay(self) -> ViewerState:
        """Recompute the current state from the recorded events."""
        state = self._log_base
        for event in self._event_log:
            state = reduce(state, event, self._config.viewer)
        return state

    # ── Convenience ──────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize session metadata (not the snapshot)."""
        snapshot = self._snapshot
        return {
            'session_id': self.session_id,
            'name': self.name,
            'source': self.source_name,
            'location': self.location,
            'loaded': snapshot is not None,
            'entities': snapshot.get_number_of_entities() if snapshot else 0,
            'relationships': snapshot.get_number_of_relationships() if snapshot else 0,
            'namespaces': len(snapshot.namespaces) if snapshot else 0,
            'error': self._error,
        }

    def __repr__(self) -> str:
        return (
            f"ViewerSession(id={self.session_id[:8]}, "
            f"name='{self.name}', "
            f"source='{self.source_name}', "
            f"loaded={self.is_loaded})"
        )
