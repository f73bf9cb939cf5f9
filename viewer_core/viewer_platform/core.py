"""
    ViewerPlatform — the central orchestrator of the schema viewer.

    Design Patterns applied
    ───────────────────────
    • Singleton          – one platform instance per process
                           (via ``ViewerPlatform.get_instance()``).
    • Strategy           – pluggable schema sources and render adapters.
    • Repository         – ``_sessions`` dict hides storage details.
    • Facade             – single entry-point for hosts and the command
                           processor; hides plugin loading, session
                           management, gesture dispatch and serialization.
    • Observer (hooks)   – ``_listeners`` dict notifying views of session,
                           snapshot and selection changes.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from schema_api.models.snapshot import SchemaSnapshot
from schema_api.models.view import GraphView
from schema_api.plugins.base import RenderAdapterPlugin, SchemaSource, SchemaSourcePlugin

from .config import PlatformConfig, SerializationConfig
from .events import ClickEntity, ViewerEvent
from .session import ViewerSession
from .state import ViewerState
from .plugin_loader import (
    PluginLoader,
    create_render_adapter_loader,
    create_schema_source_loader,
)

logger = logging.getLogger(__name__)


# ── Observer event types ─────────────────────────────────────────
EVENT_SESSION_CREATED = "session_created"
EVENT_SESSION_SWITCHED = "session_switched"
EVENT_SESSION_REMOVED = "session_removed"
EVENT_SNAPSHOT_LOADED = "snapshot_loaded"
EVENT_VIEW_UPDATED = "view_updated"
EVENT_ENTITY_SELECTED = "entity_selected"


class ViewerPlatform:
    """
    Central orchestrator — Facade for the entire viewer.

    Manages:
        • Plugin discovery and loading.
        • Session lifecycle (create, open, switch, remove, list).
        • Fetching, gesture dispatch and rendering on the active session.
        • Serialization of views and snapshots.
        • Observer hooks for view synchronization.
    """

    _instance: Optional['ViewerPlatform'] = None

    # ── Singleton ────────────────────────────────────────────────

    @classmethod
    def get_instance(cls, config: Optional[PlatformConfig] = None) -> 'ViewerPlatform':
        """
        Return the singleton platform instance, creating it on first call.

        Args:
            config: Optional custom config (only used on first call).
        """
        if cls._instance is None:
            cls._instance = cls(config or PlatformConfig())
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Destroy the singleton (useful for testing)."""
        cls._instance = None

    # ── Constructor ──────────────────────────────────────────────

    def __init__(self, config: Optional[PlatformConfig] = None):
        """
        Initialize the platform.  Prefer ``get_instance()`` for singleton access.
        """
        self._config: PlatformConfig = config or PlatformConfig()

        # Plugin loaders (generic)
        self._source_loader: PluginLoader[SchemaSourcePlugin] = create_schema_source_loader()
        self._render_loader: PluginLoader[RenderAdapterPlugin] = create_render_adapter_loader()

        # Session repository
        self._sessions: Dict[str, ViewerSession] = {}
        self._active_session_id: Optional[str] = None

        # Services (imported here to avoid circular imports)
        from viewer_services.serialization_service import SnapshotSerializer, ViewSerializer

        self._view_serializer = ViewSerializer(self._config.serialization)
        self._snapshot_serializer = SnapshotSerializer()

        # Observer listeners: event_name → [callback, ...]
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}

        logger.info("ViewerPlatform initialized.")

    # ── Configuration ────────────────────────────────────────────

    @property
    def config(self) -> PlatformConfig:
        return self._config

    @property
    def serialization_config(self) -> SerializationConfig:
        return self._config.serialization

    @serialization_config.setter
    def serialization_config(self, value: SerializationConfig) -> None:
        self._config.serialization = value
        self._view_serializer.config = value

    # ── Plugin discovery ─────────────────────────────────────────

    def get_schema_source_names(self) -> List[str]:
        """Sorted list of installed schema source plugin names."""
        return self._source_loader.get_names()

    def get_render_adapter_names(self) -> List[str]:
        """Sorted list of installed render adapter plugin names."""
        return self._render_loader.get_names()

    def get_schema_source(self, name: str) -> Optional[SchemaSourcePlugin]:
        return self._source_loader.get(name)

    def get_render_adapter(self, name: str) -> Optional[RenderAdapterPlugin]:
        return self._render_loader.get(name)

    def register_schema_source(self, name: str, plugin: SchemaSourcePlugin) -> None:
        self._source_loader.register(name, plugin)

    def register_render_adapter(self, name: str, plugin: RenderAdapterPlugin) -> None:
        self._render_loader.register(name, plugin)

    def reload_plugins(self) -> None:
        """Force re-discovery of all plugins."""
        self._source_loader.reload()
        self._render_loader.reload()
        logger.info("Plugins reloaded: %d schema sources, %d render adapters",
                    len(self._source_loader), len(self._render_loader))

    # ── Session management ───────────────────────────────────────

    def open_session(self, location: str, plugin_name: Optional[str] = None,
                     session_name: Optional[str] = None, load: bool = True) -> ViewerSession:
        """
        Open a schema source through a plugin and create a session for it.

        Args:
            location:     Path / URI handed to the plugin.
            plugin_name:  Entry-point name (defaults to ``config.default_source``).
            session_name: Optional human-readable session name.
            load:         Perform the initial fetch right away.

        Raises:
            ValueError: If the plugin is not found.
        """
        name = plugin_name or self._config.default_source
        plugin = self._source_loader.get(name) if name else None
        if plugin is None:
            raise ValueError(
                f"Schema source plugin '{name}' not found. "
                f"Available: {self._source_loader.get_names()}"
            )

        source = plugin.open(location)
        session = self.create_session(source, source_name=name,
                                      location=location, name=session_name)
        logger.info("Source opened via '%s' from '%s' → session %s",
                    name, location, session.session_id[:8])
        if load:
            self.load(session.session_id)
        return session

    def create_session(self, source: SchemaSource, source_name: str = "",
                       location: str = "", name: Optional[str] = None) -> ViewerSession:
        """Create and activate a session over an already-opened source."""
        session = ViewerSession(source, source_name=source_name, location=location,
                                name=name, config=self._config)
        self._sessions[session.session_id] = session
        self._active_session_id = session.session_id
        self._notify(EVENT_SESSION_CREATED, session=session)
        return session

    def get_session(self, session_id: str) -> Optional[ViewerSession]:
        return self._sessions.get(session_id)

    def get_active_session(self) -> Optional[ViewerSession]:
        if self._active_session_id is None:
            return None
        return self._sessions.get(self._active_session_id)

    def set_active_session(self, session_id: str) -> ViewerSession:
        """
        Switch the active session.

        Raises:
            ValueError: If the session ID does not exist.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Session '{session_id}' not found.")
        self._active_session_id = session_id
        session = self._sessions[session_id]
        self._notify(EVENT_SESSION_SWITCHED, session=session)
        return session

    def remove_session(self, session_id: str) -> None:
        if session_id not in self._sessions:
            return
        del self._sessions[session_id]
        if self._active_session_id == session_id:
            self._active_session_id = next(iter(self._sessions), None)
        self._notify(EVENT_SESSION_REMOVED, session_id=session_id)

    def list_sessions(self) -> List[dict]:
        return [s.to_dict() for s in self._sessions.values()]

    # ── Fetching ─────────────────────────────────────────────────

    def load(self, session_id: Optional[str] = None) -> bool:
        session = self._resolve_session(session_id)
        ok = session.load()
        self._after_fetch(session, ok)
        return ok

    def refresh(self, session_id: Optional[str] = None) -> bool:
        session = self._resolve_session(session_id)
        ok = session.refresh()
        self._after_fetch(session, ok)
        return ok

    async def load_async(self, session_id: Optional[str] = None) -> bool:
        session = self._resolve_session(session_id)
        ok = await session.load_async()
        self._after_fetch(session, ok)
        return ok

    async def refresh_async(self, session_id: Optional[str] = None) -> bool:
        session = self._resolve_session(session_id)
        ok = await session.refresh_async()
        self._after_fetch(session, ok)
        return ok

    def _after_fetch(self, session: ViewerSession, ok: bool) -> None:
        if ok:
            self._notify(EVENT_SNAPSHOT_LOADED, session=session, snapshot=session.snapshot)
        self._notify(EVENT_VIEW_UPDATED, session=session)

    # ── Gestures ─────────────────────────────────────────────────

    def dispatch(self, event: ViewerEvent, session_id: Optional[str] = None) -> ViewerState:
        """
        Apply a gesture to the (active or specified) session.

        Raises:
            RuntimeError: If no session is active / found.
        """
        session = self._resolve_session(session_id)
        before = session.state
        after = session.dispatch(event)
        if after is before:
            return after

        self._notify(EVENT_VIEW_UPDATED, session=session)
        if isinstance(event, ClickEntity) and after.selected_entity == event.entity_id:
            entity = session.snapshot.get_entity(event.entity_id)
            self._notify(EVENT_ENTITY_SELECTED, session=session,
                         entity_id=event.entity_id, entity=entity)
        return after

    def get_view(self, session_id: Optional[str] = None) -> GraphView:
        return self._resolve_session(session_id).view

    # ── Rendering ────────────────────────────────────────────────

    def render(self, adapter_name: Optional[str] = None,
               session_id: Optional[str] = None) -> str:
        """
        Render the current view with the specified (or default) adapter.

        Raises:
            ValueError:   If no render adapter is found.
            RuntimeError: If no session is active.
        """
        session = self._resolve_session(session_id)
        name = adapter_name or self._config.default_renderer

        if name is None:
            names = self._render_loader.get_names()
            if not names:
                raise ValueError("No render adapter plugins installed.")
            name = names[0]

        plugin = self._render_loader.get(name)
        if plugin is None:
            raise ValueError(
                f"Render adapter plugin '{name}' not found. "
                f"Available: {self._render_loader.get_names()}"
            )
        return plugin.render(session.view)

    # ── Serialization ────────────────────────────────────────────

    @property
    def view_serializer(self):
        return self._view_serializer

    @property
    def snapshot_serializer(self):
        return self._snapshot_serializer

    def serialize_view(self, session_id: Optional[str] = None) -> dict:
        return self._view_serializer.serialize(self.get_view(session_id))

    def serialize_view_json(self, session_id: Optional[str] = None) -> str:
        return self._view_serializer.to_json(self.get_view(session_id))

    def serialize_snapshot_json(self, session_id: Optional[str] = None) -> str:
        """
        Raises:
            RuntimeError: If the session has nothing loaded.
        """
        session = self._resolve_session(session_id)
        if session.snapshot is None:
            raise RuntimeError(f"Session '{session.session_id}' has no snapshot yet.")
        return self._snapshot_serializer.to_json(session.snapshot)

    def deserialize_snapshot_json(self, json_str: str) -> SchemaSnapshot:
        return self._snapshot_serializer.from_json(json_str)

    # ── Observer pattern ─────────────────────────────────────────

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """
        Register a callback for a platform event.

        Events:
            - session_created
            - session_switched
            - session_removed
            - snapshot_loaded
            - view_updated
            - entity_selected
        """
        self._listeners.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def _notify(self, event: str, **kwargs: Any) -> None:
        """Fire all callbacks registered for the given event."""
        for cb in self._listeners.get(event, []):
            try:
                cb(**kwargs)
            except Exception as exc:
                logger.error("Observer callback failed for '%s': %s", event, exc)

    # ── Internal helpers ─────────────────────────────────────────

    def _resolve_session(self, session_id: Optional[str] = None) -> ViewerSession:
        """
        Return the requested session or the active one.

        Raises:
            RuntimeError: If no session can be resolved.
        """
        sid = session_id or self._active_session_id
        if sid is None:
            raise RuntimeError("No active session. Open a schema source first.")
        session = self._sessions.get(sid)
        if session is None:
            raise RuntimeError(f"Session '{sid}' not found.")
        return session

    def __repr__(self) -> str:
        return (
            f"ViewerPlatform(sessions={len(self._sessions)}, "
            f"schema_sources={len(self._source_loader)}, "
            f"render_adapters={len(self._render_loader)})"
        )
