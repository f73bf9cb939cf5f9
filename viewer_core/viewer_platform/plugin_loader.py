"""
    Plugin registry for schema sources and render adapters.

    Design Pattern: Service Locator / Registry
    ────────────────────────────────────────────
    Installed distributions announce plugins under an entry-point group;
    embedding hosts may also hand instances in directly with ``register``.
    Discovery happens once, on first use.
"""
import importlib.metadata
import logging
from typing import TypeVar, Generic, Type, Dict, List, Optional

from schema_api.plugins.base import RenderAdapterPlugin, SchemaSourcePlugin

logger = logging.getLogger(__name__)

TPlugin = TypeVar('TPlugin')

# Must match the entry_points of the plugin distributions' setup.py
SCHEMA_SOURCE_EP_GROUP = 'schema_viewer.schema_source'
RENDER_ADAPTER_EP_GROUP = 'schema_viewer.render_adapter'


class PluginLoader(Generic[TPlugin]):
    """
    Plugins of one base class, keyed by name.

    Usage:
        loader = create_schema_source_loader()
        source = loader.get('json').open('export.json')
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str):
        self._base_class = plugin_base_class
        self._group = group
        self._plugins: Dict[str, TPlugin] = {}
        self._registered: Dict[str, TPlugin] = {}
        self._loaded = False

    def _discover(self) -> None:
        for ep in importlib.metadata.entry_points(group=self._group):
            try:
                plugin_cls = ep.load()
                if not issubclass(plugin_cls, self._base_class):
                    logger.warning("Entry point '%s' is not a %s, skipped.",
                                   ep.name, self._base_class.__name__)
                    continue
                self._plugins[ep.name] = plugin_cls()
                logger.info("Plugin '%s' loaded from %s.", ep.name, ep.value)
            except Exception as exc:
                logger.error("Plugin '%s' could not be loaded: %s", ep.name, exc)

        # Explicit registrations shadow discovered plugins of the same name
        self._plugins.update(self._registered)
        self._loaded = True

    def _ensure_loaded(self) -> Dict[str, TPlugin]:
        if not self._loaded:
            self._discover()
        return self._plugins

    def register(self, name: str, plugin: TPlugin) -> None:
        """
        Add a plugin instance that has no entry point.

        Raises:
            TypeError: If ``plugin`` is not an instance of the base class.
        """
        if not isinstance(plugin, self._base_class):
            raise TypeError(f"Plugin '{name}' is not a {self._base_class.__name__}.")
        self._registered[name] = plugin
        self._plugins[name] = plugin

    def get(self, name: str) -> Optional[TPlugin]:
        return self._ensure_loaded().get(name)

    def get_names(self) -> List[str]:
        return sorted(self._ensure_loaded())

    def reload(self) -> Dict[str, TPlugin]:
        """Scan the entry points again; registered instances are kept."""
        self._plugins = {}
        self._loaded = False
        return self._ensure_loaded()

    def __len__(self) -> int:
        return len(self._ensure_loaded())

    def __repr__(self) -> str:
        return f"PluginLoader({self._base_class.__name__}, group='{self._group}')"


def create_schema_source_loader() -> PluginLoader[SchemaSourcePlugin]:
    return PluginLoader(SchemaSourcePlugin, SCHEMA_SOURCE_EP_GROUP)


def create_render_adapter_loader() -> PluginLoader[RenderAdapterPlugin]:
    return PluginLoader(RenderAdapterPlugin, RENDER_ADAPTER_EP_GROUP)
