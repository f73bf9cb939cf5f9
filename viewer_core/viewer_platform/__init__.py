"""
Viewer Platform — core package.

Public API:
    ViewerPlatform      – central orchestrator (Facade / Singleton)
    ViewerSession       – schema source + interaction state
    ViewerState         – immutable interaction state
    PlatformConfig      – top-level configuration
    PluginLoader        – generic plugin discovery
"""
from .core import ViewerPlatform
from .session import ViewerSession
from .state import ViewerState
from .config import (
    LayoutConfig,
    PlatformConfig,
    SerializationConfig,
    ViewerConfig,
)
from .plugin_loader import (
    PluginLoader,
    create_schema_source_loader,
    create_render_adapter_loader,
)

__all__ = [
    'ViewerPlatform',
    'ViewerSession',
    'ViewerState',
    'LayoutConfig',
    'PlatformConfig',
    'SerializationConfig',
    'ViewerConfig',
    'PluginLoader',
    'create_schema_source_loader',
    'create_render_adapter_loader',
]
