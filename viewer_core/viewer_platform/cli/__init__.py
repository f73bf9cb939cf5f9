"""
CLI package — text commands driving a viewer session.

Design Patterns
───────────────
• Command       – each CLI operation is a ``Command`` object with
                  ``execute(session)``.
• Interpreter   – parsing the CLI syntax into structured command objects.
"""
from .command_processor import CommandProcessor
from .commands import (
    Command,
    CommandResult,
    GestureCommand,
    SelectCommand,
    DeselectCommand,
    ZoomCommand,
    ScrollCommand,
    PanCommand,
    DragCommand,
    ToggleNamespaceCommand,
    NamespacesCommand,
    SearchCommand,
    RefreshCommand,
    InfoCommand,
    StatusCommand,
    HelpCommand,
)

__all__ = [
    'CommandProcessor',
    'Command',
    'CommandResult',
    'GestureCommand',
    'SelectCommand',
    'DeselectCommand',
    'ZoomCommand',
    'ScrollCommand',
    'PanCommand',
    'DragCommand',
    'ToggleNamespaceCommand',
    'NamespacesCommand',
    'SearchCommand',
    'RefreshCommand',
    'InfoCommand',
    'StatusCommand',
    'HelpCommand',
]
