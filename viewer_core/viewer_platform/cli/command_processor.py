"""
    CommandProcessor — parses raw CLI strings and dispatches commands.

    Design Patterns
    ───────────────
    • Interpreter   – parses the CLI text into structured ``Command`` objects.
    • Invoker       – keeps a bounded history of executed command lines.
    • Facade        – single ``process(text, session)`` entry-point hides
                      all parsing.
"""
from __future__ import annotations

import logging
import shlex
from typing import List, Optional

from viewer_services.exceptions import CommandParseError

from ..events import QuickSelect
from ..session import ViewerSession
from .commands import (
    Command,
    CommandResult,
    DeselectCommand,
    DragCommand,
    HelpCommand,
    InfoCommand,
    NamespacesCommand,
    PanCommand,
    RefreshCommand,
    ScrollCommand,
    SearchCommand,
    SelectCommand,
    StatusCommand,
    ToggleNamespaceCommand,
    ZoomCommand,
)

logger = logging.getLogger(__name__)

_QUICK_SELECT = {
    'all': QuickSelect.ALL,
    'default': QuickSelect.FIRST_PARTY,
    'none': QuickSelect.NONE,
}


class CommandProcessor:
    """
    Parses raw CLI input, creates ``Command`` objects and executes them
    against a viewer session.

    Usage:
        processor = CommandProcessor()
        result = processor.process("drag 42 300 200", session)
    """

    def __init__(self, max_history: int = 50):
        self._history: List[str] = []
        self._max_history = max_history

    # ── Public API ───────────────────────────────────────────────

    def process(self, text: str, session: Optional[ViewerSession]) -> CommandResult:
        """
        Parse and execute a single CLI command.

        Args:
            text:    Raw command string from the user.
            session: The session the command acts on.

        Returns:
            ``CommandResult`` with success status, message and data.
        """
        text = self._strip_comments(text).strip()
        if not text:
            return CommandResult(False, "Empty command. Type 'help' for usage.")

        try:
            command = self.parse(text)
        except CommandParseError as e:
            return CommandResult(False, f"Parse error: {e}")

        if session is None and not isinstance(command, HelpCommand):
            return CommandResult(False, "No active session.")
        if command.requires_snapshot and not session.is_loaded:
            return CommandResult(False, "Nothing loaded yet. Try 'refresh'.")

        result = command.execute(session)
        if result.success:
            self._remember(text)
        logger.debug("Command '%s' → %s", text, "ok" if result.success else result.message)
        return result

    @property
    def history(self) -> List[str]:
        """Successfully executed command lines, oldest first."""
        return list(self._history)

    def _remember(self, text: str) -> None:
        if len(self._history) >= self._max_history:
            self._history.pop(0)
        self._history.append(text)

    # ── Comment handling ────────────────────────────────────────

    @staticmethod
    def _strip_comments(text: str) -> str:
        """
        Strip inline comments: everything after an unquoted ``#``.

        Example:
            >>> CommandProcessor._strip_comments("zoom in   # closer")
            'zoom in'
        """
        in_single = False
        in_double = False
        for i, ch in enumerate(text):
            if ch == "'" and not in_double:
                in_single = not in_single
            elif ch == '"' and not in_single:
                in_double = not in_double
            elif ch == '#' and not in_single and not in_double:
                return text[:i].rstrip()
        return text

    # ── Parser ───────────────────────────────────────────────────

    def parse(self, text: str) -> Command:
        """
        Parse raw CLI text into a ``Command`` object.

        Raises:
            CommandParseError: If the text cannot be parsed.
        """
        try:
            tokens = shlex.split(text)
        except ValueError:
            # Malformed quotes: fall back to whitespace
            tokens = text.split()

        if not tokens:
            raise CommandParseError("Empty command.")

        verb = tokens[0].lower()
        args = tokens[1:]

        # ── Single-word commands ──
        if verb == "help":
            return HelpCommand()
        if verb == "deselect":
            self._expect_args(verb, args, 0)
            return DeselectCommand()
        if verb == "refresh":
            self._expect_args(verb, args, 0)
            return RefreshCommand()
        if verb == "status":
            self._expect_args(verb, args, 0)
            return StatusCommand()

        if verb == "select":
            self._expect_args(verb, args, 1, "select <id>")
            return SelectCommand(args[0])

        if verb == "zoom":
            action = self._choice(verb, args, ("in", "out", "reset"))
            return ZoomCommand(action)

        if verb == "scroll":
            direction = self._choice(verb, args, ("up", "down"))
            return ScrollCommand(direction)

        if verb == "pan":
            self._expect_args(verb, args, 2, "pan <dx> <dy>")
            return PanCommand(*self._numbers(args))

        if verb == "drag":
            self._expect_args(verb, args, 3, "drag <id> <x> <y>")
            x, y = self._numbers(args[1:])
            return DragCommand(args[0], x, y)

        if verb == "toggle":
            if not args:
                raise CommandParseError("Usage: toggle <namespace>")
            return ToggleNamespaceCommand(" ".join(args))

        if verb == "namespaces":
            mode = self._choice(verb, args, tuple(_QUICK_SELECT))
            return NamespacesCommand(_QUICK_SELECT[mode])

        if verb == "search":
            return SearchCommand(" ".join(args).strip())

        if verb == "info":
            if len(args) > 1:
                raise CommandParseError("Usage: info [id]")
            return InfoCommand(args[0] if args else None)

        raise CommandParseError(f"Unknown command: '{verb}'. Type 'help' for usage.")

    # ── Token helpers ────────────────────────────────────────────

    @staticmethod
    def _expect_args(verb: str, args: List[str], count: int, usage: Optional[str] = None) -> None:
        if len(args) != count:
            raise CommandParseError(f"Usage: {usage or verb}")

    @staticmethod
    def _choice(verb: str, args: List[str], options: tuple) -> str:
        if len(args) != 1 or args[0].lower() not in options:
            raise CommandParseError(f"Usage: {verb} {'|'.join(options)}")
        return args[0].lower()

    @staticmethod
    def _numbers(args: List[str]) -> List[float]:
        try:
            return [float(a) for a in args]
        except ValueError:
            raise CommandParseError(f"Expected numbers, got: {' '.join(args)}") from None
