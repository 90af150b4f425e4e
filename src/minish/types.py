"""Shared types for minish."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .session import Session


DEFAULT_MAX_LINE_LENGTH = 4096
"""Longest accepted input line, in bytes, not counting the newline."""


@dataclass
class ExecResult:
    """Outcome of running one command line."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0


@dataclass
class ShellOptions:
    """Shell configuration."""

    max_line_length: Optional[int] = DEFAULT_MAX_LINE_LENGTH
    """Longest accepted line in bytes. None accepts lines of any length."""

    prompt: str = "{line_number}: "
    """Prompt format, shown only when the session is interactive."""


@dataclass
class ShellState:
    """Mutable state maintained by the shell loop."""

    line_number: int = 0
    """Number shown in the next prompt."""

    last_exit_code: int = 0
    """Exit code of the last command (builtin or external)."""


@dataclass
class ShellContext:
    """Context provided to builtin handlers."""

    session: "Session"
    """Terminal session captured at startup (read-only)."""

    state: ShellState = field(default_factory=ShellState)
    """Mutable shell state."""

    options: ShellOptions = field(default_factory=ShellOptions)
    """Shell options."""
