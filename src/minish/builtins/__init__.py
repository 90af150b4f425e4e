"""Builtin commands.

Builtins run inside the shell's own process and act on its state (working
directory, environment, lifetime). The set is closed: every Builtin variant
has one entry in BUILTINS and one branch in run_builtin.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from .cd import handle_cd
from .control import handle_exit
from .help import handle_help
from .pwd import handle_pwd

if TYPE_CHECKING:
    from ..tokenizer import Tokens
    from ..types import ExecResult, ShellContext


class Builtin(Enum):
    """The builtin commands, keyed by the name typed at the prompt."""

    EXIT = "exit"
    HELP = "?"
    PWD = "pwd"
    CD = "cd"


Handler = Callable[["ShellContext", "Tokens"], Awaitable["ExecResult"]]


@dataclass(frozen=True)
class BuiltinEntry:
    """A registered builtin: its handler, name and help text."""

    handler: Handler
    name: str
    doc: str


def _build_table(*entries: tuple[Builtin, Handler, str]) -> MappingProxyType:
    table: dict[Builtin, BuiltinEntry] = {}
    for builtin, handler, doc in entries:
        if builtin in table:
            raise ValueError(f"duplicate builtin: {builtin.value}")
        table[builtin] = BuiltinEntry(handler=handler, name=builtin.value, doc=doc)
    missing = set(Builtin) - set(table)
    if missing:
        raise ValueError(f"builtins without an entry: {sorted(b.value for b in missing)}")
    return MappingProxyType(table)


BUILTINS = _build_table(
    (Builtin.EXIT, handle_exit, "exit the command shell"),
    (Builtin.HELP, handle_help, "show this help menu"),
    (Builtin.PWD, handle_pwd, "prints working directory"),
    (Builtin.CD, handle_cd, "changes directory"),
)


def lookup(name: Optional[str]) -> Optional[Builtin]:
    """Return the builtin named exactly name, or None.

    An absent command word (None) is not an error; it is just not a builtin.
    """
    if name is None:
        return None
    try:
        return Builtin(name)
    except ValueError:
        return None


async def run_builtin(builtin: Builtin, ctx: "ShellContext", tokens: "Tokens") -> "ExecResult":
    """Run a builtin with the full token list of its command line."""
    match builtin:
        case Builtin.EXIT:
            return await handle_exit(ctx, tokens)
        case Builtin.HELP:
            return await handle_help(ctx, tokens)
        case Builtin.PWD:
            return await handle_pwd(ctx, tokens)
        case Builtin.CD:
            return await handle_cd(ctx, tokens)
    raise AssertionError(f"unhandled builtin: {builtin!r}")


__all__ = [
    "BUILTINS",
    "Builtin",
    "BuiltinEntry",
    "lookup",
    "run_builtin",
]
