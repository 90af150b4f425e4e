"""Help builtin: list every builtin with a short description."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tokenizer import Tokens
    from ..types import ExecResult, ShellContext


async def handle_help(ctx: "ShellContext", tokens: "Tokens") -> "ExecResult":
    """Print "<name> - <doc>" for each builtin, in table order."""
    from . import BUILTINS
    from ..types import ExecResult

    lines = [f"{entry.name} - {entry.doc}\n" for entry in BUILTINS.values()]
    return ExecResult(stdout="".join(lines), stderr="", exit_code=0)
