"""Exit builtin.

Usage: exit

Leave the shell with status 0. The shell loop catches the ExitError,
restores the terminal modes saved at startup and returns.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tokenizer import Tokens
    from ..types import ExecResult, ShellContext

from ..errors import ExitError


async def handle_exit(ctx: "ShellContext", tokens: "Tokens") -> "ExecResult":
    """Execute the exit builtin."""
    raise ExitError(0)
