"""Pwd builtin.

Usage: pwd

Print the shell's current working directory. Arguments are ignored.
"""

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tokenizer import Tokens

from ..types import ExecResult, ShellContext


async def handle_pwd(ctx: ShellContext, tokens: "Tokens") -> ExecResult:
    """Execute the pwd builtin."""
    try:
        cwd = os.getcwd()
    except OSError as e:
        # The directory can disappear while we are in it.
        return ExecResult(
            stdout="",
            stderr=f"minish: pwd: {e.strerror or e}\n",
            exit_code=1,
        )
    return ExecResult(stdout=f"{cwd}\n", stderr="", exit_code=0)
