"""Cd builtin implementation.

Usage: cd [dir]

Change the shell's working directory to dir. If dir is not given, change
to $HOME. Words after dir are ignored. On failure the working directory
is left unchanged.
"""

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tokenizer import Tokens
    from ..types import ExecResult, ShellContext

logger = logging.getLogger(__name__)


async def handle_cd(ctx: "ShellContext", tokens: "Tokens") -> "ExecResult":
    """Execute the cd builtin."""
    from ..types import ExecResult

    target = tokens.get(1)
    if target is None:
        target = os.environ.get("HOME")
        if target is None:
            return ExecResult(
                stdout="",
                stderr="minish: cd: HOME not set\n",
                exit_code=1,
            )

    try:
        os.chdir(target)
    except OSError as e:
        return ExecResult(
            stdout="",
            stderr=f"minish: cd: {target}: {e.strerror or e}\n",
            exit_code=1,
        )
    except ValueError as e:
        # Embedded NUL byte in the path.
        return ExecResult(
            stdout="",
            stderr=f"minish: cd: {target!r}: {e}\n",
            exit_code=1,
        )

    logger.debug("changed directory to %s", target)
    return ExecResult(stdout="", stderr="", exit_code=0)
