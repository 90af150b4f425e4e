"""minish - a minimal interactive command interpreter.

Example usage:
    from minish import Shell

    shell = Shell()
    raise SystemExit(shell.run())
"""

from .builtins import BUILTINS, Builtin, lookup
from .errors import ExitError, LineTooLongError, ShellError, TokenizeError
from .session import Session, init_session
from .shell import Shell
from .tokenizer import Tokens, tokenize
from .types import ExecResult, ShellOptions, ShellState

__version__ = "0.1.0"

__all__ = [
    "BUILTINS",
    "Builtin",
    "ExecResult",
    "ExitError",
    "LineTooLongError",
    "Session",
    "Shell",
    "ShellError",
    "ShellOptions",
    "ShellState",
    "TokenizeError",
    "Tokens",
    "init_session",
    "lookup",
    "tokenize",
]
