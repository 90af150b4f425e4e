"""Run an external program in a child process and wait for it.

The protocol has two steps: fork a child that replaces itself with the
program (exec), then block in the parent until that child exits.
ChildProcess owns the child's pid so every path out of the parent,
including an interrupted wait, reaps the child exactly once.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from typing import Optional

from .tokenizer import Tokens

logger = logging.getLogger(__name__)

CHILD_FAILURE_STATUS = 1
"""Exit status of a child whose exec failed."""

# Dispositions that are reset to SIG_DFL in the child before exec.
# Python ignores SIGPIPE and SIGXFSZ, and ignored signals survive exec;
# SIGINT and SIGQUIT are ignored by the parent while it waits.
_CHILD_DEFAULT_SIGNALS = ("SIGPIPE", "SIGXFSZ", "SIGINT", "SIGQUIT")

# Signals the parent ignores while blocked on a child, like system(3).
_WAIT_IGNORED_SIGNALS = ("SIGINT", "SIGQUIT")


def build_argv(tokens: Tokens) -> list[str]:
    """Build the argument vector for exec.

    Element 0 is the executable path, used verbatim; there is no PATH
    search. The list length marks the end of the arguments.
    """
    if not len(tokens):
        raise ValueError("cannot build an argument vector from an empty line")
    return tokens.words


def _signals(names) -> list[signal.Signals]:
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


def _exec_child(argv: list[str]) -> None:
    """Replace the child's image with argv[0]. Never returns."""
    try:
        for signum in _signals(_CHILD_DEFAULT_SIGNALS):
            signal.signal(signum, signal.SIG_DFL)
        os.execv(argv[0], argv)
    except OSError as e:
        message = f"minish: {argv[0]}: {e.strerror or e}\n"
    except ValueError as e:
        # Empty program name or an embedded NUL byte.
        message = f"minish: {argv[0]}: {e}\n"
    except BaseException as e:
        # Anything else must still end in _exit, never back in the shell loop.
        message = f"minish: {argv[0]}: {e}\n"
    try:
        os.write(2, message.encode("utf-8", errors="surrogateescape"))
    finally:
        os._exit(CHILD_FAILURE_STATUS)


class ChildProcess:
    """Fork a child running argv and own its pid until it is reaped.

    Usage:
        with ChildProcess(argv) as child:
            status = child.wait()
    """

    def __init__(self, argv: list[str]):
        self.argv = argv
        self.pid: Optional[int] = None
        self.exit_code: Optional[int] = None
        self._saved_handlers: dict[int, object] = {}

    def __enter__(self) -> "ChildProcess":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self.pid is not None:
                self._reap()
        finally:
            self._restore_signals()

    def start(self) -> int:
        """Fork the child. In the child this call never returns."""
        if self.pid is not None:
            raise RuntimeError("child already started")

        # Flush buffered output so it is neither duplicated in the child
        # nor printed after the child's own output.
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.flush()
            except (AttributeError, ValueError, OSError):
                pass

        self._ignore_signals()
        try:
            pid = os.fork()
        except OSError:
            self._restore_signals()
            raise
        if pid == 0:
            _exec_child(self.argv)
        self.pid = pid
        logger.debug("spawned pid %d: %r", pid, self.argv)
        return pid

    def wait(self) -> int:
        """Block until the child exits and return its exit code.

        A child killed by a signal yields the negated signal number.
        """
        if self.pid is None:
            raise RuntimeError("no child to wait for")
        return self._reap()

    def _reap(self) -> int:
        pid, self.pid = self.pid, None
        _, status = os.waitpid(pid, 0)
        self.exit_code = os.waitstatus_to_exitcode(status)
        logger.debug("pid %d finished with status %d", pid, self.exit_code)
        return self.exit_code

    def _ignore_signals(self) -> None:
        for signum in _signals(_WAIT_IGNORED_SIGNALS):
            try:
                self._saved_handlers[signum] = signal.signal(signum, signal.SIG_IGN)
            except ValueError:
                # signal.signal only works in the main thread.
                break

    def _restore_signals(self) -> None:
        while self._saved_handlers:
            signum, handler = self._saved_handlers.popitem()
            if handler is not None:
                signal.signal(signum, handler)


def spawn_and_wait(argv: list[str]) -> int:
    """Run argv in a child process and return its exit code."""
    with ChildProcess(argv) as child:
        return child.wait()
