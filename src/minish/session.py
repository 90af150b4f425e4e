"""Terminal session setup.

When the shell reads from a terminal it has to own that terminal before it
prints prompts: it waits until it is in the foreground process group, makes
its own process group the terminal's foreground group and saves the
terminal modes so they can be put back when the shell exits.

All terminal-control calls are best-effort. Failures are reported on the
given stderr stream and startup continues.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import termios
from dataclasses import dataclass
from typing import Any, Optional, TextIO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Terminal state captured once at startup."""

    interactive: bool = False
    """True when the shell input is a terminal. Prompts are shown only then."""

    terminal_fd: int = 0
    """Descriptor of the shell input / controlling terminal."""

    pgid: Optional[int] = None
    """Process group that owns the terminal, when interactive."""

    tmodes: Optional[list[Any]] = None
    """Terminal attributes (termios.tcgetattr) saved at startup."""

    def restore(self, stderr: Optional[TextIO] = None) -> None:
        """Put back the terminal modes saved at startup, if any."""
        if not self.interactive or self.tmodes is None:
            return
        try:
            termios.tcsetattr(self.terminal_fd, termios.TCSADRAIN, self.tmodes)
        except (OSError, termios.error) as e:
            _report(stderr, "tcsetattr", e)


def _strerror(error: BaseException) -> str:
    if isinstance(error, termios.error) and len(error.args) >= 2:
        return str(error.args[1])
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


def _report(stderr: Optional[TextIO], step: str, error: BaseException) -> None:
    logger.warning("terminal control failed at %s: %s", step, error)
    stream = stderr if stderr is not None else sys.stderr
    stream.write(f"minish: {step}: {_strerror(error)}\n")
    stream.flush()


def _wait_for_foreground(fd: int) -> int:
    """Stop until our process group is the terminal's foreground group.

    SIGTTIN stops the whole group; a job-control shell that later moves us
    to the foreground sends SIGCONT and the check runs again.
    """
    while True:
        pgid = os.getpgrp()
        if os.tcgetpgrp(fd) == pgid:
            return pgid
        logger.debug("process group %d is in the background, stopping", pgid)
        os.killpg(pgid, signal.SIGTTIN)


def init_session(terminal_fd: int = 0, stderr: Optional[TextIO] = None) -> Session:
    """Detect interactivity and, for a terminal, take foreground control of it."""
    try:
        interactive = os.isatty(terminal_fd)
    except OSError:
        interactive = False
    if not interactive:
        logger.debug("fd %d is not a terminal, running non-interactively", terminal_fd)
        return Session(interactive=False, terminal_fd=terminal_fd)

    try:
        _wait_for_foreground(terminal_fd)
    except OSError as e:
        # Without a usable controlling terminal there is nothing to own.
        _report(stderr, "tcgetpgrp", e)
        return Session(interactive=False, terminal_fd=terminal_fd)

    pid = os.getpid()
    if os.getpgrp() != pid:
        try:
            os.setpgid(0, 0)
        except OSError as e:
            _report(stderr, "setpgid", e)

    # A fresh process group is not yet in the foreground, and tcsetpgrp from
    # a background group raises SIGTTOU unless it is ignored.
    previous = signal.signal(signal.SIGTTOU, signal.SIG_IGN)
    try:
        os.tcsetpgrp(terminal_fd, pid)
    except OSError as e:
        _report(stderr, "tcsetpgrp", e)
    finally:
        signal.signal(signal.SIGTTOU, previous)

    tmodes = None
    try:
        tmodes = termios.tcgetattr(terminal_fd)
    except (OSError, termios.error) as e:
        _report(stderr, "tcgetattr", e)

    logger.debug("interactive session on fd %d, pgid %d", terminal_fd, pid)
    return Session(interactive=True, terminal_fd=terminal_fd, pgid=pid, tmodes=tmodes)
