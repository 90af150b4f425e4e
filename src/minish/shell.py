"""Shell - the read, dispatch, execute loop.

Example usage:
    from minish import Shell

    # Run the loop on the process's stdin until end of input
    shell = Shell()
    raise SystemExit(shell.run())

    # Run a single line (builtins are captured in the result)
    result = Shell().run_line("pwd")
    print(result.stdout)

External programs are started with fork and exec and inherit the process's
standard descriptors, so their output is not captured in ExecResult.
"""

from __future__ import annotations

import asyncio
import io
import logging
import sys
from typing import Optional, TextIO

import nest_asyncio  # type: ignore[import-untyped]

from .builtins import lookup, run_builtin
from .errors import ExitError, LineTooLongError, TokenizeError
from .process import build_argv, spawn_and_wait
from .reader import LineReader
from .session import Session, init_session
from .tokenizer import tokenize
from .types import ExecResult, ShellContext, ShellOptions, ShellState

logger = logging.getLogger(__name__)


def _fileno(stream) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, io.UnsupportedOperation, ValueError, OSError):
        return None


class Shell:
    """Interactive command interpreter.

    Reads lines, runs builtins in-process and everything else as a child
    process, one command at a time, until end of input or ``exit``.
    """

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        options: Optional[ShellOptions] = None,
        stdin=None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        """Initialize the shell.

        Args:
            session: Terminal session. If not provided, one is set up from
                the descriptor behind stdin (non-interactive if there is none).
            options: Shell options (line length limit, prompt format).
            stdin: Stream commands are read from. Defaults to sys.stdin.
            stdout: Stream for prompts and builtin output. Defaults to sys.stdout.
            stderr: Stream for error messages. Defaults to sys.stderr.
        """
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._stderr = stderr if stderr is not None else sys.stderr
        self._options = options or ShellOptions()

        if session is None:
            fd = _fileno(self._stdin)
            if fd is None:
                session = Session(interactive=False)
            else:
                session = init_session(fd, stderr=self._stderr)
        self._session = session

        self._reader = LineReader(self._stdin, self._options.max_line_length)
        self._ctx = ShellContext(
            session=self._session,
            state=ShellState(),
            options=self._options,
        )

    @property
    def session(self) -> Session:
        """Get the terminal session."""
        return self._session

    @property
    def state(self) -> ShellState:
        """Get the mutable shell state."""
        return self._ctx.state

    async def exec(self, line: str) -> ExecResult:
        """Tokenize and run one command line.

        Builtin output is returned in the result. An external program runs
        to completion before this returns; only its exit code is recorded.

        Raises:
            ExitError: when the line runs the exit builtin.
        """
        try:
            tokens = tokenize(line)
        except TokenizeError as e:
            return ExecResult(stdout="", stderr=f"minish: {e}\n", exit_code=2)

        try:
            if not len(tokens):
                return ExecResult()

            builtin = lookup(tokens.command)
            if builtin is not None:
                logger.debug("builtin %s", builtin.value)
                result = await run_builtin(builtin, self._ctx, tokens)
            else:
                result = self._spawn(build_argv(tokens))
        finally:
            tokens.release()

        self._ctx.state.last_exit_code = result.exit_code
        return result

    def run_line(self, line: str) -> ExecResult:
        """Run one command line synchronously.

        Works inside an already running event loop as well.
        """
        try:
            asyncio.get_running_loop()
            # Already inside an event loop (Jupyter, async framework, etc.)
            nest_asyncio.apply()
        except RuntimeError:
            pass
        return asyncio.run(self.exec(line))

    def run(self) -> int:
        """Run the loop until end of input or exit and return the exit status."""
        try:
            return self._loop()
        finally:
            self._session.restore(self._stderr)

    def _loop(self) -> int:
        state = self._ctx.state
        while True:
            self._prompt()
            try:
                line = self._reader.read_line()
            except LineTooLongError as e:
                self._write_result(ExecResult(stderr=f"minish: {e}\n", exit_code=1))
                state.line_number += 1
                continue
            except KeyboardInterrupt:
                self._write(self._stdout, "\n")
                continue

            if line is None:
                logger.debug("end of input after %d lines", state.line_number)
                return 0

            try:
                result = self.run_line(line)
            except ExitError as e:
                self._write_result(ExecResult(e.stdout, e.stderr, e.exit_code))
                return e.exit_code
            except KeyboardInterrupt:
                self._write(self._stdout, "\n")
            else:
                self._write_result(result)
            state.line_number += 1

    def _spawn(self, argv: list[str]) -> ExecResult:
        self._flush()
        try:
            exit_code = spawn_and_wait(argv)
        except OSError as e:
            return ExecResult(stderr=f"minish: fork: {e.strerror or e}\n", exit_code=1)
        return ExecResult(exit_code=exit_code)

    def _prompt(self) -> None:
        if self._session.interactive:
            self._write(self._stdout, self._options.prompt.format(line_number=self._ctx.state.line_number))

    def _write_result(self, result: ExecResult) -> None:
        if result.stdout:
            self._write(self._stdout, result.stdout)
        if result.stderr:
            self._write(self._stderr, result.stderr)

    def _write(self, stream: TextIO, text: str) -> None:
        try:
            stream.write(text)
        except UnicodeEncodeError:
            # Paths keep undecodable bytes as surrogate escapes; write them
            # back out as the original bytes.
            encoding = getattr(stream, "encoding", None) or "utf-8"
            buffer = getattr(stream, "buffer", None)
            if buffer is None:
                stream.write(text.encode(encoding, "surrogateescape").decode(encoding, "replace"))
            else:
                stream.flush()
                buffer.write(text.encode(encoding, "surrogateescape"))
                buffer.flush()
        stream.flush()

    def _flush(self) -> None:
        for stream in (self._stdout, self._stderr):
            try:
                stream.flush()
            except (ValueError, OSError):
                pass
