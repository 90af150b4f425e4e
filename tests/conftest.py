"""Shared fixtures for minish tests."""

import io

import pytest

from minish import Session, Shell, ShellOptions


class ShellHarness:
    """A Shell wired to in-memory streams."""

    def __init__(self, script: bytes = b"", *, interactive: bool = False, options=None, session=None, stdin=None):
        self.stdin = stdin if stdin is not None else io.BytesIO(script)
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        self.shell = Shell(
            session=session or Session(interactive=interactive),
            options=options or ShellOptions(),
            stdin=self.stdin,
            stdout=self.stdout,
            stderr=self.stderr,
        )

    @property
    def out(self) -> str:
        return self.stdout.getvalue()

    @property
    def err(self) -> str:
        return self.stderr.getvalue()


@pytest.fixture
def make_shell():
    """Build a ShellHarness reading the given script bytes."""
    return ShellHarness
