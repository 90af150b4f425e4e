"""Exceptions raised by minish."""


class ShellError(Exception):
    """Base class for minish errors."""


class ExitError(ShellError):
    """Raised by the exit builtin to end the shell loop."""

    def __init__(self, exit_code: int, stdout: str = "", stderr: str = ""):
        super().__init__(f"exit {exit_code}")
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class LineTooLongError(ShellError):
    """An input line exceeded the configured maximum length."""

    def __init__(self, limit: int):
        super().__init__(f"line too long (max {limit} bytes)")
        self.limit = limit


class TokenizeError(ShellError):
    """An input line could not be split into words."""
