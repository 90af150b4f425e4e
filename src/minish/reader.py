"""Line reader for the shell loop."""

from __future__ import annotations

from typing import Optional

from .errors import LineTooLongError


class LineReader:
    """Read newline-terminated lines from a stream.

    Accepts binary or text streams; a text stream with an underlying
    ``buffer`` (such as ``sys.stdin``) is read through that buffer so the
    length limit is measured in bytes.

    Lines longer than ``max_line_length`` bytes are never truncated: the
    rest of the line is consumed and LineTooLongError is raised, leaving the
    reader positioned at the start of the next line.
    """

    def __init__(self, stream, max_line_length: Optional[int] = None, encoding: str = "utf-8"):
        self._stream = getattr(stream, "buffer", stream)
        self._limit = max_line_length
        self._encoding = encoding

    def read_line(self) -> Optional[str]:
        """Return the next line without its newline, or None at end of input.

        Raises:
            LineTooLongError: if the line exceeds the configured limit.
        """
        if self._limit is None:
            data = self._readline(-1)
        else:
            data = self._readline(self._limit + 1)
        if not data:
            return None

        if data.endswith(b"\n"):
            data = data[:-1]
        elif self._limit is not None and len(data) > self._limit:
            self._discard_rest_of_line()
            raise LineTooLongError(self._limit)

        return data.decode(self._encoding, errors="surrogateescape")

    def _readline(self, size: int) -> bytes:
        data = self._stream.readline(size)
        if isinstance(data, str):
            data = data.encode(self._encoding, errors="surrogateescape")
        return data

    def _discard_rest_of_line(self) -> None:
        chunk = self._limit or 4096
        while True:
            data = self._readline(chunk)
            if not data or data.endswith(b"\n"):
                return
