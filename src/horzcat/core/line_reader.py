"""Incremental line splitting over a :class:`~horzcat.core.protocols.Source`.

A line is a maximal run of bytes without ``\\n``.  A ``\\r`` directly in
front of the terminator belongs to the terminator, and so does a ``\\r``
ending an unterminated final line.  An empty source yields no lines.

Only the bytes of the line being assembled plus at most one read-ahead
chunk are held in memory.
"""

from __future__ import annotations

from horzcat.core.protocols import Source
from horzcat.exceptions import LineTooLongError

MAX_LINE_SIZE: int = 10 * 1024 * 1024
"""Longest supported line, terminator excluded (10 MiB)."""

CHUNK_SIZE: int = 64 * 1024
"""Bytes requested from the source per read."""


class LineReader:
    """Pull lines one at a time from a byte source.

    Parameters
    ----------
    source:
        Any object with a ``read(size)`` method returning ``bytes``.
        The reader never closes it.
    max_line_size:
        Lines longer than this raise :class:`LineTooLongError`.
    chunk_size:
        Number of bytes requested per ``read`` call.
    """

    def __init__(
        self,
        source: Source,
        *,
        max_line_size: int = MAX_LINE_SIZE,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self._source: Source = source
        self._max_line_size: int = max_line_size
        self._chunk_size: int = chunk_size
        self._buffer: bytearray = bytearray()
        self._eof: bool = False

    @property
    def exhausted(self) -> bool:
        """``True`` once end of stream was seen and every line consumed."""
        return self._eof and not self._buffer

    def read_line(self) -> bytes | None:
        """Return the next line without its terminator, or ``None`` at end.

        Raises
        ------
        LineTooLongError
            When the current line exceeds ``max_line_size``.
        OSError, ValueError
            Propagated unchanged from ``source.read``.
        """
        scanned = 0
        while True:
            newline = self._buffer.find(b"\n", scanned)
            if newline >= 0:
                if newline > self._max_line_size + 1:
                    raise LineTooLongError(self._max_line_size)
                line = bytes(self._buffer[:newline])
                del self._buffer[: newline + 1]
                return _drop_cr(line, self._max_line_size)

            if self._eof:
                if not self._buffer:
                    return None
                line = bytes(self._buffer)
                self._buffer.clear()
                return _drop_cr(line, self._max_line_size)

            # One extra byte of slack for a "\r" that may precede "\n".
            if len(self._buffer) > self._max_line_size + 1:
                raise LineTooLongError(self._max_line_size)

            scanned = len(self._buffer)
            chunk = self._source.read(self._chunk_size)
            if not chunk:
                self._eof = True
            else:
                self._buffer += chunk


def _drop_cr(line: bytes, limit: int) -> bytes:
    if line.endswith(b"\r"):
        line = line[:-1]
    if len(line) > limit:
        raise LineTooLongError(limit)
    return line
