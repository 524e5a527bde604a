"""Protocols (interfaces) consumed by the core layer.

The engine depends ONLY on these structural contracts — any binary file
object, ``io.BytesIO``, socket file or pipe satisfies them without
explicit inheritance.  The engine never closes a handle it was given.
"""

from __future__ import annotations

from typing import Protocol


class Source(Protocol):
    """Read-only, forward-only byte stream."""

    def read(self, size: int = -1, /) -> bytes:
        """Return up to *size* bytes; ``b""`` signals end of stream.

        Raises
        ------
        OSError
            When the underlying handle fails.
        ValueError
            When the handle has been closed.
        """
        ...  # pragma: no cover


class Sink(Protocol):
    """Write-only byte stream."""

    def write(self, data: bytes, /) -> int | None:
        """Write *data*, returning the number of bytes accepted.

        Buffered handles accept everything; raw handles may accept less.
        A non-blocking raw handle returns ``None`` when it would block;
        the engine treats that as a write failure, so non-blocking sinks
        should be wrapped in a buffered writer.
        """
        ...  # pragma: no cover

    def flush(self) -> None:
        """Push any bytes buffered by the handle itself downstream."""
        ...  # pragma: no cover
