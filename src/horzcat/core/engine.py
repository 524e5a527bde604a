"""Line-fusion engine — reads N sources in lock-step and emits fused lines.

For round *k* every still-active source is asked for its *k*-th line.
Rounds stop once every source is exhausted.  Each round's contributions
(lines with the row header removed) are joined by the separator, empty
contributions are skipped without a separator on their behalf, and the
tail plus ``\\n`` closes the line.

Guarantees
----------
* Single-threaded; sources are read in index order within a round.
* Sources and the sink are never closed here.
* Buffered output is flushed to the sink before a successful return.
* Exactly one :class:`~horzcat.exceptions.HorzcatError` is raised per
  failed call, the first one observed.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from horzcat.core.line_reader import LineReader
from horzcat.core.models import Options
from horzcat.core.protocols import Sink, Source
from horzcat.exceptions import (
    EmptySourceListError,
    FlushError,
    LineCountMismatchError,
    LineTooLongError,
    PositionalReadError,
    SinkWriteError,
)

logger = logging.getLogger(__name__)

WRITE_BUFFER_SIZE: int = 64 * 1024
"""Bytes accumulated internally before they are written to the sink."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def concat(options: Options | None = None, *sources: Source) -> None:
    """Concatenate *sources* horizontally, line by line.

    Parameters
    ----------
    options:
        Separator, tail, row-header length, line-count policy and sink.
        ``None`` is the same as ``Options()``.
    *sources:
        Byte sources, fused in the order given.

    Raises
    ------
    EmptySourceListError
        When no source is given.  The sink is not touched.
    PositionalReadError
        When a source fails a read; ``index`` is its position.
    LineCountMismatchError
        When ``same_line_count`` is set and some, not all, sources end.
    SinkWriteError, FlushError
        When the sink rejects output.
    """
    if options is None:
        options = Options()
    if not sources:
        raise EmptySourceListError()

    sink = options.sink if options.sink is not None else sys.stdout.buffer
    logger.debug(
        "concat starting: %d source(s), row_header_length=%d, same_line_count=%s",
        len(sources),
        options.row_header_length,
        options.same_line_count,
    )

    readers: list[LineReader | None] = [LineReader(source) for source in sources]
    writer = _BufferedSink(sink)
    rounds = 0

    while True:
        contributions, exhausted = _read_round(readers, options.row_header_length)

        if len(exhausted) == len(readers):
            break
        if options.same_line_count and exhausted:
            raise LineCountMismatchError(rounds + 1, exhausted)

        writer.write(fuse_line(contributions, options.separator, options.tail))
        rounds += 1

    writer.flush()
    logger.debug("concat finished: %d line(s) emitted", rounds)


def fuse_line(contributions: Sequence[bytes], separator: bytes, tail: bytes) -> bytes:
    """Assemble one output line from a round's contributions.

    Empty contributions are skipped entirely, so no separator is written
    on their behalf.  The tail and ``\\n`` are always appended.
    """
    return separator.join(part for part in contributions if part) + tail + b"\n"


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _read_round(
    readers: list[LineReader | None],
    row_header_length: int,
) -> tuple[list[bytes], list[int]]:
    """Read one line from each active reader.

    Readers that hit end of stream are replaced by ``None`` in *readers*
    and are not read again.  Returns the stripped contributions (empty for
    exhausted sources) and the indexes of all exhausted sources.
    """
    contributions: list[bytes] = []
    exhausted: list[int] = []

    for index, reader in enumerate(readers):
        line: bytes | None = None
        if reader is not None:
            try:
                line = reader.read_line()
            except (OSError, ValueError, LineTooLongError) as exc:
                logger.debug("read failed on source %d: %s", index, exc)
                raise PositionalReadError(exc, index) from exc
            if line is None:
                readers[index] = None

        if line is None:
            exhausted.append(index)
            contributions.append(b"")
        else:
            contributions.append(line[row_header_length:])

    return contributions, exhausted


class _BufferedSink:
    """Private write buffer in front of the caller's sink."""

    def __init__(self, sink: Sink) -> None:
        self._sink: Sink = sink
        self._buffer: bytearray = bytearray()

    def write(self, data: bytes) -> None:
        self._buffer += data
        if len(self._buffer) >= WRITE_BUFFER_SIZE:
            try:
                self._drain()
            except (OSError, ValueError) as exc:
                raise SinkWriteError(exc) from exc

    def flush(self) -> None:
        try:
            self._drain()
            self._sink.flush()
        except (OSError, ValueError) as exc:
            raise FlushError(exc) from exc

    def _drain(self) -> None:
        pending = bytes(self._buffer)
        self._buffer.clear()
        # Raw handles may accept fewer bytes than offered; a non-blocking
        # one returns None when it would block.
        while pending:
            written = self._sink.write(pending)
            if written is None:
                raise OSError("write would block")
            if written == 0:
                raise OSError("short write")
            pending = pending[written:]
