"""Infrastructure: opening input files and the output file.

Every handle opened here is registered on a caller-owned
:class:`contextlib.ExitStack`, so the caller releases all of them on any
exit path by leaving the ``with`` block.

Rules
-----
* Raw ``OSError`` never escapes — it is re-raised as a typed
  :class:`~horzcat.exceptions.HorzcatError` subclass.
* No user-facing output.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from contextlib import ExitStack
from typing import BinaryIO

from horzcat.exceptions import OutputOpenError, SourceOpenError

logger = logging.getLogger(__name__)

OUTPUT_FILE_MODE: int = 0o644
"""Permission bits for a newly created output file (before umask)."""


def open_sources(paths: Sequence[str], stack: ExitStack) -> list[BinaryIO]:
    """Open every path in *paths* for binary reading, in order.

    Raises
    ------
    SourceOpenError
        On the first path that cannot be opened.  Files opened before it
        stay registered on *stack*.
    """
    sources: list[BinaryIO] = []
    for path in paths:
        try:
            handle = open(path, "rb")  # noqa: SIM115
        except OSError as exc:
            raise SourceOpenError(f"cannot open {path}: {_reason(exc)}") from exc
        stack.enter_context(handle)
        sources.append(handle)
        logger.debug("opened source %s", path)
    return sources


def open_output(path: str, stack: ExitStack) -> BinaryIO:
    """Create or truncate *path* for writing and return a binary handle.

    Raises
    ------
    OutputOpenError
        When the file cannot be created.
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_FILE_MODE)
    except OSError as exc:
        raise OutputOpenError(f"cannot open {path}: {_reason(exc)}") from exc
    handle = os.fdopen(fd, "wb")
    stack.enter_context(handle)
    logger.debug("opened output %s", path)
    return handle


def _reason(exc: OSError) -> str:
    """Prefer the bare ``strerror`` over ``str(exc)``, which repeats the path."""
    return exc.strerror or str(exc)
