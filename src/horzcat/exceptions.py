"""Custom exception hierarchy for horzcat.

All exceptions that cross layer boundaries must inherit from
:class:`HorzcatError`.  Raw ``OSError`` instances raised by sources,
sinks or the filesystem must NEVER propagate beyond the layer that
touched the handle — they are caught there and re-raised as a typed
subclass defined here, with the original chained as ``__cause__``.

Hierarchy
---------
HorzcatError
├── UsageError
├── InvalidOptionsError
├── EmptySourceListError
├── PositionalReadError
├── InputFileError
├── SourceOpenError
├── OutputOpenError
├── SinkWriteError
├── FlushError
├── LineCountMismatchError
└── LineTooLongError
"""

from __future__ import annotations

from collections.abc import Sequence


class HorzcatError(Exception):
    """Base exception for all horzcat errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line / configuration -----------------------------------------

class UsageError(HorzcatError):
    """Raised when the command line cannot be parsed."""


class InvalidOptionsError(HorzcatError):
    """Raised when an :class:`~horzcat.core.models.Options` field is invalid."""


# --- Engine input side -----------------------------------------------------

class EmptySourceListError(HorzcatError):
    """Raised when the engine is invoked without any source."""

    def __init__(self) -> None:
        super().__init__("no source readers provided")


class LineTooLongError(HorzcatError):
    """Raised by the line reader when a line exceeds its size limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"line exceeds maximum size of {limit} bytes")
        self.limit: int = limit


class PositionalReadError(HorzcatError):
    """A source failed a read.

    Carries the underlying error and the zero-based ordinal of the
    source that produced it, so that callers holding a list of names
    for the sources can report which one failed.
    """

    def __init__(self, underlying: BaseException, index: int) -> None:
        super().__init__(f"error reading from source {index}: {underlying}")
        self.underlying: BaseException = underlying
        self.index: int = index

    def convert(self, paths: Sequence[str]) -> InputFileError:
        """Return an :class:`InputFileError` naming ``paths[self.index]``.

        *paths* must list the source names in the order the sources were
        handed to the engine.
        """
        return InputFileError(paths[self.index], self.underlying)


class InputFileError(HorzcatError):
    """A named input file could not be read."""

    def __init__(self, path: str, underlying: BaseException) -> None:
        super().__init__(f"Cannot read file {path}: {underlying}")
        self.path: str = path
        self.underlying: BaseException = underlying


class LineCountMismatchError(HorzcatError):
    """Raised when sources disagree in line count and that is forbidden."""

    def __init__(self, line_number: int, exhausted: Sequence[int]) -> None:
        indexes = ", ".join(str(index) for index in exhausted)
        super().__init__(
            "sources have different line counts: "
            f"source(s) {indexes} exhausted at line {line_number}",
        )
        self.line_number: int = line_number
        """One-based number of the first output line a source could not supply."""
        self.exhausted: tuple[int, ...] = tuple(exhausted)


# --- Filesystem ------------------------------------------------------------

class SourceOpenError(HorzcatError):
    """Raised when an input file cannot be opened."""


class OutputOpenError(HorzcatError):
    """Raised when the output file cannot be created."""


# --- Engine output side ----------------------------------------------------

class SinkWriteError(HorzcatError):
    """Raised when a write to the sink fails."""

    def __init__(self, underlying: BaseException | str) -> None:
        super().__init__(f"cannot write to output: {underlying}")


class FlushError(HorzcatError):
    """Raised when the final flush of buffered output fails."""

    def __init__(self, underlying: BaseException | str) -> None:
        super().__init__(f"cannot flush output: {underlying}")
