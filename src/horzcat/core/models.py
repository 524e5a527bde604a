"""Domain models for horzcat.

The options record is a **frozen** dataclass: an immutable value object
validated once at construction and then shared read-only by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass

from horzcat.core.protocols import Sink
from horzcat.exceptions import InvalidOptionsError


@dataclass(frozen=True, slots=True)
class Options:
    """Options accepted by :func:`~horzcat.core.engine.concat`."""

    sink: Sink | None = None
    """Destination for fused lines.  ``None`` means standard output."""

    separator: bytes = b""
    """Inserted between contributions of distinct sources on one line."""

    tail: bytes = b""
    """Appended once at the end of every emitted line, before ``\\n``."""

    row_header_length: int = 0
    """Bytes discarded from the start of every input line."""

    same_line_count: bool = False
    """Fail when the sources do not all have the same number of lines."""

    def __post_init__(self) -> None:
        for name in ("separator", "tail"):
            value = getattr(self, name)
            if not isinstance(value, (bytes, bytearray)):
                raise InvalidOptionsError(
                    f"{name} must be bytes, got {type(value).__name__}",
                    hint="Encode text with str.encode() or os.fsencode().",
                )
        if isinstance(self.row_header_length, bool) or not isinstance(
            self.row_header_length, int
        ):
            raise InvalidOptionsError(
                "row_header_length must be an integer, "
                f"got {type(self.row_header_length).__name__}",
            )
        if self.row_header_length < 0:
            raise InvalidOptionsError(
                f"row_header_length must be >= 0, got {self.row_header_length}",
            )
