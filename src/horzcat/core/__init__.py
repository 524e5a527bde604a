"""Core layer — the line-fusion engine and its data types.

Rules
-----
* No ``print()`` calls.
* No filesystem access; only the handles passed in are touched.
* No imports from ``cli`` or ``infra``.
* Handles passed in are never closed.
"""

from horzcat.core.engine import concat, fuse_line
from horzcat.core.line_reader import MAX_LINE_SIZE, LineReader
from horzcat.core.models import Options
from horzcat.core.protocols import Sink, Source

__all__: list[str] = [
    "MAX_LINE_SIZE",
    "LineReader",
    "Options",
    "Sink",
    "Source",
    "concat",
    "fuse_line",
]
