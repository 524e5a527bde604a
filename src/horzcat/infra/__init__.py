"""Infrastructure layer — filesystem integration.

This layer opens the files named on the command line.  Every raw
``OSError`` must be caught here and re-raised as a
:class:`~horzcat.exceptions.HorzcatError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from horzcat.infra.files import OUTPUT_FILE_MODE, open_output, open_sources

__all__: list[str] = [
    "OUTPUT_FILE_MODE",
    "open_output",
    "open_sources",
]
