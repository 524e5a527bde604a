"""horzcat — horizontal concatenation of text streams.

The *k*-th output line is the *k*-th line of every input joined by a
separator and followed by a tail.  Use :func:`concat` as a library or the
``horzcat`` console script.
"""

from horzcat.core.engine import concat
from horzcat.core.models import Options
from horzcat.version import __version__

__all__: list[str] = ["Options", "__version__", "concat"]
