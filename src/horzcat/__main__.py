"""Allow ``python -m horzcat`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m horzcat`` behaves identically to the ``horzcat``
console script.
"""

from __future__ import annotations

from horzcat.cli.app import cli

if __name__ == "__main__":
    cli()
