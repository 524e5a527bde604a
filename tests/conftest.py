"""Shared pytest fixtures and configuration for the horzcat test suite.

Guidelines
----------
* Engine tests use in-memory ``io.BytesIO`` sources and sinks.
* Filesystem tests write only below ``tmp_path``.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo ``configure_logging`` calls made by CLI tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
