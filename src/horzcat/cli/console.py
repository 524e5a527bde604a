"""CLI console helpers with optional Rich support.

Diagnostics always go to stderr; stdout is reserved for fused output.
Rich is imported lazily so that ``-v`` and ``--help`` keep working even
when it is not installed.
"""

from __future__ import annotations

import sys
from typing import Any

from horzcat.exceptions import HorzcatError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``HorzcatError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise HorzcatError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, label: str, message: str = "", *, style: str = "bold red") -> None:
		"""Render ``<label> <message>`` on stderr.

		Only *label* is styled.  *message* is printed verbatim: never
		wrapped and never interpreted as markup or emoji codes, since it
		usually embeds file names and error text.
		"""
		try:
			rich_console = get_rich_console()
		except HorzcatError:
			print(f"{label} {message}" if message else label, file=sys.stderr)
			return

		from rich.text import Text

		text = Text(label, style=style)
		if message:
			text.append(" ")
			text.append(message)
		rich_console.print(text, soft_wrap=True, highlight=False)


console = _ConsoleProxy()
