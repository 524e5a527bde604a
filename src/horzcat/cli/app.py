"""CLI application entry point for horzcat.

This module is the **sole error boundary** for the entire application.
It catches :class:`~horzcat.exceptions.HorzcatError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering one-line messages on stderr
and returning well-defined exit codes.

Architecture notes
------------------
* No fusion logic lives here — the work is delegated to
  :func:`horzcat.core.engine.concat`.
* File handles are owned here, not by the engine: they are opened by the
  infra layer onto an :class:`~contextlib.ExitStack` and released when
  the command returns, whatever the outcome.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import os
import sys
from contextlib import ExitStack
from typing import NoReturn

from horzcat.cli import exit_codes
from horzcat.cli.console import console
from horzcat.core.engine import concat
from horzcat.core.models import Options
from horzcat.exceptions import HorzcatError, PositionalReadError, UsageError
from horzcat.infra.files import open_output, open_sources
from horzcat.utils.logging import configure_logging, get_logger
from horzcat.version import __version__

log = get_logger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

class _ArgumentParser(argparse.ArgumentParser):
    """Parser that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, hint=self.format_usage().strip())


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


_STRING_FLAGS: dict[str, str] = {"-s": "separator", "-t": "tail"}
"""Flags whose value is arbitrary text, possibly starting with ``-``."""

_VALUE_FLAGS: tuple[str, ...] = ("--out", "-rh")
"""Other flags taking a value; their value is passed through untouched."""


def _take_string_values(tokens: list[str]) -> tuple[list[str], dict[str, str]]:
    """Remove ``-s VALUE`` / ``-t VALUE`` pairs from *tokens*.

    argparse reads a token starting with ``-`` as the next flag, so a
    separator such as ``-|-`` or ``--`` has to be taken before parsing.
    Returns the remaining tokens and the values keyed by option ``dest``;
    the last occurrence wins.  Values of other flags and everything after
    a bare ``--`` are left intact.
    """
    out: list[str] = []
    values: dict[str, str] = {}
    pending: str | None = None
    expect_value = False
    positional_only = False
    for tok in tokens:
        if pending is not None:
            values[_STRING_FLAGS[pending]] = tok
            pending = None
            continue
        if expect_value or positional_only:
            out.append(tok)
            expect_value = False
            continue

        if tok == "--":
            positional_only = True
        elif tok in _STRING_FLAGS:
            pending = tok
            continue
        elif tok[:3] in ("-s=", "-t="):
            values[_STRING_FLAGS[tok[:2]]] = tok[3:]
            continue
        elif tok in _VALUE_FLAGS:
            expect_value = True
        out.append(tok)

    if pending is not None:
        # Missing value: let argparse report it.
        out.append(pending)
    return out, values


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser.

    Usage: ``horzcat [flags] file1 file2 ...``
    """
    parser = _ArgumentParser(
        prog="horzcat",
        allow_abbrev=False,
        description=(
            "Concatenate files horizontally: the k-th output line joins the "
            "k-th line of every input file."
        ),
    )
    parser.add_argument(
        "-v",
        action="version",
        version=__version__,
        help="print version of the command to stdout.",
    )
    parser.add_argument(
        "-s",
        dest="separator",
        default="",
        metavar="SEP",
        help="separator added between lines; may start with '-'.",
    )
    parser.add_argument(
        "-t",
        dest="tail",
        default="",
        metavar="TAIL",
        help="tail string added at end of every concatenated line; may start with '-'.",
    )
    parser.add_argument(
        "--out",
        default=None,
        metavar="PATH",
        help="name of output file. Defaults to stdout.",
    )
    parser.add_argument(
        "-rh",
        dest="row_header_length",
        type=_non_negative_int,
        default=0,
        metavar="N",
        help="length of row header, if present.",
    )
    parser.add_argument(
        "--same-line-count",
        action="store_true",
        help="fail if the input files do not have the same number of lines.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="enable debug logging on stderr.",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="render log records as JSON.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="input files, concatenated in the order given.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def _handle_concat(args: argparse.Namespace) -> int:
    """Open the files, run the engine and name the file behind a read error."""
    filenames: list[str] = args.files
    log.debug("horzcat starting", files=filenames, out=args.out)

    with ExitStack() as stack:
        sources = open_sources(filenames, stack)
        sink = open_output(args.out, stack) if args.out else None

        options = Options(
            sink=sink,
            separator=os.fsencode(args.separator),
            tail=os.fsencode(args.tail),
            row_header_length=args.row_header_length,
            same_line_count=args.same_line_count,
        )
        try:
            concat(options, *sources)
        except PositionalReadError as exc:
            raise exc.convert(filenames) from exc

    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the horzcat CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    HorzcatError
        On any failure; :func:`cli` turns it into a message and exit code.
    """
    parser = _build_parser()
    if argv is None:
        argv = sys.argv[1:]
    tokens, string_values = _take_string_values(argv)
    args = parser.parse_args(tokens)
    for dest, value in string_values.items():
        setattr(args, dest, value)

    configure_logging(
        json_output=args.json_logs,
        level="DEBUG" if args.verbose else "WARNING",
    )
    return _handle_concat(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except UsageError as exc:
        console.print("Wrong usage:", str(exc))
        if exc.hint:
            console.print(exc.hint, style="dim")
        sys.exit(exit_codes.GENERAL_ERROR)
    except HorzcatError as exc:
        console.print("Fatal error:", str(exc))
        if exc.hint:
            console.print("Hint:", exc.hint, style="yellow")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("Aborted by user.", style="yellow")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print("Fatal error:", f"unexpected {type(exc).__name__}: {exc}")
        sys.exit(exit_codes.GENERAL_ERROR)
