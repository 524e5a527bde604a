"""Tests for the command driver (cli/app.py).

Coverage:
* Flag parsing into engine options, including values starting with ``-``.
* Output to stdout and to ``--out``.
* Positional read errors converted to file names.
* The ``cli()`` error boundary: messages and exit codes.
* Logging flags.
"""

from __future__ import annotations

import json
import sys
from contextlib import ExitStack
from pathlib import Path
from unittest.mock import patch

import pytest

from horzcat.cli import exit_codes
from horzcat.cli.app import cli, main
from horzcat.exceptions import (
    EmptySourceListError,
    InputFileError,
    LineCountMismatchError,
    PositionalReadError,
    SourceOpenError,
    UsageError,
)
from horzcat.version import __version__


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def files(tmp_path: Path) -> tuple[str, str]:
    first = tmp_path / "lines1.txt"
    second = tmp_path / "lines2.txt"
    first.write_bytes(b"ciao\nsalve\nThe end\n")
    second.write_bytes(b"Andre\nParro\n")
    return str(first), str(second)


def _run_cli(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["horzcat", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli()
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


# ---------------------------------------------------------------------------
# main — happy paths
# ---------------------------------------------------------------------------

class TestMain:
    def test_stdout_with_separator_and_tail(
        self, files: tuple[str, str], capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        code = main(["-s", " ", "-t", "😎", *files])
        assert code == exit_codes.SUCCESS
        assert capsysbinary.readouterr().out == (
            "ciao Andre😎\nsalve Parro😎\nThe end😎\n".encode()
        )

    def test_out_file(self, files: tuple[str, str], tmp_path: Path) -> None:
        out = tmp_path / "result.txt"
        out.write_bytes(b"previous content, longer than the new one" * 10)

        code = main(["-s", ",", "--out", str(out), *files])

        assert code == exit_codes.SUCCESS
        assert out.read_bytes() == b"ciao,Andre\nsalve,Parro\nThe end\n"

    def test_row_header(
        self, files: tuple[str, str], capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main(["-rh", "2", *files])
        assert capsysbinary.readouterr().out == b"aodre\nlverro\ne end\n"

    def test_same_line_count_flag(
        self, files: tuple[str, str], tmp_path: Path,
    ) -> None:
        with pytest.raises(LineCountMismatchError):
            main(["--same-line-count", "--out", str(tmp_path / "o"), *files])

    def test_options_passed_to_engine(self, files: tuple[str, str]) -> None:
        with patch("horzcat.cli.app.concat") as mock_concat:
            main(["-s", "|", "-t", "$", "-rh", "3", "--same-line-count", *files])

        options, *sources = mock_concat.call_args.args
        assert options.separator == b"|"
        assert options.tail == b"$"
        assert options.row_header_length == 3
        assert options.same_line_count is True
        assert options.sink is None
        assert [s.name for s in sources] == list(files)

    def test_separator_starting_with_dash(
        self, files: tuple[str, str], capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main(["-s", "-|-", *files])
        assert capsysbinary.readouterr().out == b"ciao-|-Andre\nsalve-|-Parro\nThe end\n"

    def test_double_dash_separator(
        self, files: tuple[str, str], capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main(["-s", "--", *files])
        assert capsysbinary.readouterr().out == b"ciao--Andre\nsalve--Parro\nThe end\n"

    def test_separator_with_equals(
        self, files: tuple[str, str], capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main(["-s=--", *files])
        assert capsysbinary.readouterr().out == b"ciao--Andre\nsalve--Parro\nThe end\n"

    def test_tail_starting_with_dash(
        self, files: tuple[str, str], capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main(["-t", "-!", "-s", " ", *files])
        assert capsysbinary.readouterr().out == b"ciao Andre-!\nsalve Parro-!\nThe end-!\n"

    def test_last_separator_wins(self, files: tuple[str, str]) -> None:
        with patch("horzcat.cli.app.concat") as mock_concat:
            main(["-s", "a", "-s", "-b", *files])
        options, *_ = mock_concat.call_args.args
        assert options.separator == b"-b"

    def test_sources_closed_after_run(self, files: tuple[str, str]) -> None:
        with patch("horzcat.cli.app.concat") as mock_concat:
            main(list(files))
        _, *sources = mock_concat.call_args.args
        assert all(s.closed for s in sources)


# ---------------------------------------------------------------------------
# main — failures
# ---------------------------------------------------------------------------

class TestMainErrors:
    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-v"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out == f"{__version__}\n"

    def test_no_files(self) -> None:
        with pytest.raises(EmptySourceListError):
            main([])

    def test_negative_row_header(self, files: tuple[str, str]) -> None:
        with pytest.raises(UsageError, match="must be >= 0") as exc_info:
            main(["-rh", "-1", *files])
        assert exc_info.value.hint is not None
        assert exc_info.value.hint.startswith("usage: horzcat")

    def test_unknown_flag(self, files: tuple[str, str]) -> None:
        with pytest.raises(UsageError, match="unrecognized arguments"):
            main(["--bogus", *files])

    def test_abbreviated_long_flag_rejected(
        self, files: tuple[str, str], tmp_path: Path,
    ) -> None:
        with pytest.raises(UsageError, match="unrecognized arguments: --ou"):
            main(["--ou", str(tmp_path / "o"), *files])

    def test_separator_without_value(self) -> None:
        with pytest.raises(UsageError, match="argument -s: expected one argument"):
            main(["-s"])

    def test_missing_file(self, files: tuple[str, str], tmp_path: Path) -> None:
        missing = str(tmp_path / "missing.txt")
        with pytest.raises(SourceOpenError, match="missing.txt"):
            main([files[0], missing])

    def test_read_error_names_the_file(self, files: tuple[str, str]) -> None:
        err = PositionalReadError(OSError("expected error"), 1)
        with patch("horzcat.cli.app.concat", side_effect=err):
            with pytest.raises(InputFileError) as exc_info:
                main(list(files))

        assert str(exc_info.value) == f"Cannot read file {files[1]}: expected error"
        assert exc_info.value.__cause__ is err


# ---------------------------------------------------------------------------
# cli — error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_success_exit_code(
        self, files: tuple[str, str], monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
    ) -> None:
        code = _run_cli(monkeypatch, "--out", str(tmp_path / "o.txt"), *files)
        assert code == exit_codes.SUCCESS

    def test_fatal_error_message(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run_cli(monkeypatch)
        assert code == exit_codes.GENERAL_ERROR
        assert "Fatal error: no source readers provided" in capsys.readouterr().err

    def test_usage_error_message(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run_cli(monkeypatch, "-rh", "abc", "x")
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "Wrong usage: " in err
        assert "usage: horzcat" in err

    def test_read_error_message(
        self,
        files: tuple[str, str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        err = PositionalReadError(OSError("expected error"), 0)
        with patch("horzcat.cli.app.concat", side_effect=err):
            code = _run_cli(monkeypatch, *files)
        assert code == exit_codes.GENERAL_ERROR
        assert f"Fatal error: Cannot read file {files[0]}: expected error" in capsys.readouterr().err

    def test_read_error_from_real_engine_names_the_file(
        self,
        files: tuple[str, str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        class BrokenHandle:
            def read(self, size: int = -1) -> bytes:
                raise OSError("expected error")

        def fake_open_sources(paths: list[str], stack: ExitStack) -> list[object]:
            return [stack.enter_context(open(paths[0], "rb")), BrokenHandle()]

        monkeypatch.setattr("horzcat.cli.app.open_sources", fake_open_sources)
        code = _run_cli(monkeypatch, *files)

        assert code == exit_codes.GENERAL_ERROR
        assert f"Fatal error: Cannot read file {files[1]}: expected error" in capsys.readouterr().err

    def test_message_with_brackets_printed_verbatim(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        missing = str(tmp_path / "[bold]:b:.txt")
        code = _run_cli(monkeypatch, missing)
        assert code == exit_codes.GENERAL_ERROR
        assert f"cannot open {missing}:" in capsys.readouterr().err

    def test_keyboard_interrupt(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch("horzcat.cli.app.main", side_effect=KeyboardInterrupt):
            code = _run_cli(monkeypatch)
        assert code == exit_codes.KEYBOARD_INTERRUPT
        assert "Aborted by user." in capsys.readouterr().err

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch("horzcat.cli.app.main", side_effect=RuntimeError("boom")):
            code = _run_cli(monkeypatch)
        assert code == exit_codes.GENERAL_ERROR
        assert "Fatal error: unexpected RuntimeError: boom" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Logging flags
# ---------------------------------------------------------------------------

class TestLoggingFlags:
    def test_quiet_by_default(
        self, files: tuple[str, str], tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--out", str(tmp_path / "o"), *files])
        assert capsys.readouterr().err == ""

    def test_verbose_logs_to_stderr(
        self, files: tuple[str, str], tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--verbose", "--out", str(tmp_path / "o"), *files])
        captured = capsys.readouterr()
        assert "concat starting: 2 source(s)" in captured.err
        assert "concat finished: 3 line(s) emitted" in captured.err
        assert captured.out == ""

    def test_json_logs(
        self, files: tuple[str, str], tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--verbose", "--json-logs", "--out", str(tmp_path / "o"), *files])
        records = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        events = [record["event"] for record in records]
        assert "horzcat starting" in events
        assert "concat finished: 3 line(s) emitted" in events
