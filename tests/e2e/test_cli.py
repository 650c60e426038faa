"""End-to-end CLI coverage for the public commands exposed by lib_includer.

These tests exercise the documented CLI workflows (flatten, preprocess,
metadata lookups) against include trees written to a temporary directory.
"""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

import lib_cli_exit_tools

from lib_includer import cli
from lib_includer.domain.errors import NestingLimitExceeded, OpenError
from tests.support import lines, write_tree


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def _tree(tmp_path: Path) -> dict[str, Path]:
    return write_tree(
        tmp_path,
        {
            "main.txt": lines("header", '%include "parts/body.txt"', "footer"),
            "parts/body.txt": lines("body-1", '%include "tail.txt"'),
            "parts/tail.txt": lines("tail"),
        },
    )


def test_cli_flatten_prints_expanded_lines(tmp_path: Path) -> None:
    """`cli flatten` should print the flattened stream, one line per output line."""

    files = _tree(tmp_path)
    result = _runner().invoke(cli.cli, ["flatten", str(files["main.txt"])])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["header", "body-1", "tail", "footer"]


def test_cli_flatten_honours_custom_pattern(tmp_path: Path) -> None:
    """`--pattern` replaces the default directive syntax."""

    files = write_tree(tmp_path, {"main.txt": lines("#use lib.txt", '%include "lib.txt"'), "lib.txt": lines("lib")})
    result = _runner().invoke(cli.cli, ["flatten", "--pattern", r"#use (\S+)", str(files["main.txt"])])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["lib", '%include "lib.txt"']


def test_cli_flatten_reads_stdin(tmp_path: Path) -> None:
    """`-` reads the root from standard input; absolute includes still resolve."""

    files = _tree(tmp_path)
    stdin = lines("from-stdin", f'%include "{files["parts/tail.txt"]}"')
    result = _runner().invoke(cli.cli, ["flatten", "-"], input=stdin)
    assert result.exit_code == 0
    assert result.output.splitlines() == ["from-stdin", "tail"]


def test_cli_flatten_stops_at_nesting_limit(tmp_path: Path) -> None:
    """A self-including file must fail with the nesting error rather than loop."""

    files = write_tree(tmp_path, {"loop.txt": lines("again", '%include "loop.txt"')})
    result = _runner().invoke(cli.cli, ["flatten", "--max-nesting", "3", str(files["loop.txt"])])
    assert result.exit_code != 0
    assert isinstance(result.exception, NestingLimitExceeded)
    assert result.output.splitlines() == ["again", "again", "again"]


def test_cli_flatten_missing_file_raises_open_error(tmp_path: Path) -> None:
    """A missing source exits non-zero with OpenError."""

    result = _runner().invoke(cli.cli, ["flatten", str(tmp_path / "absent.txt")])
    assert result.exit_code != 0
    assert isinstance(result.exception, OpenError)


def test_cli_rejects_non_positive_nesting(tmp_path: Path) -> None:
    """`--max-nesting 0` is a usage error."""

    files = _tree(tmp_path)
    result = _runner().invoke(cli.cli, ["flatten", "--max-nesting", "0", str(files["main.txt"])])
    assert result.exit_code == 2


def test_cli_preprocess_writes_file_and_prints_path(tmp_path: Path) -> None:
    """`cli preprocess` should print the path of a complete flattened copy."""

    files = _tree(tmp_path)
    result = _runner().invoke(cli.cli, ["preprocess", str(files["main.txt"])])
    assert result.exit_code == 0
    output = Path(result.output.strip())
    try:
        assert output.read_text(encoding="utf-8") == lines("header", "body-1", "tail", "footer")
    finally:
        output.unlink()


def test_cli_preprocess_uses_environment_terminator(tmp_path: Path) -> None:
    """LIB_INCLUDER_LINE_TERMINATOR shapes the written terminators."""

    files = _tree(tmp_path)
    result = _runner().invoke(
        cli.cli,
        ["preprocess", str(files["parts/tail.txt"])],
        env={"LIB_INCLUDER_LINE_TERMINATOR": "crlf"},
    )
    assert result.exit_code == 0
    output = Path(result.output.strip())
    try:
        assert output.read_bytes() == b"tail\r\n"
    finally:
        output.unlink()


def test_cli_invalid_environment_value_is_reported(tmp_path: Path) -> None:
    """A malformed environment value names the offending variable."""

    files = _tree(tmp_path)
    result = _runner().invoke(
        cli.cli,
        ["flatten", str(files["main.txt"])],
        env={"LIB_INCLUDER_MAX_NESTING": "lots"},
    )
    assert result.exit_code != 0
    assert "LIB_INCLUDER_MAX_NESTING" in str(result.exception)


def test_cli_info_handles_missing_metadata(monkeypatch) -> None:
    """`cli info` must degrade gracefully when package metadata is unavailable."""

    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_main_restores_traceback_flag(tmp_path: Path) -> None:
    """`cli main` should restore lib_cli_exit_tools tracebacks after execution."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    files = _tree(tmp_path)
    exit_code = cli.main(["--traceback", "flatten", str(files["parts/tail.txt"])], restore_traceback=True)
    assert exit_code == 0
    assert getattr(lib_cli_exit_tools.config, "traceback", False) == previous_traceback


def test_cli_main_returns_failure_code_for_missing_source(tmp_path: Path) -> None:
    """`main` maps a missing source to a non-zero exit code."""

    exit_code = cli.main(["flatten", str(tmp_path / "absent.txt")])
    assert exit_code != 0


def test_cli_preprocess_prefix_and_suffix(tmp_path: Path) -> None:
    """`--prefix` and `--suffix` shape the printed output file name."""

    files = _tree(tmp_path)
    result = _runner().invoke(
        cli.cli, ["preprocess", "--prefix", "flat-", "--suffix", ".conf", str(files["parts/tail.txt"])]
    )
    assert result.exit_code == 0
    output = Path(result.output.strip())
    try:
        assert output.name.startswith("flat-")
        assert output.suffix == ".conf"
        assert output.read_text(encoding="utf-8") == lines("tail")
    finally:
        output.unlink()
