"""CLI adapter for ``lib_includer`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the include preprocessor on the command line so operators can flatten
include-enabled files (local or remote) without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_flatten` – streams the flattened lines to stdout.
* :func:`cli_preprocess` – writes the flattened result to a temporary file and
  prints its path.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root
(:mod:`lib_includer.core`) and never touches adapters directly, except to
choose the temporary-file sink's cleanup policy. ``lib_cli_exit_tools``
centralises the exit code strategy.
"""

from __future__ import annotations

import sys
from importlib import metadata
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import settings_from_env
from .adapters.sinks.temporary import TempFileSink
from .core import open_includer, preprocess
from .domain.settings import IncluderSettings

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version("lib_includer")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _source_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by ``flatten`` and ``preprocess``."""

    decorators = [
        click.argument("source"),
        click.option(
            "--pattern",
            default=None,
            help="Include directive regex with exactly one capture group",
        ),
        click.option(
            "--max-nesting",
            type=click.IntRange(min=1),
            default=None,
            help="Maximum include depth (default 100)",
        ),
        click.option("--encoding", default=None, help="Charset used to decode every source"),
        click.option(
            "--timeout",
            type=click.FloatRange(min=0, min_open=True),
            default=None,
            help="Network connect/read timeout in seconds",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group(
    help="Include-directive preprocessor for local files and URLs",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_includer",
    message="lib_includer version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_includer")
    except metadata.PackageNotFoundError:
        click.echo("lib_includer (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_includer')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("flatten", context_settings=CLICK_CONTEXT_SETTINGS)
@_source_options
def cli_flatten(
    source: str,
    pattern: Optional[str],
    max_nesting: Optional[int],
    encoding: Optional[str],
    timeout: Optional[float],
) -> None:
    """Print SOURCE with every include directive expanded in place.

    SOURCE is a file path, a ``file:`` URI or an ``http(s)`` URL; ``-`` reads
    standard input (relative includes then resolve against the working
    directory).
    """

    settings = _settings(pattern, max_nesting, encoding, timeout)
    root = click.get_text_stream("stdin") if source == "-" else source
    with open_includer(root, settings=settings) as includer:
        for line in includer:
            click.echo(line)


@cli.command("preprocess", context_settings=CLICK_CONTEXT_SETTINGS)
@_source_options
@click.option(
    "--keep/--no-keep",
    default=True,
    show_default=True,
    help="Keep the output file after the command exits",
)
@click.option("--prefix", default=None, help="Output file name prefix (default lib_includer-)")
@click.option("--suffix", default=".txt", show_default=True, help="Output file name suffix")
def cli_preprocess(
    source: str,
    pattern: Optional[str],
    max_nesting: Optional[int],
    encoding: Optional[str],
    timeout: Optional[float],
    keep: bool,
    prefix: Optional[str],
    suffix: str,
) -> None:
    """Flatten SOURCE into a temporary file and print the file's path."""

    settings = _settings(pattern, max_nesting, encoding, timeout)
    sink = TempFileSink(encoding=settings.encoding, delete_on_exit=not keep)
    click.echo(str(preprocess(source, settings=settings, sink=sink, prefix=prefix, suffix=suffix)))


def _settings(
    pattern: Optional[str],
    max_nesting: Optional[int],
    encoding: Optional[str],
    timeout: Optional[float],
) -> IncluderSettings:
    """Layer CLI options over ``LIB_INCLUDER_*`` environment overrides."""

    base = settings_from_env()
    return base.with_overrides(
        include_pattern=pattern,
        max_nesting=max_nesting,
        encoding=encoding,
        timeout=timeout,
    ).validate()


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_includer",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
