"""Drain an include processor into a durable flat resource.

Purpose
-------
Serve callers that want a single flattened file instead of a live iterator
(for instance to hand the result to a tool that only accepts paths).

Contents
--------
* :func:`materialize` – drain, write, return the resulting path.
"""

from __future__ import annotations

from pathlib import Path

from ..domain.settings import DEFAULT_LINE_TERMINATOR
from ..observability import log_error, log_info
from .ports import OutputSink
from .processor import IncludeProcessor


def materialize(
    processor: IncludeProcessor,
    sink: OutputSink,
    *,
    suffix: str = ".txt",
    prefix: str | None = None,
    line_terminator: str = DEFAULT_LINE_TERMINATOR,
) -> Path:
    """Write every line of *processor* (plus *line_terminator*) to a new resource.

    Why
    ----
    Keeps the flattening logic in one place while offering a path-based result.

    What
    ----
    Creates a resource named ``<prefix>...<suffix>`` through *sink*, drains
    *processor* into it and returns the path. The processor is closed
    afterwards whatever happens, including when *sink* cannot create the
    resource.

    Raises
    ------
    IncludeError
        Any fatal processor error. The partially written resource is
        discarded through :meth:`OutputSink.discard` before the error
        propagates, so a returned path always denotes complete output.
    OSError
        When *sink* cannot create the resource.
    """

    with processor:
        path, writer = sink.create(suffix, prefix)
        count = 0
        try:
            with writer:
                for line in processor:
                    writer.write(line)
                    writer.write(line_terminator)
                    count += 1
        except BaseException as exc:
            log_error("preprocess_failed", kind="local", address=str(path), error=str(exc))
            sink.discard(path)
            raise
    log_info("preprocess_materialized", kind="local", address=str(path), lines=count)
    return path
