"""Composition root for ``lib_includer``.

Purpose
-------
Provide the entry points that wire adapters (filesystem, ``requests``,
temporary files) into the include processor and expose only stable,
consumer-ready APIs.

Contents
--------
* :data:`IncludeSource` – accepted root source types.
* :func:`open_includer` – build an :class:`IncludeProcessor` over any root.
* :func:`preprocess` – flatten a root into a temporary file and return its path.
* :func:`_resolve_settings` / :func:`_open_root` – internal wiring helpers.

System Role
-----------
The only module that knows about every adapter. Adjust defaults or plug in new
collaborators here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Any, Union

from .adapters.env.default import settings_from_env
from .adapters.sinks.temporary import TempFileSink
from .adapters.sources.default import DefaultSourceOpener, handle_from_stream
from .application.materialize import materialize
from .application.ports import LineSource, OutputSink, SourceOpener
from .application.processor import IncludeProcessor, ProcessorState
from .domain.address import Address, LocalPath, NetworkLocator, address_from
from .domain.errors import (
    ConfigurationError,
    IncludeError,
    InvalidReference,
    NestingLimitExceeded,
    NoLineAvailable,
    OpenError,
    ReadError,
)
from .domain.matcher import DEFAULT_INCLUDE_PATTERN, IncludeMatcher
from .domain.settings import DEFAULT_MAX_NESTING, IncluderSettings
from .observability import begin_trace, log_debug, make_event

IncludeSource = Union[str, os.PathLike, Address, IO[Any]]


def open_includer(
    source: IncludeSource,
    *,
    include_pattern: str | None = None,
    max_nesting: int | None = None,
    settings: IncluderSettings | None = None,
    opener: SourceOpener | None = None,
) -> IncludeProcessor:
    """Return an :class:`IncludeProcessor` reading *source*.

    Why
    ----
    One polymorphic entry point over path strings, URLs, ``os.PathLike``
    objects, :data:`Address` values and already-open streams.

    Parameters
    ----------
    source:
        Root to read. Strings starting with ``http://``/``https://`` are
        fetched over the network, ``file:`` URIs and other strings are local
        paths.
    include_pattern / max_nesting:
        Per-call overrides for the matching settings fields.
    settings:
        Base settings; defaults to :class:`IncluderSettings` with
        ``LIB_INCLUDER_*`` environment overrides applied.
    opener:
        Custom :class:`SourceOpener`; defaults to :class:`DefaultSourceOpener`.

    Raises
    ------
    ConfigurationError
        For invalid patterns, limits, or environment overrides.
    OpenError / InvalidReference
        When the root cannot be opened.

    Warning
    -------
    With an already-open stream there is no containing address; relative
    includes in that root resolve against the current working directory.
    The stream is closed by the processor.

    Examples
    --------
    >>> import io
    >>> with open_includer(io.StringIO("alpha\\nbeta\\n")) as includer:
    ...     list(includer)
    ['alpha', 'beta']
    """

    resolved = _resolve_settings(settings, include_pattern=include_pattern, max_nesting=max_nesting)
    matcher = IncludeMatcher(resolved.include_pattern)
    source_opener = opener or DefaultSourceOpener(encoding=resolved.encoding, timeout=resolved.timeout)
    begin_trace()
    root = _open_root(source, source_opener, encoding=resolved.encoding)
    log_debug("includer_created", **make_event(root.kind, str(root.address), {"max_nesting": resolved.max_nesting}))
    return IncludeProcessor(root, source_opener, matcher=matcher, max_nesting=resolved.max_nesting)


def preprocess(
    source: IncludeSource,
    *,
    include_pattern: str | None = None,
    max_nesting: int | None = None,
    settings: IncluderSettings | None = None,
    opener: SourceOpener | None = None,
    sink: OutputSink | None = None,
    prefix: str | None = None,
    suffix: str = ".txt",
) -> Path:
    """Flatten *source* into a temporary file and return its path.

    The file is named ``<prefix>XXXX<suffix>``; *prefix* defaults to the
    sink's own (``lib_includer-`` for :class:`TempFileSink`). The default
    sink removes the file at interpreter exit; pass
    ``TempFileSink(delete_on_exit=False)`` to keep it.

    Examples
    --------
    >>> import io
    >>> path = preprocess(io.StringIO("one\\ntwo\\n"))
    >>> path.read_text(encoding="utf-8")
    'one\\ntwo\\n'
    """

    resolved = _resolve_settings(settings, include_pattern=include_pattern, max_nesting=max_nesting)
    processor = open_includer(source, settings=resolved, opener=opener)
    output = sink or TempFileSink(encoding=resolved.encoding)
    return materialize(
        processor,
        output,
        suffix=suffix,
        prefix=prefix,
        line_terminator=resolved.line_terminator,
    )


def _resolve_settings(
    settings: IncluderSettings | None,
    *,
    include_pattern: str | None,
    max_nesting: int | None,
) -> IncluderSettings:
    """Apply per-call overrides on top of explicit or environment-derived settings."""

    base = settings if settings is not None else settings_from_env()
    return base.with_overrides(include_pattern=include_pattern, max_nesting=max_nesting).validate()


def _open_root(source: IncludeSource, opener: SourceOpener, *, encoding: str) -> LineSource:
    """Open the root frame for any accepted *source* type."""

    if hasattr(source, "read") and not isinstance(source, (str, os.PathLike)):
        return handle_from_stream(source, encoding=encoding)  # type: ignore[arg-type]
    if isinstance(source, str) and not source.strip():
        raise InvalidReference("Empty root address")
    return opener.open(address_from(source))  # type: ignore[arg-type]


__all__ = [
    "Address",
    "ConfigurationError",
    "DEFAULT_INCLUDE_PATTERN",
    "DEFAULT_MAX_NESTING",
    "IncludeError",
    "IncludeMatcher",
    "IncludeProcessor",
    "IncludeSource",
    "IncluderSettings",
    "InvalidReference",
    "LocalPath",
    "NestingLimitExceeded",
    "NetworkLocator",
    "NoLineAvailable",
    "OpenError",
    "ProcessorState",
    "ReadError",
    "open_includer",
    "preprocess",
]
