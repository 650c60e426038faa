"""Structured logging for include processing.

Purpose
    Give every source lifecycle event (open, include, close, failure) the same
    shape so operators can follow one flattening run across nested files
    without the library choosing a logging backend for them.

Contents
    - ``TRACE_ID``: context variable holding the identifier of the current run.
    - ``get_logger``: the package logger, silent until the host adds handlers.
    - ``bind_trace_id`` / ``begin_trace``: attach an identifier to the run.
    - ``log_debug`` / ``log_info`` / ``log_error``: level-specific emitters.
    - ``make_event``: payload builder keyed by address kind and address.

System Integration
    Every record carries ``extra={"context": {...}}`` with ``trace_id`` first,
    so formatters can render ``record.context`` uniformly.
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_includer_trace_id", default=None)
"""Identifier of the flattening run active in this context, if any."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_includer")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Set (or clear with ``None``) the identifier attached to log records.

    Examples
    --------
    >>> bind_trace_id('run-1')
    >>> TRACE_ID.get()
    'run-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def begin_trace() -> str:
    """Return the bound identifier, minting a random one when none is bound.

    Callers that bound their own id (for instance a request id) keep it, so
    include events join the caller's trace.

    Examples
    --------
    >>> bind_trace_id('outer')
    >>> begin_trace()
    'outer'
    >>> bind_trace_id(None)
    >>> len(begin_trace())
    32
    >>> bind_trace_id(None)
    """

    current = TRACE_ID.get()
    if current is None:
        current = uuid.uuid4().hex
        TRACE_ID.set(current)
    return current


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(
    kind: str,
    address: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the common ``kind``/``address`` payload plus optional detail.

    Examples
    --------
    >>> make_event('local', '/etc/app.conf', {'depth': 2})
    {'kind': 'local', 'address': '/etc/app.conf', 'depth': 2}
    >>> make_event('stream', None)
    {'kind': 'stream', 'address': None}
    """

    event: dict[str, Any] = {"kind": kind, "address": address}
    if payload:
        event.update(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    context: dict[str, Any] = {"trace_id": TRACE_ID.get(), **fields}
    _LOGGER.log(level, message, extra={"context": context})
