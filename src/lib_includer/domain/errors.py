"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the include processor,
and consuming applications. The hierarchy lives in the domain layer so outer
layers (adapters, CLI) depend on it and never the other way round.

Contents
--------
* :class:`IncludeError` – umbrella base class for all include-related issues.
* :class:`ConfigurationError` – malformed pattern, limit, or env override.
* :class:`InvalidReference` – an include reference that cannot be parsed.
* :class:`OpenError` – a local or network resource could not be opened.
* :class:`ReadError` – an open resource failed while being read or decoded.
* :class:`NestingLimitExceeded` – include depth would pass the configured limit.
* :class:`NoLineAvailable` – a line was pulled when none was available.

System Role
-----------
Adapters translate foreign exceptions (``OSError``, ``requests`` errors,
decode errors) into these types. Callers catch :class:`IncludeError` to handle
every library failure uniformly.
"""

from __future__ import annotations


class IncludeError(Exception):
    """Base type for all exceptions emitted by ``lib_includer``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class ConfigurationError(IncludeError):
    """Raised when the processor is built from an unusable configuration.

    Typical Sources
    ---------------
    Include patterns that do not compile or do not carry exactly one capture
    group, non-positive nesting limits, and malformed environment overrides.
    Always raised at construction time, never while reading.
    """


class InvalidReference(IncludeError):
    """Raised when an include reference is neither a locator nor a path fragment."""


class OpenError(IncludeError):
    """Raised when a resource named by an address cannot be opened.

    Covers missing files, permission problems, unreachable hosts, timeouts and
    HTTP error statuses. The originating exception is chained as ``__cause__``.
    """


class ReadError(IncludeError):
    """Raised when an already-open resource fails mid-read or cannot be decoded."""


class NestingLimitExceeded(IncludeError):
    """Raised when an include would push the stack past ``max_nesting`` frames."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Max nesting level ({limit}) exceeded.")
        self.limit = limit


class NoLineAvailable(IncludeError):
    """Signals a pull without an available line.

    This is a usage error (call :meth:`IncludeProcessor.has_next` first, or
    iterate), not a data error.
    """
