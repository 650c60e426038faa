"""Environment variable adapter for include settings.

Purpose
-------
Translate process environment variables into :class:`IncluderSettings`
overrides so deployments can tune directive syntax, nesting depth, decoding,
and network timeouts without code changes.

Key behaviours
--------------
* Enforces a configurable prefix (``default_env_prefix``) so only relevant keys
  are captured.
* Coerces values per field (``int`` for nesting, ``float`` for timeouts,
  escape sequences for the line terminator).
* Raises :class:`ConfigurationError` for malformed values instead of guessing.
* Emits structured logging via :mod:`lib_includer.observability`.
"""

from __future__ import annotations

import os
from typing import Callable, Final, Mapping

from ...domain.errors import ConfigurationError
from ...domain.settings import IncluderSettings
from ...observability import log_debug

ENV_PREFIX: Final[str] = "LIB_INCLUDER"

_TERMINATOR_ALIASES: Final[dict[str, str]] = {
    "\\n": "\n",
    "\\r\\n": "\r\n",
    "\\r": "\r",
    "lf": "\n",
    "crlf": "\r\n",
    "cr": "\r",
}


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-includer')
    'LIB_INCLUDER'
    """

    return slug.replace("-", "_").upper()


class DefaultEnvLoader:
    """Load include settings overrides from the environment."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str = ENV_PREFIX) -> dict[str, object]:
        """Return coerced overrides for variables with the supplied *prefix*.

        Unknown suffixes are ignored; known ones must parse.

        Examples
        --------
        >>> env = {'DEMO_MAX_NESTING': '7', 'DEMO_TIMEOUT': '2.5', 'OTHER': 'x'}
        >>> DefaultEnvLoader(environ=env).load('DEMO')
        {'max_nesting': 7, 'timeout': 2.5}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if not key.startswith(prefix):
                continue
            field = key[len(prefix) :].lower()
            coerce = _COERCERS.get(field)
            if coerce is None:
                continue
            try:
                collected[field] = coerce(value)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid value for {key}: {value!r} ({exc})") from exc
        log_debug("env_overrides_loaded", kind="env", address=None, keys=sorted(collected.keys()))
        return collected


def settings_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base: IncluderSettings | None = None,
    prefix: str = ENV_PREFIX,
) -> IncluderSettings:
    """Return *base* (or defaults) with environment overrides applied and validated.

    Examples
    --------
    >>> settings_from_env({'LIB_INCLUDER_MAX_NESTING': '3'}).max_nesting
    3
    """

    overrides = DefaultEnvLoader(environ=environ).load(prefix)
    settings = (base or IncluderSettings()).with_overrides(**overrides)
    return settings.validate()


def _coerce_terminator(value: str) -> str:
    """Accept literal terminators, escaped forms (``\\r\\n``) and names (``crlf``)."""

    if value in ("\n", "\r\n", "\r"):
        return value
    try:
        return _TERMINATOR_ALIASES[value.strip().lower()]
    except KeyError as exc:
        raise ValueError("expected one of \\n, \\r\\n, \\r, lf, crlf, cr") from exc


_COERCERS: Final[dict[str, Callable[[str], object]]] = {
    "include_pattern": str,
    "max_nesting": int,
    "encoding": str.strip,
    "timeout": float,
    "line_terminator": _coerce_terminator,
}
