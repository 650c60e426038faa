"""Immutable runtime settings for the include processor.

Purpose
-------
Collect every recognised configuration option in one frozen value object so
the composition root, the CLI and the environment adapter agree on names and
defaults.

Contents
--------
* :data:`DEFAULT_MAX_NESTING` / :data:`DEFAULT_ENCODING` /
  :data:`DEFAULT_TIMEOUT` / :data:`DEFAULT_LINE_TERMINATOR`.
* :class:`IncluderSettings` – frozen dataclass with :meth:`validate` and
  :meth:`with_overrides`.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, replace
from typing import Any, Final

from .errors import ConfigurationError
from .matcher import DEFAULT_INCLUDE_PATTERN, IncludeMatcher

DEFAULT_MAX_NESTING: Final[int] = 100
DEFAULT_ENCODING: Final[str] = "utf-8"
DEFAULT_TIMEOUT: Final[float] = 30.0
DEFAULT_LINE_TERMINATOR: Final[str] = "\n"


@dataclass(frozen=True)
class IncluderSettings:
    """Recognised options for building an include processor.

    Attributes
    ----------
    include_pattern:
        Regular expression with exactly one capture group yielding the
        reference.
    max_nesting:
        Upper bound on simultaneously open frames (root included).
    encoding:
        Charset used to decode every source, local or remote.
    timeout:
        Connect/read timeout in seconds handed to the network fetcher.
    line_terminator:
        Terminator appended to each line by the materializer.

    Examples
    --------
    >>> IncluderSettings().max_nesting
    100
    >>> IncluderSettings().with_overrides(max_nesting=3).max_nesting
    3
    """

    include_pattern: str = DEFAULT_INCLUDE_PATTERN
    max_nesting: int = DEFAULT_MAX_NESTING
    encoding: str = DEFAULT_ENCODING
    timeout: float = DEFAULT_TIMEOUT
    line_terminator: str = DEFAULT_LINE_TERMINATOR

    def validate(self) -> IncluderSettings:
        """Return ``self`` when every field is usable, otherwise raise ``ConfigurationError``."""

        IncludeMatcher(self.include_pattern)
        if isinstance(self.max_nesting, bool) or not isinstance(self.max_nesting, int) or self.max_nesting < 1:
            raise ConfigurationError(f"max_nesting must be a positive integer, got {self.max_nesting!r}")
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ConfigurationError(f"Unknown encoding {self.encoding!r}") from exc
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")
        if self.line_terminator not in ("\n", "\r\n", "\r"):
            raise ConfigurationError(f"Unsupported line terminator {self.line_terminator!r}")
        return self

    def with_overrides(self, **overrides: Any) -> IncluderSettings:
        """Return a copy with non-``None`` *overrides* applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)
