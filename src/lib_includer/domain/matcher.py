"""Include directive detection.

Purpose
-------
Decide whether a single line is an include directive and, if so, extract the
raw reference string. Pattern validation happens once, at construction.

Contents
--------
* :data:`DEFAULT_INCLUDE_PATTERN` – matches ``%include "reference"`` lines.
* :class:`IncludeMatcher` – stateless matcher over a compiled pattern.
"""

from __future__ import annotations

import re
from typing import Final, Pattern

from .errors import ConfigurationError

DEFAULT_INCLUDE_PATTERN: Final[str] = r'^\s*%include\s+"([^"]+)"\s*$'


class IncludeMatcher:
    """Match whole lines against an include pattern with exactly one group.

    Examples
    --------
    >>> matcher = IncludeMatcher()
    >>> matcher.match('%include "sub.txt"')
    'sub.txt'
    >>> matcher.match('plain text') is None
    True
    >>> IncludeMatcher(r"#use <(.+)>").match("#use <lib.txt>")
    'lib.txt'
    """

    def __init__(self, pattern: str | Pattern[str] = DEFAULT_INCLUDE_PATTERN) -> None:
        self._pattern = _compile(pattern)

    @property
    def pattern(self) -> Pattern[str]:
        return self._pattern

    def match(self, line: str) -> str | None:
        """Return the captured reference when *line* is a directive, else ``None``."""

        found = self._pattern.fullmatch(line)
        if found is None:
            return None
        return found.group(1)


def _compile(pattern: str | Pattern[str]) -> Pattern[str]:
    """Compile *pattern* and enforce the single-capture-group contract."""

    if isinstance(pattern, str):
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise ConfigurationError(f"Invalid include pattern {pattern!r}: {exc}") from exc
    else:
        compiled = pattern
    if compiled.groups != 1:
        raise ConfigurationError(
            f"Include pattern {compiled.pattern!r} must contain exactly one capture group, "
            f"found {compiled.groups}"
        )
    return compiled
