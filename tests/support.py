"""Shared fakes for include-processor tests.

Provides an in-memory :class:`~lib_includer.application.ports.SourceOpener`
that counts opens and closes so tests can assert that every acquired source
is released, plus a tiny helper that lays out include trees on disk.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, TextIO

from lib_includer.adapters.sources.default import SourceHandle
from lib_includer.application.processor import IncludeProcessor
from lib_includer.domain.address import Address, address_from
from lib_includer.domain.errors import OpenError
from lib_includer.domain.matcher import IncludeMatcher


class _TrackedStream(io.StringIO):
    """StringIO that reports its first close to the owning opener."""

    def __init__(self, text: str, owner: "MemoryOpener") -> None:
        super().__init__(text)
        self._owner = owner

    def close(self) -> None:
        if not self.closed:
            self._owner.closed += 1
        super().close()


class _TrackedBytes(io.BytesIO):
    """BytesIO counterpart of :class:`_TrackedStream` for undecodable payloads."""

    def __init__(self, payload: bytes, owner: "MemoryOpener") -> None:
        super().__init__(payload)
        self._owner = owner

    def close(self) -> None:
        if not self.closed:
            self._owner.closed += 1
        super().close()


@dataclass
class MemoryOpener:
    """Serve sources from a ``{address: text}`` mapping and count lifecycles.

    ``bytes`` values are decoded as UTF-8 while reading, so they can carry
    payloads that fail mid-read.
    """

    files: Mapping[str, str | bytes]
    opened: int = 0
    closed: int = 0
    requested: list[str] = field(default_factory=list)

    def open(self, address: Address) -> SourceHandle:
        key = str(address)
        self.requested.append(key)
        if key not in self.files:
            raise OpenError(f"Cannot open {key}: not found")
        self.opened += 1
        content = self.files[key]
        if isinstance(content, bytes):
            stream: TextIO = io.TextIOWrapper(_TrackedBytes(content, self), encoding="utf-8")
        else:
            stream = _TrackedStream(content, self)
        return SourceHandle(stream, address)

    @property
    def balanced(self) -> bool:
        return self.opened == self.closed


def lines(*items: str) -> str:
    """Join *items* into newline-terminated text."""

    return "".join(f"{item}\n" for item in items)


def processor_for(
    opener: MemoryOpener,
    root: str | Address,
    *,
    pattern: str | None = None,
    max_nesting: int = 100,
) -> IncludeProcessor:
    """Open *root* through *opener* and wrap it in an :class:`IncludeProcessor`."""

    address = address_from(root)
    matcher = IncludeMatcher(pattern) if pattern is not None else None
    return IncludeProcessor(opener.open(address), opener, matcher=matcher, max_nesting=max_nesting)


def write_tree(root: Path, files: Mapping[str, str]) -> dict[str, Path]:
    """Write ``{relative_path: text}`` under *root* and return the created paths."""

    created: dict[str, Path] = {}
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        created[relative] = target
    return created
