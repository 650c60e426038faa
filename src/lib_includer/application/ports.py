"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the include
processor can open local files, fetch network resources, and write durable
output without depending on concrete implementations.

Contents
--------
* :class:`LocalReader` – opens a local path as a byte stream.
* :class:`NetworkFetcher` – opens a network locator as a byte stream.
* :class:`OutputSink` – creates (and discards) durable text resources.
* :class:`LineSource` – the iterator surface of an opened source handle.
* :class:`SourceOpener` – turns an address into an opened line source.

System Role
-----------
These protocols enforce Dependency Inversion. Tests substitute counting fakes
to verify that every open is matched by a close.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterator, Protocol, TextIO, Tuple, runtime_checkable

from ..domain.address import Address


@runtime_checkable
class LocalReader(Protocol):
    """Open a filesystem path for binary reading.

    Implementations raise :class:`OSError` subclasses (``FileNotFoundError``,
    ``PermissionError``) which the source opener translates into ``OpenError``.
    """

    def open(self, path: str) -> BinaryIO:
        """Return a readable binary stream for *path*."""


@runtime_checkable
class NetworkFetcher(Protocol):
    """Open a network locator as a readable byte stream.

    Timeouts and retries belong to implementations; the processor never
    retries.
    """

    def open(self, url: str) -> BinaryIO:
        """Return a readable binary stream for *url* or raise ``OpenError``."""


@runtime_checkable
class OutputSink(Protocol):
    """Create durable text resources for the materializer."""

    def create(self, suffix: str = "", prefix: str | None = None) -> Tuple[Path, TextIO]:
        """Create a new resource and return its path plus an open text writer.

        ``None`` for *prefix* selects the sink's own default name prefix.
        """

    def discard(self, path: Path) -> None:
        """Remove a resource produced by :meth:`create` (used on failure)."""


@runtime_checkable
class LineSource(Protocol):
    """Lazy, finite, non-restartable sequence of decoded lines bound to an address."""

    address: Address
    kind: str

    def __iter__(self) -> Iterator[str]:
        ...

    def __next__(self) -> str:
        ...

    def has_more(self) -> bool:
        """Return ``True`` when at least one unread line remains."""

    def close(self) -> None:
        """Release the underlying stream (idempotent)."""


@runtime_checkable
class SourceOpener(Protocol):
    """Open an :data:`Address` as a :class:`LineSource` or raise ``OpenError``."""

    def open(self, address: Address) -> LineSource:
        """Return an opened line source for *address*."""
