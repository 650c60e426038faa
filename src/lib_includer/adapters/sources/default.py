"""Opened include sources and the opener that produces them.

Purpose
-------
Bind one open, line-decoding reader to the address it came from, and route
addresses to the collaborator that can open them.

Contents
--------
* :class:`SourceHandle` – lazy line iterator with one-line lookahead and an
  idempotent :meth:`~SourceHandle.close`.
* :class:`DefaultSourceOpener` – implements
  :class:`lib_includer.application.ports.SourceOpener` on top of a
  :class:`~lib_includer.application.ports.LocalReader` and a
  :class:`~lib_includer.application.ports.NetworkFetcher`.
* :func:`handle_from_stream` – wraps a caller-supplied, already-open stream.

System Role
-----------
Translates ``OSError`` and decode failures into :class:`OpenError` and
:class:`ReadError` so the processor only ever sees the domain taxonomy.
"""

from __future__ import annotations

import io
from typing import IO, Any, BinaryIO, Iterator, TextIO, cast

from ...application.ports import LocalReader, NetworkFetcher
from ...domain.address import Address, LocalPath, NetworkLocator
from ...domain.errors import OpenError, ReadError
from ...domain.settings import DEFAULT_ENCODING, DEFAULT_TIMEOUT
from ...observability import log_debug, log_error, make_event
from ..local.default import FileSystemReader
from ..network.http import RequestsFetcher

#: Base address assumed for pre-opened streams; relative references then
#: resolve against the current working directory.
STREAM_BASE_ADDRESS = LocalPath(".")


class SourceHandle:
    """One opened resource plus the address it was opened from.

    Iterating yields decoded lines with their trailing terminator stripped.
    Once exhausted the handle is spent; it cannot be rewound.

    Examples
    --------
    >>> handle = SourceHandle(io.StringIO("a\\r\\nb\\n"), LocalPath("x.txt"))
    >>> list(handle)
    ['a', 'b']
    >>> handle.has_more()
    False
    """

    def __init__(self, stream: TextIO, address: Address, *, kind: str | None = None) -> None:
        self._stream = stream
        self.address = address
        self.kind = kind or address.kind
        self._pending: str | None = None
        self._exhausted = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._pending is not None:
            line, self._pending = self._pending, None
            return line
        line = self._read_line()
        if line is None:
            raise StopIteration
        return line

    def has_more(self) -> bool:
        """Peek one line ahead without losing it."""

        if self._pending is None:
            self._pending = self._read_line()
        return self._pending is not None

    def close(self) -> None:
        """Release the underlying stream; calling twice is harmless."""

        if self._closed:
            return
        self._closed = True
        self._exhausted = True
        self._pending = None
        try:
            self._stream.close()
        finally:
            log_debug("source_closed", **make_event(self.kind, str(self.address)))

    def _read_line(self) -> str | None:
        if self._exhausted:
            return None
        try:
            raw = self._stream.readline()
        except (OSError, UnicodeDecodeError) as exc:
            log_error("source_read_failed", **make_event(self.kind, str(self.address), {"error": str(exc)}))
            raise ReadError(f"Failed reading {self.address}: {exc}") from exc
        if raw == "":
            self._exhausted = True
            return None
        return _strip_terminator(raw)

    def __repr__(self) -> str:
        return f"SourceHandle(address={self.address!r}, closed={self._closed})"


class DefaultSourceOpener:
    """Open local and network addresses as :class:`SourceHandle` objects."""

    def __init__(
        self,
        *,
        local_reader: LocalReader | None = None,
        network_fetcher: NetworkFetcher | None = None,
        encoding: str = DEFAULT_ENCODING,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Wire collaborators, defaulting to the filesystem and ``requests``.

        Parameters
        ----------
        local_reader / network_fetcher:
            Port implementations; injected in tests to count opens and closes.
        encoding:
            Charset used to decode every opened source.
        timeout:
            Forwarded to the default :class:`RequestsFetcher` only.
        """

        self.local_reader = local_reader or FileSystemReader()
        self.network_fetcher = network_fetcher or RequestsFetcher(timeout=timeout)
        self.encoding = encoding

    def open(self, address: Address) -> SourceHandle:
        """Open *address* or raise :class:`OpenError`."""

        stream = self._open_bytes(address)
        text = io.TextIOWrapper(stream, encoding=self.encoding, newline=None)
        log_debug("source_opened", **make_event(address.kind, str(address)))
        return SourceHandle(cast(TextIO, text), address)

    def _open_bytes(self, address: Address) -> BinaryIO:
        if isinstance(address, NetworkLocator):
            return self.network_fetcher.open(address.url)
        try:
            return self.local_reader.open(address.path)
        except OSError as exc:
            log_error("source_open_failed", **make_event("local", address.path, {"error": str(exc)}))
            raise OpenError(f"Cannot open {address.path}: {exc}") from exc


def handle_from_stream(stream: IO[Any], *, encoding: str = DEFAULT_ENCODING) -> SourceHandle:
    """Wrap an already-open text or binary *stream* as a root handle.

    The handle takes ownership and closes *stream* when done. No reliable
    containing address exists for a stream, so relative includes resolve
    against the current working directory (:data:`STREAM_BASE_ADDRESS`); use
    absolute references or open by path/URL instead.
    """

    if isinstance(stream, io.TextIOBase):
        text = cast(TextIO, stream)
    else:
        text = cast(TextIO, io.TextIOWrapper(cast(BinaryIO, stream), encoding=encoding, newline=None))
    log_debug("source_opened", **make_event("stream", None))
    return SourceHandle(text, STREAM_BASE_ADDRESS, kind="stream")


def _strip_terminator(line: str) -> str:
    """Remove a single trailing ``\\r\\n``, ``\\n`` or ``\\r``."""

    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line
