"""HTTP adapter implementing :class:`lib_includer.application.ports.NetworkFetcher`.

Purpose
-------
Stream remote include targets with ``requests`` so large resources are decoded
lazily, line by line, instead of being buffered whole.

Contents
--------
* :class:`RequestsFetcher` – ``requests``-based fetcher with a fixed timeout.

System Role
-----------
Used by :class:`lib_includer.adapters.sources.default.DefaultSourceOpener` for
every :class:`~lib_includer.domain.address.NetworkLocator`. This is the only
place that knows about HTTP; connect/read timeouts live here, not in the
processor. No retries are attempted.
"""

from __future__ import annotations

import io
from typing import Any, BinaryIO, Final, Iterator, Mapping, cast

import requests

from ...domain.errors import OpenError
from ...domain.settings import DEFAULT_TIMEOUT
from ...observability import log_debug, log_error

_CHUNK_SIZE: Final[int] = 8192


class RequestsFetcher:
    """Open ``http``/``https`` resources as streaming byte sources."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Store transport options.

        Parameters
        ----------
        timeout:
            Connect and read timeout in seconds.
        session:
            Optional shared :class:`requests.Session` (connection pooling,
            auth, proxies). Defaults to module-level ``requests.get``.
        headers:
            Extra request headers.
        """

        self.timeout = timeout
        self._session = session
        self._headers = dict(headers or {})

    def open(self, url: str) -> BinaryIO:
        """Return the decoded body stream of *url*.

        Raises
        ------
        OpenError
            On connection failures, timeouts, and HTTP error statuses.
        """

        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, stream=True, timeout=self.timeout, headers=self._headers)
        except requests.RequestException as exc:
            log_error("network_open_failed", kind="network", address=url, error=str(exc))
            raise OpenError(f"Cannot open {url}: {exc}") from exc
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            response.close()
            log_error("network_open_failed", kind="network", address=url, error=str(exc))
            raise OpenError(f"Cannot open {url}: {exc}") from exc
        log_debug("network_stream_opened", kind="network", address=url, status=response.status_code)
        return cast(BinaryIO, io.BufferedReader(_ResponseStream(response, url)))


class _ResponseStream(io.RawIOBase):
    """Raw byte stream over ``Response.iter_content``.

    ``iter_content`` undoes ``Content-Encoding`` and maps transport failures to
    ``requests`` exceptions, which are re-raised here as :class:`OSError` so the
    line reader can report them as read failures.
    """

    def __init__(self, response: requests.Response, url: str, chunk_size: int = _CHUNK_SIZE) -> None:
        super().__init__()
        self._response = response
        self._url = url
        self._chunks: Iterator[bytes] = response.iter_content(chunk_size=chunk_size)
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, target: Any) -> int:
        while not self._buffer:
            try:
                chunk = next(self._chunks, None)
            except requests.RequestException as exc:
                raise OSError(f"Failed reading {self._url}: {exc}") from exc
            if chunk is None:
                return 0
            self._buffer = chunk
        size = min(len(target), len(self._buffer))
        target[:size] = self._buffer[:size]
        self._buffer = self._buffer[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()
