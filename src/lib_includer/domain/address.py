"""Address value objects for local paths and network locators.

Purpose
-------
Model the two address spaces an include can live in as a small closed union so
relative references resolve against whichever kind produced the current line.
The module performs no I/O.

Contents
--------
* :class:`LocalPath` – filesystem path with ``parent``/``join`` helpers.
* :class:`NetworkLocator` – ``http``/``https`` URL with the same helpers.
* :data:`Address` – ``LocalPath | NetworkLocator``.
* :func:`parse_address` / :func:`is_network_locator` – string classification.

System Role
-----------
Used by :mod:`lib_includer.application.resolver` to compute child addresses and
by the source opener to pick the collaborator that reads an address.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Union
from urllib.parse import SplitResult, urlsplit, urlunsplit
from urllib.request import url2pathname

from .errors import InvalidReference

NETWORK_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})
FILE_SCHEME: Final[str] = "file"


@dataclass(frozen=True)
class LocalPath:
    """Filesystem path as found in a directive or given by the caller.

    Examples
    --------
    >>> LocalPath("/a/b/c.txt").parent()
    LocalPath(path='/a/b')
    >>> LocalPath("/a/b/c.txt").join("d.txt")
    LocalPath(path='/a/b/d.txt')
    """

    path: str

    @property
    def kind(self) -> str:
        return "local"

    def parent(self) -> LocalPath:
        """Return the directory containing this path (may be ``""`` for bare names)."""

        return LocalPath(os.path.dirname(self.path))

    def join(self, reference: str) -> LocalPath:
        """Join *reference* onto the containing directory; absolute references win."""

        if os.path.isabs(reference):
            return LocalPath(reference)
        directory = self.parent().path
        if not directory:
            return LocalPath(reference)
        return LocalPath(os.path.join(directory, reference))

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class NetworkLocator:
    """Fully-qualified ``http``/``https`` URL.

    Examples
    --------
    >>> NetworkLocator("http://host/cfg/main.conf").join("extra.conf")
    NetworkLocator(url='http://host/cfg/extra.conf')
    >>> NetworkLocator("http://host/cfg/main.conf?v=1").parent().url
    'http://host/cfg/'
    """

    url: str

    @property
    def kind(self) -> str:
        return "network"

    @property
    def parts(self) -> SplitResult:
        return urlsplit(self.url)

    @property
    def scheme(self) -> str:
        return self.parts.scheme

    @property
    def netloc(self) -> str:
        return self.parts.netloc

    @property
    def path(self) -> str:
        return self.parts.path

    @property
    def query(self) -> str:
        return self.parts.query

    @property
    def fragment(self) -> str:
        return self.parts.fragment

    def parent(self) -> NetworkLocator:
        """Return the locator of the containing directory (query and fragment dropped)."""

        parts = self.parts
        path = parts.path
        directory = path[: path.rfind("/") + 1] if "/" in path else "/"
        return NetworkLocator(urlunsplit((parts.scheme, parts.netloc, directory, "", "")))

    def join(self, reference: str) -> NetworkLocator:
        """Join a relative *reference* onto the containing directory on the same host.

        Only ``?query`` and ``#fragment`` are split off; the rest of the text,
        colons included, is kept as the path.

        Examples
        --------
        >>> NetworkLocator("http://host/cfg/main.conf").join("v1:extra.conf?x=1")
        NetworkLocator(url='http://host/cfg/v1:extra.conf?x=1')
        """

        remainder, _, fragment = reference.partition("#")
        ref_path, _, query = remainder.partition("?")
        if ref_path.startswith("/"):
            path = ref_path
        else:
            # parent() always ends in "/"
            path = f"{self.parent().path}{ref_path}"
        return NetworkLocator(urlunsplit((self.scheme, self.netloc, path, query, fragment)))

    def __str__(self) -> str:
        return self.url


Address = Union[LocalPath, NetworkLocator]


def is_network_locator(text: str) -> bool:
    """Return ``True`` when *text* is a fully-qualified ``http(s)`` URL with a host.

    Examples
    --------
    >>> is_network_locator("http://host/x.conf")
    True
    >>> is_network_locator("x.conf")
    False
    """

    parts = urlsplit(text)
    return parts.scheme.lower() in NETWORK_SCHEMES and bool(parts.netloc)


def parse_address(text: str) -> Address:
    """Classify a caller-supplied string as a network locator or local path.

    ``file:`` URIs are converted to the local path they name. Any other string
    is taken as a local path verbatim.

    Raises
    ------
    InvalidReference
        When *text* names an ``http(s)`` scheme without a host.

    Examples
    --------
    >>> parse_address("https://example.com/a.txt")
    NetworkLocator(url='https://example.com/a.txt')
    >>> parse_address("conf/a.txt")
    LocalPath(path='conf/a.txt')
    """

    if is_network_locator(text):
        return NetworkLocator(text)
    parts = urlsplit(text)
    scheme = parts.scheme.lower()
    if scheme in NETWORK_SCHEMES:
        raise InvalidReference(f"Network locator without host: {text!r}")
    if scheme == FILE_SCHEME:
        return LocalPath(url2pathname(parts.path))
    return LocalPath(text)


def address_from(value: str | os.PathLike[str] | Address) -> Address:
    """Coerce strings, path-likes, and addresses into an :data:`Address`."""

    if isinstance(value, (LocalPath, NetworkLocator)):
        return value
    if isinstance(value, os.PathLike):
        return LocalPath(os.fspath(value))
    return parse_address(value)
