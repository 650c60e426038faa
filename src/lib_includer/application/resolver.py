"""Resolve include references against the address that contained them.

Purpose
-------
Compute the absolute address of an included resource, telling apart
references that are themselves fully-qualified locators from references that
are relative to the including resource.

Contents
--------
* :func:`resolve` – the single resolution entry point.
* :func:`_check_reference` – rejects references that are not parseable.

System Role
-----------
Called by :class:`lib_includer.application.processor.IncludeProcessor` for
every directive. Pure: no I/O and no logging.
"""

from __future__ import annotations

import os
import re
from typing import Final
from urllib.parse import urlsplit
from urllib.request import url2pathname

from ..domain.address import FILE_SCHEME, NETWORK_SCHEMES, Address, LocalPath, NetworkLocator, is_network_locator
from ..domain.errors import InvalidReference

# "scheme://..." with a scheme of at least two characters (leaves "C:\" alone)
_SCHEMED: Final[re.Pattern[str]] = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+)://")


def resolve(base: Address, reference: str) -> Address:
    """Return the address *reference* names when found inside *base*.

    Rules
    -----
    * ``http(s)://host/...`` references are returned verbatim.
    * ``file:`` URIs become the local path they name; a relative one
      (``file:x.txt``) is joined onto a local *base* like a plain reference.
    * Anything else is joined onto the directory that contains *base*; the
      result keeps the kind of *base*.

    Raises
    ------
    InvalidReference
        For empty references and references with control characters. Also
        for unsupported schemes and for relative ``file:`` URIs inside a
        network resource.

    Examples
    --------
    >>> resolve(LocalPath("/a/b/c.txt"), "d.txt")
    LocalPath(path='/a/b/d.txt')
    >>> resolve(LocalPath("/a/b/c.txt"), "http://host/x.conf")
    NetworkLocator(url='http://host/x.conf')
    >>> resolve(NetworkLocator("https://h:8080/a/b.txt"), "c/d.txt")
    NetworkLocator(url='https://h:8080/a/c/d.txt')
    """

    _check_reference(reference)
    if is_network_locator(reference):
        return NetworkLocator(reference)
    parts = urlsplit(reference)
    if parts.scheme.lower() == FILE_SCHEME:
        local = url2pathname(parts.path)
        if os.path.isabs(local):
            return LocalPath(local)
        if isinstance(base, NetworkLocator):
            raise InvalidReference(f"Relative file: URI {reference!r} has no local base in {base}")
        return base.join(local)
    return base.join(reference)


def _check_reference(reference: str) -> None:
    """Raise :class:`InvalidReference` unless *reference* is usable."""

    if not reference or not reference.strip():
        raise InvalidReference("Empty include reference")
    if any(char in reference for char in ("\x00", "\n", "\r")):
        raise InvalidReference(f"Include reference contains control characters: {reference!r}")
    schemed = _SCHEMED.match(reference)
    if schemed is None:
        return
    scheme = schemed.group(1).lower()
    if scheme == FILE_SCHEME:
        return
    if scheme not in NETWORK_SCHEMES:
        raise InvalidReference(f"Unsupported scheme {scheme!r} in include reference {reference!r}")
    if not urlsplit(reference).netloc:
        raise InvalidReference(f"Network reference without host: {reference!r}")
