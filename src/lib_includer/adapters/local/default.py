"""Filesystem adapter implementing :class:`lib_includer.application.ports.LocalReader`."""

from __future__ import annotations

from typing import BinaryIO

from ...observability import log_debug


class FileSystemReader:
    """Open local files for binary reading.

    Errors (``FileNotFoundError``, ``PermissionError``, ``IsADirectoryError``)
    propagate as :class:`OSError`; the source opener owns the translation into
    the domain taxonomy.

    Examples
    --------
    >>> from tempfile import NamedTemporaryFile
    >>> from pathlib import Path
    >>> tmp = NamedTemporaryFile(delete=False)
    >>> _ = tmp.write(b"hello")
    >>> tmp.close()
    >>> with FileSystemReader().open(tmp.name) as stream:
    ...     stream.read()
    b'hello'
    >>> Path(tmp.name).unlink()
    """

    def open(self, path: str) -> BinaryIO:
        stream = open(path, "rb")
        log_debug("local_file_opened", kind="local", address=path)
        return stream
