"""Temporary-file adapter implementing :class:`lib_includer.application.ports.OutputSink`.

Purpose
-------
Create the durable resource the materializer writes to. Files persist until
removed; optional at-exit cleanup is a convenience, not a guarantee (it does
not run when the interpreter is killed).
"""

from __future__ import annotations

import atexit
import tempfile
from pathlib import Path
from typing import TextIO, Tuple, cast

from ...domain.settings import DEFAULT_ENCODING
from ...observability import log_debug

_PREFIX = "lib_includer-"


class TempFileSink:
    """Create named temporary text files.

    Examples
    --------
    >>> sink = TempFileSink(delete_on_exit=False)
    >>> path, writer = sink.create(".txt")
    >>> _ = writer.write("flat")
    >>> writer.close()
    >>> path.read_text(encoding="utf-8")
    'flat'
    >>> sink.discard(path)
    >>> path.exists()
    False
    """

    def __init__(
        self,
        *,
        directory: str | Path | None = None,
        encoding: str = DEFAULT_ENCODING,
        prefix: str = _PREFIX,
        delete_on_exit: bool = True,
    ) -> None:
        self.directory = str(directory) if directory is not None else None
        self.prefix = prefix
        self.encoding = encoding
        self.delete_on_exit = delete_on_exit

    def create(self, suffix: str = "", prefix: str | None = None) -> Tuple[Path, TextIO]:
        """Create a new file and return ``(path, writer)``; ``\\n`` is written untranslated.

        *prefix* overrides the sink-wide prefix for this file only.
        """

        handle = tempfile.NamedTemporaryFile(
            mode="w",
            encoding=self.encoding,
            newline="",
            prefix=self.prefix if prefix is None else prefix,
            suffix=suffix,
            dir=self.directory,
            delete=False,
        )
        path = Path(handle.name)
        if self.delete_on_exit:
            atexit.register(path.unlink, missing_ok=True)
        log_debug("output_created", kind="local", address=str(path), delete_on_exit=self.delete_on_exit)
        return path, cast(TextIO, handle)

    def discard(self, path: Path) -> None:
        path.unlink(missing_ok=True)
        log_debug("output_discarded", kind="local", address=str(path))
