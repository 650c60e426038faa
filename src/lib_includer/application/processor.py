"""Pull-based include expansion over a stack of open sources.

Purpose
-------
Present a root source and everything it (recursively) includes as one ordered,
lazy sequence of lines. Directive lines are replaced by the expanded content of
their targets, depth-first, exactly where they appear.

Contents
--------
* :class:`ProcessorState` – lifecycle states.
* :class:`IncludeProcessor` – the stack machine.

System Role
-----------
The processor depends only on ports: a :class:`SourceOpener` to open resolved
addresses and the :class:`LineSource` surface of every frame. Adapters are
wired by :mod:`lib_includer.core`.

Warning
-------
Instances are stateful and not thread-safe; do not share one across threads.
"""

from __future__ import annotations

import enum
from types import TracebackType
from typing import Iterator, Optional, Type

from ..domain.errors import IncludeError, NestingLimitExceeded, NoLineAvailable
from ..domain.matcher import IncludeMatcher
from ..domain.settings import DEFAULT_MAX_NESTING
from ..observability import log_debug, log_error, make_event
from .ports import LineSource, SourceOpener
from .resolver import resolve


class ProcessorState(enum.Enum):
    READY = "ready"
    READING = "reading"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class IncludeProcessor:
    """Flatten a root source and its includes into a single line iterator.

    Why
    ----
    Callers want included files to behave like one continuous text source
    without materialising anything up front.

    What
    ----
    Keeps a stack of open :class:`LineSource` frames (top = last element).
    Each pull reads from the top frame; include directives open a new frame
    instead of being emitted, exhausted frames are popped and closed.

    Parameters
    ----------
    root:
        Already-open root source. The processor takes ownership.
    opener:
        Opens resolved include addresses.
    matcher:
        Directive matcher; defaults to ``%include "reference"``.
    max_nesting:
        Maximum number of simultaneously open frames, root included.

    Examples
    --------
    >>> import io
    >>> from lib_includer.adapters.sources.default import SourceHandle
    >>> from lib_includer.domain.address import LocalPath
    >>> class MemoryOpener:
    ...     def open(self, address):
    ...         return SourceHandle(io.StringIO("middle\\n"), address)
    >>> root = SourceHandle(io.StringIO('start\\n%include "sub.txt"\\nend\\n'), LocalPath("root.txt"))
    >>> list(IncludeProcessor(root, MemoryOpener()))
    ['start', 'middle', 'end']
    """

    def __init__(
        self,
        root: LineSource,
        opener: SourceOpener,
        *,
        matcher: IncludeMatcher | None = None,
        max_nesting: int = DEFAULT_MAX_NESTING,
    ) -> None:
        self.opener = opener
        self.matcher = matcher or IncludeMatcher()
        self.max_nesting = max_nesting
        self._stack: list[LineSource] = [root]
        self._state = ProcessorState.READY

    @property
    def state(self) -> ProcessorState:
        return self._state

    @property
    def depth(self) -> int:
        """Number of frames currently open."""

        return len(self._stack)

    def has_next(self) -> bool:
        """Return ``True`` when some frame still holds an unread line.

        Searches from the root frame upward. Pure with respect to output: the
        peeked line stays in its frame.

        Note
        ----
        This reports raw lines. When the only lines left are directives whose
        targets are empty, ``has_next()`` is ``True`` yet :meth:`next_line`
        raises :class:`NoLineAvailable`. Plain iteration has no such gap.

        Raises
        ------
        ReadError
            When peeking fails; the processor is then ``FAILED`` and closed.
        """

        if self._state in (ProcessorState.EXHAUSTED, ProcessorState.FAILED):
            return False
        try:
            return any(frame.has_more() for frame in self._stack)
        except IncludeError as exc:
            self._fail(exc)
            raise

    def next_line(self) -> str:
        """Return the next flattened line.

        Raises
        ------
        NoLineAvailable
            When no line remains, or the processor already failed.
        InvalidReference / OpenError / ReadError / NestingLimitExceeded
            Fatal; every open frame is closed before the error propagates.
        """

        line = self._pull()
        if line is None:
            raise NoLineAvailable("No more data")
        return line

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self._pull()
        if line is None:
            raise StopIteration
        return line

    def close(self) -> None:
        """Close every open frame, most recent first."""

        while self._stack:
            self._stack.pop().close()
        if self._state is not ProcessorState.FAILED:
            self._state = ProcessorState.EXHAUSTED

    def __enter__(self) -> IncludeProcessor:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def _pull(self) -> str | None:
        if self._state is ProcessorState.FAILED:
            raise NoLineAvailable("Include processing failed earlier; no more data")
        if self._state is ProcessorState.EXHAUSTED:
            return None
        self._state = ProcessorState.READING
        try:
            return self._advance()
        except IncludeError as exc:
            self._fail(exc)
            raise

    def _advance(self) -> str | None:
        while self._stack:
            top = self._stack[-1]
            line = next(top, None)
            if line is None:
                self._stack.pop().close()
                continue
            reference = self.matcher.match(line)
            if reference is None:
                return line
            self._push_include(top, reference)
        self._state = ProcessorState.EXHAUSTED
        return None

    def _push_include(self, current: LineSource, reference: str) -> None:
        if len(self._stack) >= self.max_nesting:
            raise NestingLimitExceeded(self.max_nesting)
        target = resolve(current.address, reference)
        log_debug(
            "include_resolved",
            **make_event(target.kind, str(target), {"reference": reference, "depth": len(self._stack) + 1}),
        )
        self._stack.append(self.opener.open(target))

    def _fail(self, exc: IncludeError) -> None:
        address = str(self._stack[-1].address) if self._stack else None
        log_error("include_failed", **make_event("include", address, {"error": str(exc), "depth": len(self._stack)}))
        self._state = ProcessorState.FAILED
        while self._stack:
            self._stack.pop().close()
