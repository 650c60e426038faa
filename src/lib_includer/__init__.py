"""Public package surface for the include-directive preprocessor.

``open_includer`` returns a lazy line iterator over a file or URL with every
``%include "reference"`` directive expanded in place; ``preprocess`` writes the
flattened result to a temporary file. The logging helpers are re-exported so
host applications can attach handlers and bind trace identifiers.
"""

from __future__ import annotations

from .core import (
    DEFAULT_INCLUDE_PATTERN,
    DEFAULT_MAX_NESTING,
    Address,
    ConfigurationError,
    IncludeError,
    IncludeMatcher,
    IncludeProcessor,
    IncluderSettings,
    IncludeSource,
    InvalidReference,
    LocalPath,
    NestingLimitExceeded,
    NetworkLocator,
    NoLineAvailable,
    OpenError,
    ProcessorState,
    ReadError,
    open_includer,
    preprocess,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "Address",
    "ConfigurationError",
    "DEFAULT_INCLUDE_PATTERN",
    "DEFAULT_MAX_NESTING",
    "IncludeError",
    "IncludeMatcher",
    "IncludeProcessor",
    "IncludeSource",
    "IncluderSettings",
    "InvalidReference",
    "LocalPath",
    "NestingLimitExceeded",
    "NetworkLocator",
    "NoLineAvailable",
    "OpenError",
    "ProcessorState",
    "ReadError",
    "bind_trace_id",
    "get_logger",
    "open_includer",
    "preprocess",
]
