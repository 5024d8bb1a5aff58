"""Structured logger wrapper.

Provides :class:`Logger` — a thin front end over :class:`CloudHandler`
with convenience ``info``/``debug``/``warning``/``error`` methods taking
keyword attributes, plus the two scoped derivations ``with_attrs`` and
``with_group``.
"""

import logging
import time
from typing import Any

from opentelemetry.context import Context

from .attributes import to_attrs
from .handler import CloudHandler
from .record import Record, SourceLocation


class Logger:
    """Thin wrapper for CloudHandler with convenient emit methods.

    Example:
        >>> log = Logger(CloudHandler(StreamSink(), project_id="my-project"))
        >>> log.info("Connection established", peer_id="abc123")
        >>>
        >>> conn = log.with_group("conn").with_attrs(id="ab12cd34")
        >>> conn.warning("slow peer", rtt_ms=812)
    """

    def __init__(self, handler: CloudHandler, context: Context | None = None):
        """
        Args:
            handler: Handler that renders and writes records.
            context: OTel context to read the active span from; ``None``
                means the current context at each call.
        """
        self._handler = handler
        self._context = context

    @property
    def handler(self) -> CloudHandler:
        return self._handler

    def enabled(self, level: int) -> bool:
        return self._handler.enabled(level)

    def debug(self, message: str, /, **attrs: Any) -> None:
        """Emit DEBUG level log."""
        self._emit(logging.DEBUG, message, attrs)

    def info(self, message: str, /, **attrs: Any) -> None:
        """Emit INFO level log."""
        self._emit(logging.INFO, message, attrs)

    def warning(self, message: str, /, **attrs: Any) -> None:
        """Emit WARNING level log."""
        self._emit(logging.WARNING, message, attrs)

    def error(self, message: str, /, **attrs: Any) -> None:
        """Emit ERROR level log."""
        self._emit(logging.ERROR, message, attrs)

    def log(self, level: int, message: str, /, **attrs: Any) -> None:
        """Emit a log at an arbitrary numeric ``level``."""
        self._emit(level, message, attrs)

    def with_attrs(self, attrs: Any = None, /, **kwargs: Any) -> "Logger":
        """Derive a logger whose records all carry ``attrs``."""
        handler = self._handler.with_attrs(attrs, **kwargs)
        return self if handler is self._handler else Logger(handler, self._context)

    def with_group(self, name: str) -> "Logger":
        """Derive a logger that nests later attributes under ``name``."""
        handler = self._handler.with_group(name)
        return self if handler is self._handler else Logger(handler, self._context)

    def with_context(self, context: Context | None) -> "Logger":
        """Derive a logger that reads trace ids from ``context`` instead of the current one."""
        return Logger(self._handler, context)

    def _emit(self, level: int, message: str, attrs: dict) -> None:
        """Build a record and pass it to the handler.

        Args:
            level: Numeric log level.
            message: Log message.
            attrs: Record-local attributes.

        Raises:
            SinkWriteError: Propagated from the handler.
        """
        if not self._handler.enabled(level):
            return
        source = None
        if self._handler.options.add_source:
            # _emit <- debug/info/... <- call site
            source = SourceLocation.of_caller(depth=2)
        record = Record(
            level=level,
            message=message,
            attrs=to_attrs(attrs),
            time_ns=time.time_ns(),
            source=source,
        )
        self._handler.handle(record, self._context)
