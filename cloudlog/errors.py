"""Core error types for :mod:`cloudlog`."""

from typing import Any


class CloudLogError(Exception):
    """Base class for all cloudlog exceptions."""


class SinkWriteError(CloudLogError):
    """
    A sink failed to write a rendered record.

    Attributes:
        sink: The sink that failed.
        record: The :class:`~cloudlog.record.RenderedRecord` that was not written.
        exception: What the sink raised; also chained as ``__cause__``.
    """

    def __init__(self, sink: Any, record: Any, exception: Exception):
        super().__init__(sink, record, exception)
        self.sink = sink
        self.record = record
        self.exception = exception

    def __str__(self) -> str:
        message = getattr(self.record, "message", "")
        return f"{type(self.sink).__name__} failed to write {message!r}: {self.exception}"
