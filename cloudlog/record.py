"""Input and output record types.

:class:`Record` is what a logging frontend hands to
:meth:`cloudlog.handler.CloudHandler.handle`; :class:`RenderedRecord` is
the finished Cloud Logging entry passed on to a sink.
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from types import FrameType
from typing import Any

from .attributes import Attr
from .trace import TraceInfo

CLOUD_LOGGING_KEY_PREFIX = "logging.googleapis.com/"
SOURCE_LOCATION_KEY = CLOUD_LOGGING_KEY_PREFIX + "sourceLocation"

# Prefix for top-level attributes whose key is one of the entry's own fields.
RESERVED_ATTR_PREFIX = "attrs."

TIME_KEY = "time"
SEVERITY_KEY = "severity"
MESSAGE_KEY = "msg"

logger = logging.getLogger("cloudlog.record")


@dataclass(frozen=True)
class SourceLocation:
    """File, line and function of the call site."""

    file: str
    line: int
    function: str

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> "SourceLocation | None":
        """Build from a Python frame. ``None`` when no frame is available."""
        if frame is None:
            return None
        code = frame.f_code
        return cls(file=code.co_filename, line=frame.f_lineno, function=code.co_qualname)

    @classmethod
    def of_caller(cls, depth: int = 1) -> "SourceLocation | None":
        """Source location ``depth`` frames above the caller of this method."""
        try:
            frame = sys._getframe(depth + 1)
        except ValueError:
            return None
        return cls.from_frame(frame)

    def is_valid(self) -> bool:
        return bool(self.file) and self.line > 0

    def as_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "function": self.function}


@dataclass(frozen=True)
class Record:
    """
    A log call as seen by the handler.

    Attributes:
        level: Numeric level on the ``logging`` scale.
        message: Log message.
        attrs: Record-local attributes, in call order.
        time_ns: Creation time in nanoseconds since the epoch.
        source: Call site, if the frontend resolved one.
    """

    level: int
    message: str
    attrs: tuple[Attr, ...] = ()
    time_ns: int = field(default_factory=time.time_ns)
    source: SourceLocation | None = None


@dataclass(frozen=True)
class RenderedRecord:
    """One Cloud Logging entry, ready to be serialized."""

    severity: str
    time: str
    message: str
    attributes: dict[str, Any]
    source_location: SourceLocation | None = None
    trace: TraceInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        Flatten into the JSON object written by sinks.

        Reserved keys come first. A top-level attribute with the same name
        as one of them is kept under ``attrs.<key>``, as is any
        attribute in the ``logging.googleapis.com/`` namespace.
        """
        data: dict[str, Any] = {
            TIME_KEY: self.time,
            SEVERITY_KEY: self.severity,
            MESSAGE_KEY: self.message,
        }
        if self.source_location is not None:
            data[SOURCE_LOCATION_KEY] = self.source_location.as_dict()
        if self.trace is not None:
            data.update(self.trace.as_fields())

        reserved = {TIME_KEY, SEVERITY_KEY, MESSAGE_KEY}
        for key, value in self.attributes.items():
            if key in reserved or key.startswith(CLOUD_LOGGING_KEY_PREFIX):
                logger.debug("attribute %r clashes with a reserved key; renamed", key)
                key = RESERVED_ATTR_PREFIX + key
            data[key] = value
        return data
