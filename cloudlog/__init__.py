"""Convenience exports for the :mod:`cloudlog` package."""

from .attributes import (  # noqa: F401
    Attr,
    AttributeTree,
    Group,
    Lazy,
    LogValuer,
    convert_value,
    format_duration,
    format_time,
    group,
    merge,
    to_attrs,
)
from .bridge import CloudLoggingHandler  # noqa: F401
from .config import configure_logging, get_default_handler  # noqa: F401
from .errors import CloudLogError, SinkWriteError  # noqa: F401
from .exporters import CloudLogRecordExporter  # noqa: F401
from .handler import AttrScope, CloudHandler, HandlerOptions, Sink  # noqa: F401
from .logger import Logger  # noqa: F401
from .record import Record, RenderedRecord, SourceLocation  # noqa: F401
from .severity import severity_of  # noqa: F401
from .sinks import FileSink, StreamSink, SubjectSink, format_record_json  # noqa: F401
from .trace import TraceInfo, format_trace  # noqa: F401

__all__ = [
    "CloudLogError",
    "SinkWriteError",

    # attributes
    "Attr",
    "Group",
    "Lazy",
    "LogValuer",
    "group",
    "to_attrs",
    "AttributeTree",
    "merge",
    "convert_value",
    "format_duration",
    "format_time",

    # mapping
    "severity_of",
    "TraceInfo",
    "format_trace",

    # handler
    "HandlerOptions",
    "AttrScope",
    "CloudHandler",
    "Sink",
    "Record",
    "RenderedRecord",
    "SourceLocation",

    # sinks
    "StreamSink",
    "FileSink",
    "SubjectSink",
    "format_record_json",

    # frontends
    "Logger",
    "CloudLoggingHandler",
    "CloudLogRecordExporter",

    # config
    "configure_logging",
    "get_default_handler",
]
