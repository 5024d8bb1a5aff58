"""OTel log-record exporter that writes Cloud Logging entries.

Provides :class:`CloudLogRecordExporter`, which plugs a
:class:`~cloudlog.handler.CloudHandler` into an OpenTelemetry
``LoggerProvider`` so records emitted through the OTel logs API come out
in the same JSON format as everything else.
"""

import logging
import time
from collections.abc import Sequence

from opentelemetry import trace
from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

from .attributes import to_attrs
from .handler import CloudHandler
from .record import Record
from .severity import level_from_severity_number

logger = logging.getLogger("cloudlog.exporters")


class CloudLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that renders records through a CloudHandler.

    Severity numbers are mapped onto the ``logging`` scale before the
    handler's level gate applies. The record's own trace and span ids are
    used for trace correlation.

    Example:
        >>> exporter = CloudLogRecordExporter(CloudHandler(StreamSink(), project_id="p"))
        >>> provider = LoggerProvider()
        >>> provider.add_log_record_processor(SimpleLogRecordProcessor(exporter))
    """

    def __init__(self, handler: CloudHandler):
        self._handler = handler
        self._shutdown = False

    @property
    def handler(self) -> CloudHandler:
        return self._handler

    def to_record(self, log_record) -> Record:
        """Convert an OTel ``LogRecord`` into a cloudlog :class:`Record`."""
        if log_record.severity_number is not None:
            level = level_from_severity_number(log_record.severity_number.value)
        else:
            level = logging.INFO

        body = log_record.body
        return Record(
            level=level,
            message=body if isinstance(body, str) else ("" if body is None else str(body)),
            attrs=to_attrs(dict(log_record.attributes or {})),
            time_ns=log_record.timestamp or log_record.observed_timestamp or time.time_ns(),
        )

    @staticmethod
    def span_context_of(log_record):
        """OTel context holding a non-recording span for the record's ids, if any."""
        trace_id = getattr(log_record, "trace_id", None) or 0
        span_id = getattr(log_record, "span_id", None) or 0
        if not trace_id or not span_id:
            return None
        span_context = SpanContext(
            trace_id=trace_id,
            span_id=span_id,
            is_remote=False,
            trace_flags=TraceFlags(getattr(log_record, "trace_flags", None) or 0),
        )
        return trace.set_span_in_context(NonRecordingSpan(span_context))

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """
        Export a batch of log records through the handler.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success,
            LogRecordExportResult.FAILURE on error.
        """
        if self._shutdown:
            return LogRecordExportResult.FAILURE
        try:
            for readable_record in batch:
                record = readable_record.log_record
                context = self.span_context_of(record)
                if context is None:
                    # Never fall back to the exporting thread's active span.
                    context = trace.set_span_in_context(trace.INVALID_SPAN)
                self._handler.handle(self.to_record(record), context)
            return LogRecordExportResult.SUCCESS
        except Exception:
            logger.debug("export failed", exc_info=True)
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """Stop accepting records."""
        self._shutdown = True

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """
        Force flush any buffered data.

        Records are written synchronously, so there is nothing to flush.
        """
        return True
