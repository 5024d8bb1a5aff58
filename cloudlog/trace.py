"""Trace correlation fields for Cloud Logging.

Cloud Logging links a log entry to a trace through two special fields:
``logging.googleapis.com/trace`` (project-qualified trace resource name)
and ``logging.googleapis.com/spanId`` (bare span id). The span id is never
project-qualified.
"""

from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.context import Context

TRACE_KEY = "logging.googleapis.com/trace"
SPAN_ID_KEY = "logging.googleapis.com/spanId"


@dataclass(frozen=True)
class TraceInfo:
    """Rendered trace and span identifiers for one log entry."""

    trace: str
    span_id: str

    def as_fields(self) -> dict[str, str]:
        return {TRACE_KEY: self.trace, SPAN_ID_KEY: self.span_id}


def format_trace(context: Context | None, project_id: str = "") -> TraceInfo | None:
    """
    Extract the active span from ``context`` and render its identifiers.

    Args:
        context: OTel context to read the span from. ``None`` means the
            current context.
        project_id: Google Cloud project id. When non-empty the trace id is
            rendered as ``projects/<project_id>/traces/<hex>``.

    Returns:
        ``TraceInfo`` for a valid span, ``None`` otherwise.
    """
    span_context = trace.get_current_span(context).get_span_context()
    if not span_context.is_valid:
        return None

    trace_id = trace.format_trace_id(span_context.trace_id)
    if project_id:
        trace_id = f"projects/{project_id}/traces/{trace_id}"

    return TraceInfo(trace=trace_id, span_id=trace.format_span_id(span_context.span_id))
