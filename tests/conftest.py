"""Shared test fixtures for cloudlog tests."""

import io
import json

import pytest
from opentelemetry import trace
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

from cloudlog import CloudHandler, StreamSink

TRACE_ID_HEX = "01020304050607080102030405060708"
SPAN_ID_HEX = "0102030405060708"


class Output:
    """StringIO-backed sink with helpers to read back JSON lines."""

    def __init__(self):
        self.stream = io.StringIO()
        self.sink = StreamSink(self.stream)

    def lines(self) -> list[str]:
        return self.stream.getvalue().splitlines()

    def entries(self) -> list[dict]:
        return [json.loads(line) for line in self.lines()]

    def last(self) -> dict:
        entries = self.entries()
        assert entries, "nothing was written"
        return entries[-1]


@pytest.fixture
def output():
    return Output()


@pytest.fixture
def make_handler(output):
    """Factory for handlers writing to the ``output`` fixture."""

    def _make(**options) -> CloudHandler:
        return CloudHandler(output.sink, **options)

    return _make


@pytest.fixture
def span_context():
    """OTel context carrying a valid, sampled span with fixed ids."""
    span = NonRecordingSpan(
        SpanContext(
            trace_id=int(TRACE_ID_HEX, 16),
            span_id=int(SPAN_ID_HEX, 16),
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED),
        )
    )
    return trace.set_span_in_context(span)


@pytest.fixture
def no_span_context():
    """OTel context whose active span is invalid."""
    return trace.set_span_in_context(trace.INVALID_SPAN)
