"""Google Cloud Logging handler.

:class:`CloudHandler` turns :class:`~cloudlog.record.Record` instances into
Cloud Logging entries. It is an immutable value: :meth:`with_attrs` and
:meth:`with_group` return new handlers and never touch the receiver, so
derived handlers can be shared freely across threads. The sink is the only
shared mutable piece and is responsible for serializing its own writes.
"""

import copy
import logging
from dataclasses import dataclass, replace
from typing import Any, Protocol

from opentelemetry.context import Context

from .attributes import Attr, AttributeTree, format_time_ns, to_attrs
from .errors import CloudLogError, SinkWriteError
from .record import Record, RenderedRecord
from .severity import severity_of
from .trace import format_trace


class Sink(Protocol):
    """Destination for rendered records."""

    def write(self, record: RenderedRecord) -> None: ...


@dataclass(frozen=True)
class HandlerOptions:
    """
    Handler configuration.

    Attributes:
        level: Minimum ``logging`` level; lower records are dropped.
        add_source: Attach ``logging.googleapis.com/sourceLocation``.
        add_trace_info: Attach trace and span ids from the active span.
        project_id: Google Cloud project used to qualify trace ids.
    """

    level: int = logging.INFO
    add_source: bool = False
    add_trace_info: bool = True
    project_id: str = ""

    def child(self, **overrides: Any) -> "HandlerOptions":
        """Derive options, inheriting values for unspecified fields."""
        return replace(self, **overrides)


@dataclass(frozen=True)
class AttrScope:
    """Persistent attributes together with the group path they were attached under."""

    path: tuple[str, ...]
    attrs: tuple[Attr, ...]


class CloudHandler:
    """
    Render records as Cloud Logging structured entries.

    Example:
        >>> handler = CloudHandler(StreamSink(), project_id="my-project")
        >>> req = handler.with_group("request").with_attrs({"method": "GET"})
        >>> req.handle(Record(logging.INFO, "served", to_attrs(status=200)))

    The entry above carries ``{"request": {"method": "GET", "status": 200}}``.
    """

    def __init__(self, sink: Sink, options: HandlerOptions | None = None, **overrides: Any):
        """
        Args:
            sink: Where rendered records go.
            options: Base options; defaults to ``HandlerOptions()``.
            **overrides: ``HandlerOptions`` fields applied on top of ``options``.
        """
        options = options or HandlerOptions()
        self._options = options.child(**overrides) if overrides else options
        self._sink = sink
        self._scopes: tuple[AttrScope, ...] = ()
        self._groups: tuple[str, ...] = ()

    @property
    def options(self) -> HandlerOptions:
        return self._options

    @property
    def sink(self) -> Sink:
        return self._sink

    @property
    def groups(self) -> tuple[str, ...]:
        return self._groups

    @property
    def scopes(self) -> tuple[AttrScope, ...]:
        return self._scopes

    def enabled(self, level: int) -> bool:
        return level >= self._options.level

    def with_attrs(self, attrs: Any = None, /, **kwargs: Any) -> "CloudHandler":
        """
        Return a handler that adds ``attrs`` to every record.

        The attributes are placed at the current group path. Accepts a
        mapping, an iterable of :class:`Attr` and/or keywords. With nothing
        to add, ``self`` is returned.
        """
        new_attrs = to_attrs(attrs, **kwargs)
        if not new_attrs:
            return self
        h2 = copy.copy(self)
        h2._scopes = self._scopes + (AttrScope(self._groups, new_attrs),)
        return h2

    def with_group(self, name: str) -> "CloudHandler":
        """
        Return a handler that nests all later attributes under ``name``.

        An empty name returns ``self``.
        """
        if not name:
            return self
        h2 = copy.copy(self)
        h2._groups = self._groups + (name,)
        return h2

    def render(self, record: Record, context: Context | None = None) -> RenderedRecord:
        """Build the Cloud Logging entry for ``record`` without writing it."""
        source = None
        if self._options.add_source and record.source is not None and record.source.is_valid():
            source = record.source

        trace_info = None
        if self._options.add_trace_info:
            trace_info = format_trace(context, self._options.project_id)

        tree = AttributeTree()
        for scope in self._scopes:
            tree.insert(scope.path, scope.attrs)
        tree.insert(self._groups, record.attrs)

        return RenderedRecord(
            severity=severity_of(record.level),
            time=format_time_ns(record.time_ns),
            message=record.message,
            attributes=tree.as_dict(),
            source_location=source,
            trace=trace_info,
        )

    def handle(self, record: Record, context: Context | None = None) -> None:
        """
        Render ``record`` and write it to the sink.

        Records below the configured level are dropped without side effects.

        Args:
            record: The log call to render.
            context: OTel context holding the active span; ``None`` means
                the current context.

        Raises:
            SinkWriteError: The sink failed; the write is not retried.
        """
        if not self.enabled(record.level):
            return

        rendered = self.render(record, context)
        try:
            self._sink.write(rendered)
        except CloudLogError:
            raise
        except Exception as e:
            raise SinkWriteError(self._sink, rendered, e) from e

    def __repr__(self) -> str:
        return (
            f"CloudHandler(sink={self._sink!r}, options={self._options!r}, "
            f"groups={self._groups!r}, scopes={len(self._scopes)})"
        )
