"""Bridge from the standard library ``logging`` module to :class:`CloudHandler`."""

import logging

from .attributes import Attr
from .handler import CloudHandler
from .record import Record, SourceLocation

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}

_default_formatter = logging.Formatter()


class CloudLoggingHandler(logging.Handler):
    """
    ``logging.Handler`` that renders records through a :class:`CloudHandler`.

    - ``extra=`` fields become record attributes, in the order given.
    - ``exc_info`` and ``stack_info`` are attached as ``exception`` and
      ``stack`` attributes.
    - ``pathname``/``lineno``/``funcName`` feed the source location when the
      wrapped handler has ``add_source`` enabled.

    Records emitted by cloudlog's own loggers are ignored. Write failures
    are reported through :meth:`logging.Handler.handleError`, as with any
    stdlib handler.
    """

    def __init__(self, cloud_handler: CloudHandler, level: int = logging.NOTSET):
        super().__init__(level)
        self.cloud_handler = cloud_handler

    def to_record(self, record: logging.LogRecord) -> Record:
        """Convert a stdlib ``LogRecord`` into a cloudlog :class:`Record`."""
        attrs = [
            Attr(key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        ]

        formatter = self.formatter or _default_formatter
        if record.exc_info and record.exc_info[0] is not None:
            attrs.append(Attr("exception", formatter.formatException(record.exc_info)))
        elif record.exc_text:
            attrs.append(Attr("exception", record.exc_text))
        if record.stack_info:
            attrs.append(Attr("stack", formatter.formatStack(record.stack_info)))

        source = None
        if record.pathname and record.lineno:
            source = SourceLocation(file=record.pathname, line=record.lineno, function=record.funcName or "")

        return Record(
            level=record.levelno,
            message=record.getMessage(),
            attrs=tuple(attrs),
            time_ns=int(record.created * 1_000_000_000),
            source=source,
        )

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "cloudlog" or record.name.startswith("cloudlog."):
            return
        try:
            self.cloud_handler.handle(self.to_record(record))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
