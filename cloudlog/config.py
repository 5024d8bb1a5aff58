"""Handler configuration helpers.

Provides :func:`configure_logging` (wire a :class:`CloudHandler` into the
standard library ``logging`` tree) and :func:`get_default_handler` (lazy
singleton writing to stdout).
"""

import logging

from .bridge import CloudLoggingHandler
from .handler import CloudHandler, HandlerOptions, Sink
from .sinks import StreamSink


def configure_logging(
    sink: Sink | None = None,
    *,
    level: int = logging.INFO,
    add_source: bool = False,
    add_trace_info: bool = True,
    project_id: str = "",
    logger: logging.Logger | None = None,
) -> CloudHandler:
    """
    Route a stdlib logger (the root logger by default) through Cloud Logging JSON.

    Existing handlers on the logger are removed, a
    :class:`CloudLoggingHandler` is installed and the logger level is set
    to ``level``.

    Args:
        sink: Destination for rendered records. Defaults to stdout.
        level: Minimum level to emit.
        add_source: Attach source locations.
        add_trace_info: Attach trace/span ids from the active OTel span.
        project_id: Google Cloud project id used to qualify trace ids.
        logger: Logger to configure; the root logger when ``None``.

    Returns:
        The root :class:`CloudHandler`, for deriving structured loggers.

    Example:
        >>> handler = configure_logging(project_id="my-project", add_source=True)
        >>> logging.getLogger("app").info("ready", extra={"port": 8080})
    """
    options = HandlerOptions(
        level=level,
        add_source=add_source,
        add_trace_info=add_trace_info,
        project_id=project_id,
    )
    handler = CloudHandler(sink if sink is not None else StreamSink(), options)

    target = logger if logger is not None else logging.getLogger()
    for existing in target.handlers[:]:
        target.removeHandler(existing)
    target.addHandler(CloudLoggingHandler(handler))
    target.setLevel(level)

    return handler


# =============================================================================
# Default Handler
# =============================================================================


_default_handler: CloudHandler | None = None


def get_default_handler() -> CloudHandler:
    """Get or create the default handler.

    Lazily initializes a handler writing to stdout with default options on
    first call. Returns the same handler on subsequent calls.

    Example:
        >>> log = Logger(get_default_handler())
        >>> log.info("started")
    """
    global _default_handler

    if _default_handler is None:
        _default_handler = CloudHandler(StreamSink())

    return _default_handler
