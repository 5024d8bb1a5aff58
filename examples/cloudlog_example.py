import logging

from opentelemetry.sdk.trace import TracerProvider
from reactivex import operators as ops

from cloudlog import Attr, CloudHandler, Group, Logger, StreamSink, SubjectSink, configure_logging

# this example prints Cloud Logging JSON lines to stdout, the way Cloud Run expects them.


def structured():
    log = Logger(CloudHandler(StreamSink(), project_id="my-project", add_source=True))

    tracer = TracerProvider().get_tracer("example")
    with tracer.start_as_current_span("handle-request"):
        req = log.with_attrs(service="api").with_group("request")
        req.with_attrs(method="GET", path="/users").info("served", status=200)
        req.warning("slow", upstream=Group(Attr("host", "db"), latency_ms=812))


def stdlib():
    configure_logging(project_id="my-project")
    logging.getLogger("example").info("hello from %s", "logging", extra={"user": "alice"})


def reactive():
    sink = SubjectSink()
    sink.pipe(ops.filter(lambda r: r.severity == "ERROR")).subscribe(lambda r: print("ALERT:", r.message))

    log = Logger(CloudHandler(sink))
    log.info("ignored")
    log.error("disk full", mount="/var")


if __name__ == "__main__":
    structured()
    stdlib()
    reactive()
