"""Optional OpenTelemetry instrumentation for agentconsole.

Call ``agentconsole.instrument()`` once at startup to enable tracing.
Requires ``opentelemetry-api`` to be installed; the console works
identically without it.
"""

import importlib.util
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

_tracer = None


def instrument(*, tracer_name: str = "agentconsole") -> None:
    """Enable OpenTelemetry tracing for agent invocations.

    Call once at startup, after configuring your TracerProvider.
    Requires ``opentelemetry-api``: ``pip install agentconsole[otel]``

    Example::

        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider

        trace.set_tracer_provider(TracerProvider())

        import agentconsole
        agentconsole.instrument()

    Args:
        tracer_name: Name passed to ``trace.get_tracer()``.

    Raises:
        ImportError: If ``opentelemetry-api`` is not installed.
    """
    global _tracer
    if importlib.util.find_spec("opentelemetry.trace") is None:
        raise ImportError(
            "opentelemetry-api is required for instrumentation. "
            "Install it with: pip install agentconsole[otel]"
        )
    from opentelemetry import trace
    _tracer = trace.get_tracer(tracer_name)
    if isinstance(_tracer, trace.NoOpTracer):
        logger.info(
            "No TracerProvider configured, spans will be discarded."
        )
    else:
        logger.info("agentconsole instrumentation enabled")


def uninstrument() -> None:
    """Disable OpenTelemetry tracing."""
    global _tracer
    _tracer = None


@asynccontextmanager
async def invocation_span(endpoint: str):
    """Wrap one streamed agent invocation in an ``invoke_agent`` span."""
    if _tracer is None:
        yield None
        return
    from opentelemetry.trace import SpanKind

    with _tracer.start_as_current_span(
        "invoke_agent",
        kind=SpanKind.CLIENT,
        attributes={
            "gen_ai.operation.name": "invoke_agent",
            "server.address": endpoint,
        },
    ) as span:
        yield span


def record_stream_stats(span, parser) -> None:
    """Set decoded/skipped record counts from a parser on a span."""
    if span is None or parser is None:
        return
    span.set_attribute(
        "agentconsole.records.decoded", parser.records_decoded
    )
    span.set_attribute(
        "agentconsole.records.skipped", parser.records_skipped
    )


def record_error(span, exception: BaseException) -> None:
    """Record an exception and set ERROR status on a span.

    No-ops when *span* is ``None`` (tracing disabled).
    """
    if span is None:
        return
    from opentelemetry.trace import StatusCode

    span.set_status(StatusCode.ERROR, str(exception))
    span.record_exception(exception)
    span.set_attribute(
        "error.type", type(exception).__qualname__
    )
