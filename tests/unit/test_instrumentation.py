"""Unit tests for the instrumentation module.

Tests use unittest.mock for OTel interactions.  ``opentelemetry-api``
is a test dependency so we can import ``SpanKind`` / ``StatusCode``
directly for assertion accuracy.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from opentelemetry.trace import SpanKind, StatusCode

import agentconsole.instrumentation as inst
from agentconsole.instrumentation import (
    invocation_span,
    record_error,
    record_stream_stats,
    uninstrument,
)


@pytest.fixture(autouse=True)
def _reset_tracer():
    """Ensure _tracer is reset to None before and after each test."""
    inst._tracer = None
    yield
    inst._tracer = None


# -------------------------------------------------------------------
# instrument()
# -------------------------------------------------------------------


class TestInstrument:
    def test_raises_without_otel_installed(self):
        with patch(
            "importlib.util.find_spec", return_value=None
        ):
            with pytest.raises(
                ImportError, match="pip install"
            ):
                inst.instrument()

    def _mock_otel(self, mock_trace):
        """Patch find_spec + sys.modules for a mock OTel env."""
        return (
            patch(
                "importlib.util.find_spec",
                return_value=MagicMock(),
            ),
            patch.dict(
                "sys.modules",
                {
                    "opentelemetry": MagicMock(
                        trace=mock_trace
                    ),
                    "opentelemetry.trace": mock_trace,
                },
            ),
        )

    def test_sets_global_tracer(self):
        mock_tracer = MagicMock()
        mock_trace = MagicMock()
        mock_trace.get_tracer.return_value = mock_tracer
        mock_trace.NoOpTracer = type("NoOpTracer", (), {})

        p1, p2 = self._mock_otel(mock_trace)
        with p1, p2:
            inst.instrument()

        assert inst._tracer is mock_tracer
        mock_trace.get_tracer.assert_called_once_with(
            "agentconsole"
        )

    def test_logs_message_for_noop_tracer(self, caplog):
        NoOpTracer = type("NoOpTracer", (), {})
        mock_trace = MagicMock()
        mock_trace.get_tracer.return_value = NoOpTracer()
        mock_trace.NoOpTracer = NoOpTracer

        p1, p2 = self._mock_otel(mock_trace)
        with p1, p2:
            with caplog.at_level(
                logging.INFO,
                logger="agentconsole.instrumentation",
            ):
                inst.instrument()

        assert any(
            "No TracerProvider configured" in r.message
            for r in caplog.records
        )


class TestUninstrument:
    def test_clears_tracer(self):
        inst._tracer = MagicMock()
        uninstrument()
        assert inst._tracer is None


# -------------------------------------------------------------------
# invocation_span
# -------------------------------------------------------------------


class TestInvocationSpan:
    @pytest.mark.asyncio
    async def test_yields_none_without_tracer(self):
        async with invocation_span("http://agent/invocations") as s:
            assert s is None

    @pytest.mark.asyncio
    async def test_creates_client_span(self):
        mock_span = MagicMock()
        mock_tracer = MagicMock()
        mock_tracer.start_as_current_span.return_value.__enter__ = (
            MagicMock(return_value=mock_span)
        )
        mock_tracer.start_as_current_span.return_value.__exit__ = (
            MagicMock(return_value=False)
        )
        inst._tracer = mock_tracer

        async with invocation_span("http://agent/invocations") as s:
            assert s is mock_span

        mock_tracer.start_as_current_span.assert_called_once_with(
            "invoke_agent",
            kind=SpanKind.CLIENT,
            attributes={
                "gen_ai.operation.name": "invoke_agent",
                "server.address": "http://agent/invocations",
            },
        )


# -------------------------------------------------------------------
# record_stream_stats / record_error
# -------------------------------------------------------------------


class TestRecordStreamStats:
    def test_noop_on_none_span(self):
        record_stream_stats(None, MagicMock())  # should not raise

    def test_sets_record_counts(self):
        span = MagicMock()
        parser = MagicMock(records_decoded=7, records_skipped=2)
        record_stream_stats(span, parser)

        span.set_attribute.assert_any_call(
            "agentconsole.records.decoded", 7
        )
        span.set_attribute.assert_any_call(
            "agentconsole.records.skipped", 2
        )


class TestRecordError:
    def test_sets_status_and_records_exception(self):
        span = MagicMock()
        exc = RuntimeError("boom")
        record_error(span, exc)

        span.set_status.assert_called_once_with(
            StatusCode.ERROR, "boom"
        )
        span.record_exception.assert_called_once_with(exc)
        span.set_attribute.assert_called_once_with(
            "error.type", "RuntimeError"
        )

    def test_noop_on_none_span(self):
        record_error(None, RuntimeError("boom"))  # no raise
