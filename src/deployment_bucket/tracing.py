"""OpenTelemetry spans around reconciliation steps, off unless OTEL_TRACES_ENABLED=true."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Tracer

from .constants import CONTROLLER_NAME

logger = logging.getLogger(__name__)

_tracer: Tracer | None = None


def initialize_tracing(service_name: str = CONTROLLER_NAME) -> None:
    """Install an OTLP/gRPC exporting tracer provider.

    Reads OTEL_SERVICE_NAME and OTEL_EXPORTER_OTLP_ENDPOINT (default
    http://localhost:4317). Setup failures are logged and leave tracing off.
    """
    global _tracer

    if os.getenv("OTEL_TRACES_ENABLED", "false").lower() != "true":
        return

    from . import __version__

    name = os.getenv("OTEL_SERVICE_NAME", service_name)
    try:
        provider = TracerProvider(
            resource=Resource.create({"service.name": name, "service.version": __version__})
        )
        exporter = OTLPSpanExporter(endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
    except Exception as e:
        logger.warning(f"Tracing disabled, setup failed: {e}")
        return

    _tracer = trace.get_tracer(name)


@contextmanager
def trace_span(name: str, attributes: dict[str, Any] | None = None) -> Iterator[None]:
    """Run the enclosed block inside a span named ``name``.

    A no-op while no tracer is installed. Exceptions leaving the block are
    recorded on the span by OpenTelemetry and propagate unchanged.
    """
    if _tracer is None:
        yield
        return

    with _tracer.start_as_current_span(name, attributes=attributes or {}):
        yield


def set_span_status(ok: bool, description: str | None = None) -> None:
    span = trace.get_current_span()
    if not span.is_recording():
        return
    if ok:
        span.set_status(trace.Status(trace.StatusCode.OK))
    else:
        span.set_status(trace.Status(trace.StatusCode.ERROR, description))
