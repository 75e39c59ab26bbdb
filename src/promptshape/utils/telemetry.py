"""OpenTelemetry tracing helpers for promptshape.

Provides a thin wrapper around the OpenTelemetry API so the converters can
call ``get_tracer()`` without caring whether the SDK is installed. Without a
configured SDK the API hands out no-op tracers.

Usage::

    from promptshape.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("promptshape.build_request") as span:
        span.set_attribute(ATTR_FORMAT, "google")

To export spans, call :func:`configure_telemetry` once at startup
(requires the ``otel`` extra: ``pip install promptshape[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_MODEL = "promptshape.model"
ATTR_FORMAT = "promptshape.format"
ATTR_MESSAGES_IN = "promptshape.messages.in"
ATTR_MESSAGES_OUT = "promptshape.messages.out"
ATTR_SYSTEM_PARTS = "promptshape.system.parts"
ATTR_TOOLS = "promptshape.tools"

_INSTRUMENTATION_NAME = "promptshape"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "promptshape",
    export_to_console: bool = True,
) -> None:
    """Configure OpenTelemetry tracing (requires ``promptshape[otel]``).

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import SimpleSpanProcessor  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install promptshape[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    trace.set_tracer_provider(provider)


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    """Attach the console exporter (JSON to stdout)."""
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter()))
