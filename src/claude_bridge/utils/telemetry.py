"""OpenTelemetry tracing helpers for claude-bridge.

Provides a thin wrapper around the OpenTelemetry API so the rest of the
codebase can call ``get_tracer()`` without caring whether the SDK is
installed.  When the SDK is *not* configured the API returns no-op
implementations.

Usage::

    from claude_bridge.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("my.operation") as span:
        span.set_attribute("key", "value")

To activate real tracing, call :func:`configure_telemetry` once at startup
(requires the ``otel`` extra: ``pip install claude-bridge[otel]``).
"""

from __future__ import annotations

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys used by the completion handler
# ---------------------------------------------------------------------------

ATTR_MODEL = "claude_bridge.model"
ATTR_PROVIDER = "claude_bridge.provider"
ATTR_STREAM = "claude_bridge.stream"
ATTR_TOOL_CHOICE = "claude_bridge.tool_choice"
ATTR_MESSAGE_COUNT = "claude_bridge.messages"
ATTR_TOKENS_PROMPT = "claude_bridge.tokens.prompt"
ATTR_TOKENS_COMPLETION = "claude_bridge.tokens.completion"
ATTR_TOKENS_TOTAL = "claude_bridge.tokens.total"
ATTR_FINISH_REASON = "claude_bridge.finish_reason"

_INSTRUMENTATION_NAME = "claude_bridge"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(*, service_name: str = "claude-bridge") -> None:
    """Export completion spans as JSON to stdout (requires ``claude-bridge[otel]``).

    Used by ``claude-bridge complete --telemetry``.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install claude-bridge[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    provider = TracerProvider(resource=resource)  # pyright: ignore[reportUnknownVariableType]
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))  # pyright: ignore[reportUnknownMemberType]
    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]
