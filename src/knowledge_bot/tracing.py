"""OpenTelemetry tracing helpers for the chat pipeline.

Each ``generate_response`` call produces one trace:

    chat-pipeline
      ├── translate
      ├── retrieve
      └── generate

Usage with an OTLP backend (e.g. Arize Phoenix):

    from knowledge_bot.tracing import configure_tracing

    configure_tracing(endpoint="http://localhost:6006/v1/traces", service_name="knowledge-bot")

Without ``configure_tracing`` the global no-op provider is used and spans are
discarded.
"""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter

# OpenInference semantic-convention attribute names
ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_LLM_MODEL_NAME = "llm.model_name"
ATTR_RETRIEVAL_DOCUMENTS = "retrieval.documents"
ATTR_RETRIEVAL_STRATEGY = "retrieval.strategy"

MAX_ATTRIBUTE_CHARS = 500

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "knowledge-bot",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register a global TracerProvider.

    Args:
        endpoint: OTLP HTTP endpoint URL. Ignored when *exporter* is given;
            when both are None spans go to stdout via ``ConsoleSpanExporter``.
        service_name: Service label shown by the observability backend.
        exporter: Pre-built exporter, e.g. ``InMemorySpanExporter`` in tests.

    Returns:
        The configured provider, also set as the global OTel provider.
    """
    global _provider

    resource = Resource(attributes={SERVICE_NAME: service_name})
    provider = TracerProvider(resource=resource)

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export "
                "traces to an OTLP endpoint.  Install it with:\n"
                "  pip install opentelemetry-exporter-otlp-proto-http"
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the provider set by :func:`configure_tracing`, or the global one."""
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)


@contextmanager
def traced_stage(tracer: trace.Tracer, name: str, **attributes: str | int | bool) -> Iterator[trace.Span]:
    """Run a pipeline stage inside a span.

    String attributes are truncated to ``MAX_ATTRIBUTE_CHARS``. Exceptions
    mark the span as ERROR and are re-raised.

    Example::

        with traced_stage(tracer, "retrieve", **{ATTR_INPUT_VALUE: query}) as span:
            result = await retriever.retrieve(message, query)
            span.set_attribute(ATTR_RETRIEVAL_STRATEGY, result.strategy)
    """
    with tracer.start_as_current_span(name, record_exception=False, set_status_on_exception=False) as span:
        for key, value in attributes.items():
            span.set_attribute(key, value[:MAX_ATTRIBUTE_CHARS] if isinstance(value, str) else value)
        try:
            yield span
        except Exception as exc:
            span.set_status(trace.StatusCode.ERROR, str(exc))
            span.record_exception(exc)
            raise
        span.set_status(trace.StatusCode.OK)
