"""OpenTelemetry tracing configuration for Threat Store."""

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from threat_store import __version__
from threat_store.infrastructure.config import Config, get_config


def setup_tracing(config: Config | None = None) -> trace.Tracer:
    """Configure OpenTelemetry tracing for the model store."""
    config = config or get_config()

    resource = Resource.create(
        {
            "service.name": "threat_store",
            "service.version": __version__,
            "deployment.environment": config.observability.environment,
        }
    )

    provider = TracerProvider(resource=resource)

    # Spans are recorded but not exported unless a collector is configured.
    if config.observability.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(
            endpoint=config.observability.otlp_endpoint,
            insecure=True,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(provider)

    return trace.get_tracer("threat_store")
