"""Infrastructure layer - cross-cutting concerns."""

from threat_store.infrastructure.config import Config, get_config
from threat_store.infrastructure.logging import setup_logging, get_logger
from threat_store.infrastructure.metrics import ThreatStoreMetrics, get_metrics
from threat_store.infrastructure.tracing import setup_tracing

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "ThreatStoreMetrics",
    "get_metrics",
    "setup_tracing",
]
