"""Prometheus metrics for Threat Store."""

from prometheus_client import Counter, Histogram, Info, CollectorRegistry, REGISTRY


class ThreatStoreMetrics:
    """Metrics collector for the model repository."""

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        self.registry = registry

        # Model Operations
        self.models_created = Counter(
            "threat_store_models_created_total",
            "Total threat models created",
            registry=registry,
        )
        self.models_updated = Counter(
            "threat_store_models_updated_total",
            "Total threat models updated",
            registry=registry,
        )
        self.models_deleted = Counter(
            "threat_store_models_deleted_total",
            "Total threat models deleted",
            registry=registry,
        )
        self.models_read = Counter(
            "threat_store_models_read_total",
            "Total threat model reads (current or historical)",
            ["source"],
            registry=registry,
        )

        # Git
        self.commits = Counter(
            "threat_store_commits_total",
            "Total commits written to the model repository",
            ["kind"],
            registry=registry,
        )

        # Latency
        self.operation_latency = Histogram(
            "threat_store_operation_latency_seconds",
            "Repository operation latency",
            ["operation"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=registry,
        )

        # Errors
        self.operation_errors = Counter(
            "threat_store_operation_errors_total",
            "Total repository operation errors",
            ["operation", "error_kind"],
            registry=registry,
        )

        # System Info
        self.system_info = Info(
            "threat_store",
            "Threat store system information",
            registry=registry,
        )


_metrics: ThreatStoreMetrics | None = None


def get_metrics() -> ThreatStoreMetrics:
    """Get the singleton metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = ThreatStoreMetrics()
    return _metrics
