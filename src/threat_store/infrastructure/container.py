"""Dependency injection container for Threat Store."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import FastAPI
from opentelemetry import trace

from threat_store import __version__
from threat_store.adapters.inbound.rest_api import create_app
from threat_store.adapters.outbound.local_git_repo import LocalGitRepository
from threat_store.infrastructure.config import Config, get_config
from threat_store.infrastructure.logging import setup_logging
from threat_store.infrastructure.metrics import ThreatStoreMetrics, get_metrics
from threat_store.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Dependency injection container for threat store components."""

    config: Config
    logger: structlog.stdlib.BoundLogger
    tracer: trace.Tracer
    metrics: ThreatStoreMetrics
    repository: LocalGitRepository

    _instance: "Container | None" = None

    @classmethod
    def create(cls) -> "Container":
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        config = get_config()
        logger = setup_logging(config.observability.log_level, config.observability.log_format)
        tracer = setup_tracing(config)
        metrics = get_metrics()
        metrics.system_info.info({"version": __version__})

        repository = LocalGitRepository(
            config.storage.resolved_path(),
            author_name=config.storage.author_name,
            author_email=config.storage.author_email,
            metrics=metrics,
            tracer=tracer,
        )

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            repository=repository,
        )

        logger.info(
            "threat_store_container_initialized",
            environment=config.observability.environment,
            storage_path=str(repository.storage_path),
            delete_enabled=config.api.enable_delete,
        )

        return cls._instance

    @classmethod
    def get(cls) -> "Container":
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None

    def build_app(self) -> FastAPI:
        """Build the REST application over the container's repository."""
        return create_app(self.repository, api_config=self.config.api, metrics=self.metrics)


def get_container() -> Container:
    """Get the dependency injection container."""
    return Container.get()
