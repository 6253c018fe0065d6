"""Pytest configuration and shared fixtures for Threat Store tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from threat_store.adapters.inbound.rest_api import create_app
from threat_store.adapters.outbound.local_git_repo import LocalGitRepository
from threat_store.infrastructure.config import ApiConfig, Config, StorageConfig
from threat_store.infrastructure.container import Container
from threat_store.infrastructure.logging import setup_logging
from threat_store.infrastructure.metrics import ThreatStoreMetrics

TEST_AUTHOR = "Test Author"
TEST_EMAIL = "test@example.com"


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Only show warnings and errors from structlog during tests."""
    setup_logging("WARNING", "console")


@pytest.fixture(autouse=True)
def reset_container():
    """Reset the DI container before each test."""
    Container.reset()
    yield
    Container.reset()


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """Provide a not-yet-created storage root."""
    return tmp_path / "threat-models"


@pytest.fixture
def test_config(storage_path: Path) -> Config:
    """Provide a test configuration pointing at the temp storage root."""
    return Config(
        storage=StorageConfig(path=str(storage_path), author_name=TEST_AUTHOR, author_email=TEST_EMAIL),
        api=ApiConfig(enable_delete=False),
    )


@pytest.fixture
def metrics() -> ThreatStoreMetrics:
    """Provide metrics bound to a private registry."""
    return ThreatStoreMetrics(registry=CollectorRegistry())


@pytest.fixture
def repository(storage_path: Path, metrics: ThreatStoreMetrics) -> LocalGitRepository:
    """Provide a repository over the temp storage root."""
    return LocalGitRepository(
        storage_path,
        author_name=TEST_AUTHOR,
        author_email=TEST_EMAIL,
        metrics=metrics,
    )


@pytest.fixture
def sample_model() -> dict:
    """Provide a minimal threat model document."""
    return {"summary": {"title": "T"}}


@pytest.fixture
def api_client(repository: LocalGitRepository, metrics: ThreatStoreMetrics) -> TestClient:
    """Provide a REST client with deletion disabled."""
    app = create_app(repository, api_config=ApiConfig(enable_delete=False), metrics=metrics)
    return TestClient(app)


@pytest.fixture
def api_client_with_delete(repository: LocalGitRepository, metrics: ThreatStoreMetrics) -> TestClient:
    """Provide a REST client with deletion enabled."""
    app = create_app(repository, api_config=ApiConfig(enable_delete=True), metrics=metrics)
    return TestClient(app)


# Pytest markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
