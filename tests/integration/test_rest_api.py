"""Integration tests for the /api/local REST surface."""

import pytest
from fastapi.testclient import TestClient

from threat_store.adapters.inbound.rest_api import create_app
from threat_store.domain.errors import RepositoryInternalError
from threat_store.infrastructure.config import ApiConfig


@pytest.mark.integration
class TestModelEndpoints:
    """Tests for model CRUD endpoints."""

    def test_models_empty(self, api_client):
        """Test listing a fresh store."""
        response = api_client.get("/api/local/models")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_returns_201(self, api_client, sample_model):
        """Test successful creation."""
        response = api_client.post("/api/local/model1/create", json=sample_model)

        assert response.status_code == 201
        assert response.json() == {"success": True, "model": "model1"}

    def test_create_existing_returns_409(self, api_client, sample_model):
        """Test creating a present model."""
        api_client.post("/api/local/model1/create", json=sample_model)

        response = api_client.post("/api/local/model1/create", json=sample_model)

        assert response.status_code == 409
        assert response.json()["error"] == "Model already exists: model1"

    def test_get_returns_decoded_document(self, api_client, sample_model):
        """Test round trip through create and data."""
        api_client.post("/api/local/model1/create", json=sample_model)

        response = api_client.get("/api/local/model1/data")

        assert response.status_code == 200
        assert response.json() == sample_model
        assert api_client.get("/api/local/models").json() == ["model1"]

    def test_get_missing_returns_404(self, api_client):
        """Test reading an absent model."""
        response = api_client.get("/api/local/missing/data")

        assert response.status_code == 404
        assert response.json() == {"error": "Model not found: missing", "kind": "not_found"}

    def test_update(self, api_client, sample_model):
        """Test update replaces content."""
        api_client.post("/api/local/model1/create", json=sample_model)

        response = api_client.put("/api/local/model1/update", json={"summary": {"title": "New"}})

        assert response.status_code == 200
        assert response.json() == {"success": True, "model": "model1"}
        assert api_client.get("/api/local/model1/data").json() == {"summary": {"title": "New"}}

    def test_update_missing_returns_404(self, api_client, sample_model):
        """Test updating an absent model."""
        response = api_client.put("/api/local/missing/update", json=sample_model)

        assert response.status_code == 404

    def test_invalid_name_returns_400(self, api_client, sample_model):
        """Test hidden-prefixed names are rejected."""
        response = api_client.post("/api/local/.hidden/create", json=sample_model)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_name"

    def test_internal_error_returns_generic_500(self, repository, sample_model, monkeypatch):
        """Test repository failures are opaque server errors."""
        def failing_create(name, body):
            raise RepositoryInternalError(f"Error creating model {name}")

        monkeypatch.setattr(repository, "create_model", failing_create)
        client = TestClient(create_app(repository, api_config=ApiConfig()))

        response = client.post("/api/local/model1/create", json=sample_model)

        assert response.status_code == 500
        assert response.json()["error"] == "Error creating model model1"

    def test_unhandled_error_returns_500(self, repository, monkeypatch):
        """Test anything unrecognized becomes an opaque 500."""
        def broken_list():
            raise RuntimeError("unexpected")

        monkeypatch.setattr(repository, "list_models", broken_list)
        client = TestClient(create_app(repository, api_config=ApiConfig()), raise_server_exceptions=False)

        response = client.get("/api/local/models")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_malformed_stored_model_returns_500(self, api_client, repository, storage_path, sample_model):
        """Test a model file that is not JSON."""
        api_client.post("/api/local/model1/create", json=sample_model)
        (storage_path / "model1" / "model1.json").write_text("{broken", encoding="utf-8")

        response = api_client.get("/api/local/model1/data")

        assert response.status_code == 500
        assert response.json()["kind"] == "malformed_content"


@pytest.mark.integration
class TestDeleteEndpoint:
    """Tests for the policy-gated delete endpoint."""

    def test_delete_disabled_by_default(self, api_client, storage_path, sample_model):
        """Test deletion is refused and nothing is removed."""
        api_client.post("/api/local/model1/create", json=sample_model)

        response = api_client.delete("/api/local/model1/delete")

        assert response.status_code == 403
        assert (storage_path / "model1" / "model1.json").exists()

    def test_delete_enabled(self, api_client_with_delete, storage_path, sample_model):
        """Test deletion when the policy allows it."""
        api_client_with_delete.post("/api/local/model1/create", json=sample_model)

        response = api_client_with_delete.delete("/api/local/model1/delete")

        assert response.status_code == 200
        assert response.json() == {"success": True, "model": "model1"}
        assert not (storage_path / "model1").exists()

    def test_delete_missing_returns_404(self, api_client_with_delete):
        """Test deleting an absent model."""
        response = api_client_with_delete.delete("/api/local/missing/delete")

        assert response.status_code == 404


@pytest.mark.integration
class TestHistoryEndpoints:
    """Tests for history and version endpoints."""

    def test_history(self, api_client, sample_model):
        """Test history entries and order."""
        api_client.post("/api/local/model1/create", json=sample_model)
        api_client.put("/api/local/model1/update", json={"summary": {"title": "New"}})

        response = api_client.get("/api/local/model1/history")

        assert response.status_code == 200
        history = response.json()
        assert len(history) == 2
        assert set(history[0]) == {"hash", "date", "message", "author"}
        assert history[0]["message"] == "Updated threat model: model1"
        assert history[1]["message"] == "Created threat model: model1"

    def test_history_missing_returns_404(self, api_client):
        """Test history of an absent model."""
        assert api_client.get("/api/local/missing/history").status_code == 404

    def test_version_returns_original(self, api_client, sample_model):
        """Test reading the create revision after an update."""
        api_client.post("/api/local/model1/create", json=sample_model)
        api_client.put("/api/local/model1/update", json={"summary": {"title": "New"}})
        create_hash = api_client.get("/api/local/model1/history").json()[-1]["hash"]

        response = api_client.get(f"/api/local/model1/version/{create_hash}")

        assert response.status_code == 200
        assert response.json() == sample_model

    def test_unknown_version_returns_404(self, api_client, sample_model):
        """Test a revision that does not resolve."""
        api_client.post("/api/local/model1/create", json=sample_model)

        response = api_client.get(f"/api/local/model1/version/{'0' * 40}")

        assert response.status_code == 404
        assert response.json()["kind"] == "revision_not_found"

    def test_version_of_missing_model_returns_404(self, api_client):
        """Test a version read of an absent model."""
        response = api_client.get("/api/local/missing/version/abc123")

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


@pytest.mark.integration
class TestSystemEndpoints:
    """Tests for health and metrics."""

    def test_health(self, api_client):
        """Test health check."""
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["storage_configured"] is True

    def test_metrics_exposition(self, api_client, sample_model):
        """Test Prometheus text output reflects operations."""
        api_client.post("/api/local/model1/create", json=sample_model)

        response = api_client.get("/metrics")

        assert response.status_code == 200
        assert "threat_store_models_created_total 1.0" in response.text
