"""HTTP client for the local git-backed model storage API.

Usage:
    with LocalApiClient("http://localhost:3000") as api:
        api.create("payments", {"summary": {"title": "Payments"}})
        for revision in api.history("payments"):
            print(revision["hash"], revision["message"])
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx

from threat_store.domain.errors import (
    InvalidModelNameError,
    MalformedContentError,
    ModelAlreadyExistsError,
    ModelNotFoundError,
    OperationDisabledError,
    RepositoryInternalError,
    RevisionNotFoundError,
    ThreatStoreError,
)

RESOURCE = "/api/local"
DEFAULT_TIMEOUT = 10.0

# Used when an error body carries no kind tag
_KIND_BY_STATUS = {
    400: "invalid_name",
    403: "disabled",
    404: "not_found",
    409: "already_exists",
}


def _segment(value: str) -> str:
    return quote(value, safe="")


class LocalApiClient:
    """Client for the ``/api/local`` REST resource.

    Error responses are raised as the same ThreatStoreError variants the
    server reported.

    Attributes:
        http: The underlying httpx client
    """

    def __init__(
        self,
        base_url: str = "",
        http: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Server base URL, ignored when ``http`` is given
            http: Preconfigured httpx client (e.g. a FastAPI TestClient)
            timeout: Request timeout in seconds for the owned client
        """
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "LocalApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def models(self) -> list[str]:
        """Get all threat model names."""
        return self._request("GET", f"{RESOURCE}/models")

    def model(self, name: str) -> Any:
        """Get a threat model."""
        return self._request("GET", f"{RESOURCE}/{_segment(name)}/data", model=name)

    def create(self, name: str, threat_model: Any) -> dict[str, Any]:
        """Create a new threat model."""
        return self._request(
            "POST", f"{RESOURCE}/{_segment(name)}/create", model=name, json=threat_model
        )

    def update(self, name: str, threat_model: Any) -> dict[str, Any]:
        """Update an existing threat model."""
        return self._request(
            "PUT", f"{RESOURCE}/{_segment(name)}/update", model=name, json=threat_model
        )

    def delete(self, name: str) -> dict[str, Any]:
        """Delete a threat model, if the server allows it."""
        return self._request("DELETE", f"{RESOURCE}/{_segment(name)}/delete", model=name)

    def history(self, name: str) -> list[dict[str, Any]]:
        """Get the version history for a threat model, newest first."""
        return self._request("GET", f"{RESOURCE}/{_segment(name)}/history", model=name)

    def version(self, name: str, version_hash: str) -> Any:
        """Get a threat model as of a revision."""
        return self._request(
            "GET",
            f"{RESOURCE}/{_segment(name)}/version/{_segment(version_hash)}",
            model=name,
            revision=version_hash,
        )

    def _request(
        self,
        method: str,
        url: str,
        model: str = "",
        revision: str = "",
        **kwargs: Any,
    ) -> Any:
        response = self.http.request(method, url, **kwargs)
        if response.is_success:
            return response.json()
        raise _error_from(response, model, revision)


def _error_from(response: httpx.Response, model: str, revision: str) -> ThreatStoreError:
    """Rebuild the server's error from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = body.get("error") or response.text or f"HTTP {response.status_code}"
    kind = body.get("kind") or _KIND_BY_STATUS.get(response.status_code, "internal")

    if kind == "not_found":
        return ModelNotFoundError(model)
    if kind == "already_exists":
        return ModelAlreadyExistsError(model)
    if kind == "revision_not_found":
        return RevisionNotFoundError(model, revision)
    if kind == "malformed_content":
        return MalformedContentError(message)
    if kind == "invalid_name":
        return InvalidModelNameError(message)
    if kind == "disabled":
        return OperationDisabledError(message)
    return RepositoryInternalError(message)
