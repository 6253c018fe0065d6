"""Inbound ports - API contracts for the threat model repository.

Inbound ports define the interfaces that the REST layer (and any other
caller) uses to store, read and inspect the history of threat models.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from threat_store.domain.entities import ModelAck, Revision


# =============================================================================
# Model Repository Port
# =============================================================================


@runtime_checkable
class ModelRepositoryPort(Protocol):
    """Protocol for versioned threat model storage.

    Each model lives at ``<root>/<name>/<name>.json`` and every mutation is
    recorded as exactly one commit touching that file.

    Thread Safety:
        Mutations for the same model name are serialized. Mutations for
        different names may run concurrently.

    Errors:
        All methods raise subclasses of ``ThreatStoreError``.

    Example:
        repo.create_model("payments", {"summary": {"title": "Payments"}})
        repo.update_model("payments", {"summary": {"title": "Payments v2"}})
        first = repo.history("payments")[-1]
        original = repo.version_at("payments", first.hash)
    """

    @property
    def storage_path(self) -> Path:
        """Root directory of the repository."""
        ...

    @abstractmethod
    def ensure(self) -> None:
        """Create and initialize the repository root if needed. Idempotent."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Check whether the storage backend is available."""
        ...

    @abstractmethod
    def list_models(self) -> list[str]:
        """List model names in directory enumeration order."""
        ...

    @abstractmethod
    def get_model(self, name: str) -> bytes:
        """Get the raw stored bytes of a model.

        Raises:
            ModelNotFoundError: If the model file does not exist.
        """
        ...

    @abstractmethod
    def create_model(self, name: str, body: Any) -> ModelAck:
        """Create a model and commit it.

        Raises:
            ModelAlreadyExistsError: If the model file already exists.
        """
        ...

    @abstractmethod
    def update_model(self, name: str, body: Any) -> ModelAck:
        """Overwrite a model and commit it.

        Raises:
            ModelNotFoundError: If the model file does not exist.
        """
        ...

    @abstractmethod
    def delete_model(self, name: str) -> ModelAck:
        """Delete a model and commit the removal.

        Raises:
            ModelNotFoundError: If the model file does not exist.
        """
        ...

    @abstractmethod
    def history(self, name: str) -> list[Revision]:
        """Get the revisions of a model's file, newest first.

        Raises:
            ModelNotFoundError: If the model file does not currently exist.
        """
        ...

    @abstractmethod
    def version_at(self, name: str, revision: str) -> Any:
        """Get a model's decoded content as of a revision.

        Raises:
            ModelNotFoundError: If the model file does not currently exist.
            RevisionNotFoundError: If the revision has no such file.
            MalformedContentError: If the stored blob is not JSON.
        """
        ...


__all__ = ["ModelRepositoryPort"]
