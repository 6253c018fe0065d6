"""Error taxonomy for the threat model repository.

Every failure the repository reports is one of a closed set of variants.
Each variant carries a ``kind`` tag; transport layers map the tag to their
own status codes (see ``adapters.inbound.rest_api``).
"""

from __future__ import annotations


class ThreatStoreError(Exception):
    """Base class for all repository errors."""

    kind: str = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ModelNotFoundError(ThreatStoreError):
    """Raised when a threat model file does not exist."""

    kind = "not_found"

    def __init__(self, model: str) -> None:
        super().__init__(f"Model not found: {model}")
        self.model = model


class ModelAlreadyExistsError(ThreatStoreError):
    """Raised when creating a threat model that already exists."""

    kind = "already_exists"

    def __init__(self, model: str) -> None:
        super().__init__(f"Model already exists: {model}")
        self.model = model


class RevisionNotFoundError(ThreatStoreError):
    """Raised when a revision cannot be resolved for a model's file."""

    kind = "revision_not_found"

    def __init__(self, model: str, revision: str) -> None:
        super().__init__(f"Revision not found for model {model}: {revision}")
        self.model = model
        self.revision = revision


class MalformedContentError(ThreatStoreError):
    """Raised when stored content is not valid JSON."""

    kind = "malformed_content"


class InvalidModelNameError(ThreatStoreError):
    """Raised when a model name cannot be used as a path segment."""

    kind = "invalid_name"


class OperationDisabledError(ThreatStoreError):
    """Raised when an operation is switched off by deployment policy."""

    kind = "disabled"


class RepositoryInternalError(ThreatStoreError):
    """Raised for filesystem or git failures."""

    kind = "internal"

