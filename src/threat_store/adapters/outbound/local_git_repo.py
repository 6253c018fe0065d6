"""Local git repository for storing threat models with versioning.

Implements ModelRepositoryPort on a local directory that is also a git
working tree. Every create, update and delete writes one file and records
exactly one commit touching only that file. An update that leaves the file
unchanged records none.

Directory structure:
    storage_path/
        .git/
        README.md
        payments/
            payments.json
        identity-service/
            identity-service.json

Consistency:
    The file write is atomic (temp file + rename) but the commit is a
    separate step. If the commit fails the working tree is left dirty and
    the error is reported; nothing is rolled back.

Concurrency:
    Mutations hold a per-model lock for the whole check-write-commit
    sequence, plus a repository-wide lock around staging and committing
    because the git index is shared. Writers in other processes are not
    coordinated.
"""

from __future__ import annotations

import os
import re
import tempfile
import threading
import time
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from git.exc import GitCommandError
from opentelemetry import trace

from threat_store.adapters.outbound.git_client import GitClient
from threat_store.domain.entities import ModelAck, Revision
from threat_store.domain.errors import (
    ModelAlreadyExistsError,
    ModelNotFoundError,
    RepositoryInternalError,
    RevisionNotFoundError,
    ThreatStoreError,
)
from threat_store.domain.services import KeyedLock, decode_document, encode_document
from threat_store.domain.value_objects import HIDDEN_PREFIX, MODEL_FILE_SUFFIX, ModelName
from threat_store.infrastructure.logging import get_logger
from threat_store.infrastructure.metrics import ThreatStoreMetrics
from threat_store.ports.outbound import VersionControlPort

logger = get_logger(__name__)

README_NAME = "README.md"
README_CONTENT = (
    "# Threat Models\n"
    "\n"
    "This repository contains threat models managed by Threat Store.\n"
)
INITIAL_COMMIT_MESSAGE = "Initial commit - Threat Store local storage initialized"

_REVISION_PATTERN = re.compile(r"^[0-9a-fA-F]{4,64}$")


class LocalGitRepository:
    """Git-backed implementation of ModelRepositoryPort.

    Attributes:
        storage_path: Root directory of the repository
    """

    def __init__(
        self,
        storage_path: str | Path,
        author_name: Optional[str] = None,
        author_email: Optional[str] = None,
        metrics: Optional[ThreatStoreMetrics] = None,
        tracer: Optional[trace.Tracer] = None,
        version_control: Optional[Callable[[Path], VersionControlPort]] = None,
    ) -> None:
        """Initialize the repository adapter.

        Nothing touches the disk until the first operation.

        Args:
            storage_path: Root directory of the repository
            author_name: Commit author name override
            author_email: Commit author email override
            metrics: Metrics collector, or None to skip metrics
            tracer: Tracer, defaults to the global "threat_store" tracer
            version_control: Opens a VersionControlPort on the storage root,
                defaults to a GitClient with the author settings
        """
        self._storage_path = Path(storage_path)
        self._identity = {"author_name": author_name, "author_email": author_email}
        self._metrics = metrics
        self._tracer = tracer or trace.get_tracer("threat_store")
        self._version_control = version_control or self._open_git
        self._model_locks = KeyedLock()
        self._index_lock = threading.Lock()
        self._init_lock = threading.Lock()

    @property
    def storage_path(self) -> Path:
        """Root directory of the repository."""
        return self._storage_path

    def is_configured(self) -> bool:
        """Local storage is always available."""
        return True

    # -------------------------------------------------------------------------
    # Repository initialization
    # -------------------------------------------------------------------------

    def ensure(self) -> None:
        """Ensure the storage directory exists and is a git repository.

        Creates the directory, runs ``git init`` and commits a seed README
        when needed. Running it again is a no-op.

        Raises:
            RepositoryInternalError: If the filesystem or git fails.
        """
        with self._init_lock:
            try:
                self._storage_path.mkdir(parents=True, exist_ok=True)
                if not GitClient.is_repository_root(self._storage_path):
                    GitClient.init(self._storage_path).close()
                    logger.info("repository_initialized", path=str(self._storage_path))

                with closing(self._version_control(self._storage_path)) as client:
                    if client.has_commits():
                        return
                    (self._storage_path / README_NAME).write_text(README_CONTENT, encoding="utf-8")
                    sha = client.commit_path(README_NAME, INITIAL_COMMIT_MESSAGE)
            except (OSError, GitCommandError) as exc:
                raise RepositoryInternalError("Failed to initialize model repository") from exc

        self._record_commit("init")
        logger.info("repository_seeded", path=str(self._storage_path), revision=sha)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def list_models(self) -> list[str]:
        """List models in directory enumeration order.

        Hidden entries and directories without a ``<name>/<name>.json``
        file are skipped.
        """
        with self._operation("list"):
            self.ensure()
            models = []
            with self._internal_errors("Error listing models"), os.scandir(self._storage_path) as entries:
                for entry in entries:
                    if entry.name.startswith(HIDDEN_PREFIX) or not entry.is_dir():
                        continue
                    if (Path(entry.path) / f"{entry.name}{MODEL_FILE_SUFFIX}").is_file():
                        models.append(entry.name)
            return models

    def get_model(self, name: str) -> bytes:
        """Get the raw bytes of a model file.

        Raises:
            ModelNotFoundError: If the model does not exist.
        """
        with self._operation("get", name):
            model = ModelName(name)
            self.ensure()
            path = self._require_existing(model)
            try:
                content = path.read_bytes()
            except FileNotFoundError as exc:
                raise ModelNotFoundError(model.value) from exc
            self._record_read("current")
            return content

    def create_model(self, name: str, body: Any) -> ModelAck:
        """Create a model and commit it.

        Raises:
            ModelAlreadyExistsError: If the model already exists.
        """
        with self._operation("create", name):
            model = ModelName(name)
            self.ensure()
            with self._model_locks.hold(model.value):
                path = self._model_path(model)
                if path.exists():
                    raise ModelAlreadyExistsError(model.value)

                with self._internal_errors(f"Error creating model {model.value}"):
                    path.parent.mkdir(parents=True, exist_ok=True)
                    self._write_atomic(path, encode_document(body))
                    sha = self._commit(model, f"Created threat model: {model.value}")

            self._record_commit("create")
            if self._metrics:
                self._metrics.models_created.inc()
            logger.info("model_created", model=model.value, revision=sha)
            return ModelAck(model=model.value)

    def update_model(self, name: str, body: Any) -> ModelAck:
        """Overwrite a model and commit it.

        A body identical to the committed content is acknowledged without a
        commit, so history only lists updates that changed the file.

        Raises:
            ModelNotFoundError: If the model does not exist.
        """
        with self._operation("update", name):
            model = ModelName(name)
            self.ensure()
            with self._model_locks.hold(model.value):
                path = self._require_existing(model)

                with self._internal_errors(f"Error updating model {model.value}"):
                    self._write_atomic(path, encode_document(body))
                    sha = self._commit(model, f"Updated threat model: {model.value}")

            if sha is None:
                logger.info("model_unchanged", model=model.value)
                return ModelAck(model=model.value)

            self._record_commit("update")
            if self._metrics:
                self._metrics.models_updated.inc()
            logger.info("model_updated", model=model.value, revision=sha)
            return ModelAck(model=model.value)

    def delete_model(self, name: str) -> ModelAck:
        """Delete a model, and its directory if that becomes empty.

        Raises:
            ModelNotFoundError: If the model does not exist.
        """
        with self._operation("delete", name):
            model = ModelName(name)
            self.ensure()
            with self._model_locks.hold(model.value):
                path = self._require_existing(model)

                with self._internal_errors(f"Error deleting model {model.value}"):
                    path.unlink()
                    model_dir = path.parent
                    if not any(model_dir.iterdir()):
                        model_dir.rmdir()
                    sha = self._commit(model, f"Deleted threat model: {model.value}")

            self._record_commit("delete")
            if self._metrics:
                self._metrics.models_deleted.inc()
            logger.info("model_deleted", model=model.value, revision=sha)
            return ModelAck(model=model.value)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def history(self, name: str) -> list[Revision]:
        """Get the revisions of a model's file, newest first.

        Only current existence is checked; the log itself spans every
        commit that ever touched the path, including earlier lives of a
        deleted and recreated model.

        Raises:
            ModelNotFoundError: If the model does not currently exist.
        """
        with self._operation("history", name):
            model = ModelName(name)
            self.ensure()
            self._require_existing(model)
            with self._internal_errors(f"Error reading history of model {model.value}"):
                with closing(self._version_control(self._storage_path)) as client:
                    return client.log_path(model.relative_path)

    def version_at(self, name: str, revision: str) -> Any:
        """Get a model's decoded content as of a revision.

        Raises:
            ModelNotFoundError: If the model does not currently exist.
            RevisionNotFoundError: If the revision is not a commit id, cannot
                be resolved, or has no file for this model.
            MalformedContentError: If the stored blob is not JSON.
        """
        with self._operation("version", name):
            model = ModelName(name)
            self.ensure()
            self._require_existing(model)

            if not _REVISION_PATTERN.match(revision):
                raise RevisionNotFoundError(model.value, revision)

            with self._internal_errors(f"Error reading model {model.value} at {revision}"):
                with closing(self._version_control(self._storage_path)) as client:
                    content = client.read_at(revision, model.relative_path)

            if content is None:
                raise RevisionNotFoundError(model.value, revision)

            self._record_read("history")
            return decode_document(content, f"{model.relative_path}@{revision}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _model_path(self, model: ModelName) -> Path:
        return self._storage_path / model.value / model.file_name

    def _require_existing(self, model: ModelName) -> Path:
        path = self._model_path(model)
        if not path.is_file():
            raise ModelNotFoundError(model.value)
        return path

    def _open_git(self, root: Path) -> GitClient:
        return GitClient.open(root, **self._identity)

    def _commit(self, model: ModelName, message: str) -> Optional[str]:
        with self._index_lock:
            with closing(self._version_control(self._storage_path)) as client:
                return client.commit_path(model.relative_path, message)

    @staticmethod
    def _write_atomic(path: Path, content: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @contextmanager
    def _internal_errors(self, message: str) -> Iterator[None]:
        """Report filesystem and git failures as RepositoryInternalError.

        The message stays generic; the underlying error is kept as __cause__.
        """
        try:
            yield
        except (OSError, GitCommandError) as exc:
            raise RepositoryInternalError(message) from exc

    @contextmanager
    def _operation(self, operation: str, name: Optional[str] = None) -> Iterator[None]:
        """Trace, time and count errors for one repository operation."""
        attributes = {"threat_store.operation": operation}
        if name is not None:
            attributes["threat_store.model"] = name

        start = time.perf_counter()
        with self._tracer.start_as_current_span(f"threat_store.{operation}", attributes=attributes):
            try:
                yield
            except ThreatStoreError as exc:
                if self._metrics:
                    self._metrics.operation_errors.labels(
                        operation=operation, error_kind=exc.kind
                    ).inc()
                logger.debug("operation_failed", operation=operation, model=name, kind=exc.kind)
                raise
            finally:
                if self._metrics:
                    self._metrics.operation_latency.labels(operation=operation).observe(
                        time.perf_counter() - start
                    )

    def _record_commit(self, kind: str) -> None:
        if self._metrics:
            self._metrics.commits.labels(kind=kind).inc()

    def _record_read(self, source: str) -> None:
        if self._metrics:
            self._metrics.models_read.labels(source=source).inc()
