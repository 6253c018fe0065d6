"""Outbound ports - interfaces for external dependencies.

The repository delegates history to a version-control engine.
This port is the narrow slice of that engine the repository relies on.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from threat_store.domain.entities import Revision


@runtime_checkable
class VersionControlPort(Protocol):
    """Protocol for version-control operations on a working tree.

    Paths are relative to the working tree root, use '/' separators and
    name exactly one file; glob characters in them are not patterns.
    """

    def close(self) -> None:
        """Release resources held for the working tree."""
        ...

    def has_commits(self) -> bool:
        """Check whether HEAD points at a commit."""
        ...

    def commit_path(self, path: str, message: str) -> Optional[str]:
        """Stage the current state of one path (including deletion) and commit it.

        Returns:
            The new commit SHA, or None if the path has no changes
        """
        ...

    def log_path(self, path: str) -> list[Revision]:
        """Commits touching a path, newest first."""
        ...

    def read_at(self, revision: str, path: str) -> bytes | None:
        """Contents of a path as of a revision.

        Returns:
            Blob contents, or None if the revision cannot be resolved or has
            no blob at that path
        """
        ...


__all__ = ["VersionControlPort"]
