"""Outbound adapters - implementations for external dependencies.

Outbound adapters wrap git (GitPython) and the local filesystem.
"""

from threat_store.adapters.outbound.git_client import GitClient
from threat_store.adapters.outbound.local_git_repo import LocalGitRepository

__all__ = ["GitClient", "LocalGitRepository"]
