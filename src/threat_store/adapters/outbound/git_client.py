"""Git client adapter.

Implements VersionControlPort on top of GitPython. All git access in the
package goes through this class.

Usage:
    client = GitClient.init("/path/to/models")
    sha = client.commit_path("README.md", "Initial commit")
    for revision in client.log_path("README.md"):
        print(revision.hash, revision.message)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, ODBError

from threat_store.domain.entities import Revision

DEFAULT_AUTHOR_NAME = "Threat Store"
DEFAULT_AUTHOR_EMAIL = "threat-store@localhost"

# Model names may contain glob characters or start with ':'
LITERAL_MAGIC = ":(literal)"


def literal_pathspec(path: str) -> str:
    """Pathspec that git matches as this exact path only."""
    return f"{LITERAL_MAGIC}{path}"


class GitClient:
    """GitPython-backed implementation of VersionControlPort.

    Commit identity comes from the explicit author settings if given, then
    from git configuration, then from the built-in defaults, so commits never
    fail for lack of a configured user.

    Attributes:
        repo: The underlying GitPython repository
    """

    def __init__(
        self,
        repo: Repo,
        author_name: Optional[str] = None,
        author_email: Optional[str] = None,
    ) -> None:
        self.repo = repo
        self._author_name = author_name
        self._author_email = author_email

    @classmethod
    def open(cls, root: str | Path, **identity: Optional[str]) -> "GitClient":
        """Open the repository whose working tree root is ``root``.

        Raises:
            InvalidGitRepositoryError: If ``root`` is not a working tree root.
            NoSuchPathError: If ``root`` does not exist.
        """
        return cls(Repo(str(root)), **identity)

    @classmethod
    def init(cls, root: str | Path, **identity: Optional[str]) -> "GitClient":
        """Initialize a new repository at ``root``."""
        return cls(Repo.init(str(root)), **identity)

    @staticmethod
    def is_repository_root(root: str | Path) -> bool:
        """Check whether ``root`` is itself the top of a git working tree.

        A directory nested inside some other repository does not count.
        """
        try:
            repo = Repo(str(root))
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False
        try:
            if repo.bare or repo.working_tree_dir is None:
                return False
            return Path(repo.working_tree_dir).resolve() == Path(root).resolve()
        finally:
            repo.close()

    def close(self) -> None:
        """Release GitPython's cached git processes."""
        self.repo.close()

    def __enter__(self) -> "GitClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def has_commits(self) -> bool:
        """Check whether HEAD points at a commit."""
        return self.repo.head.is_valid()

    def commit_path(self, path: str, message: str) -> Optional[str]:
        """Stage one path (additions, changes and deletion) and commit only it.

        Args:
            path: Working-tree-relative path, matched literally
            message: Commit message

        Returns:
            The new commit SHA, or None if the path had nothing to commit

        Raises:
            GitCommandError: If staging or committing fails.
        """
        pathspec = literal_pathspec(path)
        with self.repo.git.custom_environment(**self._identity_env()):
            self.repo.git.add("-A", "--", pathspec)
            if not self.repo.git.diff("--cached", "--name-only", "--", pathspec):
                return None
            self.repo.git.commit("-m", message, "--", pathspec)
        return self.repo.head.commit.hexsha

    def log_path(self, path: str) -> list[Revision]:
        """Commits touching exactly ``path``, newest first."""
        return [
            Revision(
                hash=commit.hexsha,
                date=commit.committed_datetime.isoformat(),
                message=str(commit.summary),
                author=commit.author.name or "",
            )
            for commit in self.repo.iter_commits(paths=literal_pathspec(path))
        ]

    def read_at(self, revision: str, path: str) -> bytes | None:
        """Contents of ``path`` as of ``revision``, or None if unresolvable."""
        try:
            commit = self.repo.commit(revision)
            blob = commit.tree / path
        except (ODBError, GitCommandError, ValueError, KeyError):
            return None
        if blob.type != "blob":
            return None
        return blob.data_stream.read()

    def _identity_env(self) -> dict[str, str]:
        name = self._author_name
        email = self._author_email
        if not name or not email:
            with self.repo.config_reader() as reader:
                name = name or str(reader.get_value("user", "name", DEFAULT_AUTHOR_NAME))
                email = email or str(reader.get_value("user", "email", DEFAULT_AUTHOR_EMAIL))
        return {
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
        }
