"""Unit tests for the GitPython client adapter."""

import pytest
from git import Repo

from threat_store.adapters.outbound.git_client import (
    DEFAULT_AUTHOR_EMAIL,
    DEFAULT_AUTHOR_NAME,
    GitClient,
)


@pytest.fixture
def client(tmp_path):
    """Provide a client over a fresh repository with an explicit identity."""
    git_client = GitClient.init(tmp_path / "repo", author_name="Alice", author_email="alice@example.com")
    with git_client:
        yield git_client


@pytest.mark.unit
class TestRepositoryRoot:
    """Test working tree root detection."""

    def test_plain_directory(self, tmp_path):
        """Test a directory without git."""
        assert GitClient.is_repository_root(tmp_path) is False

    def test_missing_directory(self, tmp_path):
        """Test a path that does not exist."""
        assert GitClient.is_repository_root(tmp_path / "missing") is False

    def test_initialized_directory(self, tmp_path):
        """Test a directory after git init."""
        GitClient.init(tmp_path).close()
        assert GitClient.is_repository_root(tmp_path) is True

    def test_nested_directory_is_not_a_root(self, tmp_path):
        """Test a subdirectory of another repository."""
        Repo.init(str(tmp_path)).close()
        nested = tmp_path / "nested"
        nested.mkdir()
        assert GitClient.is_repository_root(nested) is False


@pytest.mark.unit
class TestCommits:
    """Test path-limited commits, log and point-in-time reads."""

    def test_fresh_repository_has_no_commits(self, client):
        """Test HEAD is unborn after init."""
        assert client.has_commits() is False

    def test_commit_path_only_commits_that_path(self, client, tmp_path):
        """Test other dirty files stay out of the commit."""
        root = tmp_path / "repo"
        (root / "a.txt").write_text("a")
        (root / "b.txt").write_text("b")

        sha = client.commit_path("a.txt", "Add a")

        commit = client.repo.commit(sha)
        assert set(commit.stats.files) == {"a.txt"}
        assert client.repo.is_dirty(untracked_files=True)

    def test_paths_with_glob_characters_are_literal(self, client, tmp_path):
        """Test a path like '*.txt' commits and logs only that one file."""
        root = tmp_path / "repo"
        (root / "a.txt").write_text("a")
        client.commit_path("a.txt", "Add a")
        (root / "*.txt").write_text("star")
        (root / "b.txt").write_text("b")

        sha = client.commit_path("*.txt", "Add star")

        assert set(client.repo.commit(sha).stats.files) == {"*.txt"}
        assert [r.message for r in client.log_path("*.txt")] == ["Add star"]
        assert [r.message for r in client.log_path("a.txt")] == ["Add a"]

    def test_unchanged_path_is_not_committed(self, client, tmp_path):
        """Test committing a path with no changes returns None."""
        (tmp_path / "repo" / "doc.json").write_text("{}")
        first = client.commit_path("doc.json", "Add")

        assert client.commit_path("doc.json", "Again") is None
        assert client.repo.head.commit.hexsha == first

    def test_log_path_newest_first(self, client, tmp_path):
        """Test per-path log order and fields."""
        for i in range(3):
            (tmp_path / "repo" / "doc.json").write_text(str(i))
            client.commit_path("doc.json", f"Revision {i}")

        log = client.log_path("doc.json")

        assert [r.message for r in log] == ["Revision 2", "Revision 1", "Revision 0"]
        assert all(r.author == "Alice" for r in log)
        assert all(len(r.hash) == 40 for r in log)
        assert "T" in log[0].date

    def test_commit_deletion(self, client, tmp_path):
        """Test staging and committing a removed file."""
        root = tmp_path / "repo"
        (root / "doc.json").write_text("{}")
        client.commit_path("doc.json", "Add")
        (root / "doc.json").unlink()

        sha = client.commit_path("doc.json", "Remove")

        assert "doc.json" not in [item.path for item in client.repo.commit(sha).tree.traverse()]

    def test_read_at(self, client, tmp_path):
        """Test reading content as of an older commit."""
        root = tmp_path / "repo"
        (root / "doc.json").write_text("first")
        first = client.commit_path("doc.json", "First")
        (root / "doc.json").write_text("second")
        client.commit_path("doc.json", "Second")

        assert client.read_at(first, "doc.json") == b"first"
        assert client.read_at(first[:8], "doc.json") == b"first"

    def test_read_at_unresolvable(self, client, tmp_path):
        """Test unknown revisions and missing paths return None."""
        (tmp_path / "repo" / "doc.json").write_text("x")
        sha = client.commit_path("doc.json", "Add")

        assert client.read_at("0" * 40, "doc.json") is None
        assert client.read_at(sha, "other.json") is None


@pytest.mark.unit
class TestIdentity:
    """Test commit identity resolution."""

    def test_falls_back_to_defaults(self, tmp_path, monkeypatch):
        """Test commits work with no identity configured anywhere."""
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "home" / ".config"))
        monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
        with GitClient.init(tmp_path / "repo") as git_client:
            (tmp_path / "repo" / "doc.json").write_text("{}")
            git_client.commit_path("doc.json", "Add")

            commit = git_client.repo.head.commit
            assert commit.author.name == DEFAULT_AUTHOR_NAME
            assert commit.author.email == DEFAULT_AUTHOR_EMAIL

    def test_repository_config_wins_over_defaults(self, tmp_path):
        """Test user.name from git config is used when not overridden."""
        with GitClient.init(tmp_path / "repo") as git_client:
            with git_client.repo.config_writer() as writer:
                writer.set_value("user", "name", "Configured User")
                writer.set_value("user", "email", "configured@example.com")
            (tmp_path / "repo" / "doc.json").write_text("{}")
            git_client.commit_path("doc.json", "Add")

            assert git_client.repo.head.commit.author.name == "Configured User"
