"""Pytest fixtures for git-subrepo-keeper tests"""
import tempfile
from pathlib import Path
import pytest
import git

from git_subrepo_keeper.config import Config
from git_subrepo_keeper.exceptions import GitOperationError
from git_subrepo_keeper.services.marker_store import MarkerStore


class FakeBackend:
    """Backend double recording every subtree call."""

    def __init__(self, repo_root=None, outputs=None, error=None):
        self.repo_root = Path(repo_root) if repo_root is not None else None
        self.outputs = list(outputs or [])
        self.error = error
        self.calls = []

    def current_repo_root(self, start=None):
        return self.repo_root

    def _record(self, operation, repo_root, prefix, url, branch):
        self.calls.append((operation, Path(repo_root), prefix, url, branch))
        if self.error is not None:
            raise GitOperationError(f"subtree {operation}", prefix, self.error)
        return self.outputs.pop(0) if self.outputs else ""

    def split_push(self, repo_root, prefix, url, branch):
        return self._record("push", repo_root, prefix, url, branch)

    def squash_pull(self, repo_root, prefix, url, branch):
        return self._record("pull", repo_root, prefix, url, branch)

    def subtree_add(self, repo_root, prefix, url, branch):
        return self._record("add", repo_root, prefix, url, branch)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def repo_root(temp_dir):
    """A plain directory standing in for a repository root."""
    root = temp_dir / "host"
    root.mkdir()
    return root


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'dry_run': False,
        'default_branch': 'main',
        'marker_filename': '.subrepo',
        'marker_format': 'line',
        'refresh_recorded_root': False,
        'github_token': None,
    }


@pytest.fixture
def config(mock_config):
    return Config.from_dict(mock_config)


@pytest.fixture
def store(repo_root, config):
    return MarkerStore(repo_root, config)


@pytest.fixture
def fake_backend(repo_root):
    return FakeBackend(repo_root)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    # GitPython leaves stale stat data in the index; refresh it so that
    # `git subtree` does not see the working tree as modified.
    repo.git.update_index("--refresh")

    yield repo

    repo.close()


@pytest.fixture
def make_backend(repo_root):
    """Build a FakeBackend for the test repository with custom outputs or error."""
    def factory(outputs=None, error=None):
        return FakeBackend(repo_root, outputs=outputs, error=error)
    return factory
