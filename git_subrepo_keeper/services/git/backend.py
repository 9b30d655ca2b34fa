"""git subtree backend built on GitPython"""

import os
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

import git
from rich.console import Console
from rich.markup import escape

from git_subrepo_keeper.exceptions import GitOperationError, NotARepositoryError
from git_subrepo_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_subrepo_keeper.config import Config

console = Console()
logger = get_logger(__name__)


def _command_stderr(error: git.exc.GitCommandError) -> str:
    """Raw stderr of a failed git command.

    GitPython stores stderr wrapped as ``stderr: '<text>'``; unwrap it so the
    caller sees git's own message.
    """
    stderr = (error.stderr or "").strip()
    if stderr.startswith("stderr: '") and stderr.endswith("'"):
        stderr = stderr[len("stderr: '"):-1].strip()
    return stderr or str(error)


class GitBackend:
    """Runs the git subtree primitives the sync layer relies on."""

    def __init__(self, config: Union["Config", dict]):
        """Initialize the backend.

        Args:
            config: Configuration dictionary or Config object
        """
        self.config = config
        self.dry_run = config.get("dry_run", False)

    def _get_repo(self, path: Union[str, Path]) -> git.Repo:
        """Open the repository at path.

        Returns:
            git.Repo: A fresh repository instance
        """
        return git.Repo(str(path))

    def current_repo_root(self, start: Optional[Union[str, Path]] = None) -> Path:
        """Top-level directory of the repository enclosing start (default: cwd)."""
        start = Path(start) if start is not None else Path(os.getcwd())
        try:
            repo = git.Repo(str(start), search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise NotARepositoryError(str(start))

        try:
            if repo.working_tree_dir is None:
                raise NotARepositoryError(str(start))
            return Path(repo.working_tree_dir)
        finally:
            repo.close()

    def split_push(self, repo_root: Union[str, Path], prefix: str, url: str, branch: str) -> str:
        """Push the history of prefix to url/branch (git subtree push)."""
        return self._subtree(repo_root, "push", prefix, url, branch)

    def squash_pull(self, repo_root: Union[str, Path], prefix: str, url: str, branch: str) -> str:
        """Merge url/branch into prefix as one squashed commit (git subtree pull --squash)."""
        return self._subtree(repo_root, "pull", prefix, url, branch, "--squash")

    def subtree_add(self, repo_root: Union[str, Path], prefix: str, url: str, branch: str) -> str:
        """Register prefix as a squashed subtree of url/branch (git subtree add --squash)."""
        return self._subtree(repo_root, "add", prefix, url, branch, "--squash")

    def _subtree(self, repo_root, action: str, prefix: str, url: str, branch: str, *extra: str) -> str:
        args = [action, f"--prefix={prefix}", url, branch, *extra]
        display_cmd = "git subtree " + " ".join(args)

        if self.dry_run:
            console.print(f"[yellow]Would run: {escape(display_cmd)}[/yellow]")
            logger.info(f"[dry-run] {display_cmd}")
            return ""

        logger.info(f"Executing: {display_cmd} (in {repo_root})")
        repo = self._get_repo(repo_root)
        try:
            output = repo.git.subtree(*args)
        except git.exc.GitCommandError as e:
            stderr = _command_stderr(e)
            logger.debug(f"{display_cmd} failed with status {e.status}: {stderr}")
            raise GitOperationError(f"subtree {action}", prefix, stderr)
        finally:
            repo.close()

        logger.debug(f"{display_cmd} output: {output}")
        return output
