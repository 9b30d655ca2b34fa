"""Core functionality for git-subrepo-keeper"""

import dataclasses
import os
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

from rich.console import Console
from rich.markup import escape

from git_subrepo_keeper.config import Config
from git_subrepo_keeper.constants import ROOT_PREFIX
from git_subrepo_keeper.exceptions import GitHubAPIError, GitOperationError, InvalidArgumentError
from git_subrepo_keeper.logging_config import get_logger
from git_subrepo_keeper.models.marker import Marker, MarkerEntry, SyncInvocation, SyncResult
from git_subrepo_keeper.services.display_service import DisplayService
from git_subrepo_keeper.services.git import GitBackend
from git_subrepo_keeper.services.github_service import GitHubService
from git_subrepo_keeper.services.marker_store import MarkerStore
from git_subrepo_keeper.services.subtree_sync import SubtreeSync

console = Console()
logger = get_logger(__name__)


class SubrepoKeeper:
    """Entry point tying markers, git subtree and GitHub together."""

    def __init__(
        self,
        cwd: Union[str, Path],
        config: Union[Config, dict],
        backend: Optional[GitBackend] = None,
        github_service: Optional[GitHubService] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize SubrepoKeeper.

        Args:
            cwd: Directory the command was invoked from
            config: Configuration dict or Config object
            backend: git backend, a GitPython one by default
            github_service: GitHub client used by split
            environ: Environment to read GIT_PREFIX from (defaults to os.environ)
        """
        if isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config
        self.verbose = config.get("verbose", False)
        self.debug_mode = config.get("debug", False)
        self.environ = os.environ if environ is None else environ

        self.cwd = Path(cwd)
        self.backend = backend or GitBackend(self.config)
        self.repo_root = self.backend.current_repo_root(self.cwd)

        self.store = MarkerStore(self.repo_root, self.config)
        self.sync = SubtreeSync(self.store, self.backend, self.config)
        self.github_service = github_service or GitHubService(self.config)
        self.display_service = DisplayService(verbose=self.verbose, debug=self.debug_mode)

        logger.debug(f"Repository root: {self.repo_root} | prefix: '{self.invocation_prefix}'")

    @property
    def invocation_prefix(self) -> str:
        """Caller's directory relative to the repository root.

        Git exports GIT_PREFIX to ``!`` aliases, which run from the top level;
        otherwise the prefix is derived from the working directory.
        """
        git_prefix = self.environ.get("GIT_PREFIX")
        if git_prefix is not None:
            return git_prefix.rstrip("/")

        relative = os.path.relpath(self.cwd.resolve(), self.repo_root.resolve())
        if relative == "." or relative.startswith(".."):
            return ""
        return Path(relative).as_posix()

    @property
    def user_dir(self) -> Path:
        """Directory relative paths typed by the user are resolved against.

        Git runs ``!`` aliases from the top level, so their arguments are
        relative to the repository root.
        """
        if self.environ.get("GIT_PREFIX") is not None:
            return self.repo_root
        return self.cwd

    def _invocation(self, target: Optional[str], branch: Optional[str]) -> SyncInvocation:
        return SyncInvocation(
            repo_root=self.repo_root,
            invocation_prefix=self.invocation_prefix,
            explicit_target=target,
            explicit_branch=branch,
        )

    def _prefix_for(self, directory: Path) -> str:
        """Path of directory relative to the repository root, as git subtree wants it."""
        relative = os.path.relpath(directory.resolve(), self.repo_root.resolve())
        if relative.startswith(".."):
            raise InvalidArgumentError("directory", f"{directory} is outside the repository {self.repo_root}")
        return ROOT_PREFIX if relative == "." else Path(relative).as_posix()

    def _store_for(self, marker_format: Optional[str]) -> MarkerStore:
        if not marker_format or marker_format == self.config.marker_format:
            return self.store
        return MarkerStore(self.repo_root, dataclasses.replace(self.config, marker_format=marker_format))

    def init(
        self,
        directory: str,
        url: str,
        branch: Optional[str] = None,
        marker_format: Optional[str] = None,
    ) -> Tuple[Path, Marker]:
        """Start tracking directory against url/branch."""
        if not directory or not directory.strip():
            raise InvalidArgumentError("directory", "a directory is required")
        target = self.user_dir / directory.rstrip("/")
        marker = self._store_for(marker_format).create(target, url, branch)
        self.display_service.display_marker_created(target, marker)
        return target, marker

    def push(self, target: Optional[str] = None, branch: Optional[str] = None) -> SyncResult:
        """Push the governing subrepo to its remote."""
        result = self.sync.push(self._invocation(target, branch))
        self.display_service.display_sync_result(result)
        return result

    def pull(self, target: Optional[str] = None, branch: Optional[str] = None) -> SyncResult:
        """Pull the governing subrepo from its remote."""
        result = self.sync.pull(self._invocation(target, branch))
        self.display_service.display_sync_result(result)
        return result

    def split(
        self,
        folder: str,
        repo_name: str,
        owner: str,
        branch: Optional[str] = None,
        private: bool = False,
    ) -> Marker:
        """Turn folder into its own GitHub repository and track it."""
        for name, value in (("folder", folder), ("repo_name", repo_name), ("owner", owner)):
            if not value or not value.strip():
                raise InvalidArgumentError(name, f"{name} is required")

        branch = (branch or "").strip() or self.config.default_branch
        directory = self.user_dir / folder.rstrip("/")
        prefix = self._prefix_for(directory)
        url = self.github_service.remote_url(owner, repo_name)

        console.print(f"--- Step 1: Creating remote repository {owner}/{repo_name} ---", markup=False)
        if self.config.dry_run:
            console.print(f"[yellow]Would create {escape(owner)}/{escape(repo_name)}[/yellow]")
        elif not self.github_service.enabled:
            logger.warning("No GitHub token found; assuming the remote repository already exists")
            console.print("[yellow]GitHub token not found - skipping repository creation[/yellow]")
        else:
            try:
                created = self.github_service.create_repository(owner, repo_name, private=private)
            except GitHubAPIError:
                logger.error(f"Could not create {owner}/{repo_name}")
                raise
            if not created:
                console.print("Repo already exists, continuing...")

        console.print(f"--- Step 2: Pushing {prefix} history to {repo_name} ---", markup=False)
        output = self.backend.split_push(self.repo_root, prefix, url, branch)
        if output:
            console.print(output, markup=False, highlight=False)

        console.print("--- Step 3: Re-adding as a tracked subtree ---")
        try:
            self.backend.subtree_add(self.repo_root, prefix, url, branch)
        except GitOperationError as e:
            logger.info(f"subtree add skipped: {e.message}")
            console.print("Subtree already linked.")

        marker = self.store.create(directory, url, branch)
        self.display_service.display_marker_created(directory, marker)
        self.display_service.display_split_summary(folder.rstrip("/"))
        return marker

    def list_markers(self) -> List[MarkerEntry]:
        """Show every tracked directory in the repository."""
        entries = self.store.find_all(self.repo_root)
        self.display_service.display_marker_table(entries, self.repo_root)
        return entries
