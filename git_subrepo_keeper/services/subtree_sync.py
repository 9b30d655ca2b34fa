"""Subtree synchronisation service.

Resolves which marker governs a push or pull and hands the resulting
prefix, URL and branch to the git backend. Resolution order:

1. the caller's prefix inside the repository, when it holds a marker;
2. the explicit target directory, when it holds a marker;
3. the repository root, when it holds a marker.

The only local mutation is rewriting the marker when the effective branch
differs from the stored one. It happens before the backend call and is
left in place if that call fails.
"""
import os
from pathlib import Path
from typing import Optional, Protocol, Union, TYPE_CHECKING

from git_subrepo_keeper.constants import ROOT_PREFIX
from git_subrepo_keeper.exceptions import InvalidArgumentError, MarkerNotFoundError
from git_subrepo_keeper.logging_config import get_logger
from git_subrepo_keeper.models.marker import ResolvedSync, SyncInvocation, SyncResult
from git_subrepo_keeper.services.marker_store import MarkerStore

if TYPE_CHECKING:
    from git_subrepo_keeper.config import Config

logger = get_logger(__name__)


class SubtreeBackend(Protocol):
    """What SubtreeSync needs from a VCS backend."""

    def split_push(self, repo_root: Union[str, Path], prefix: str, url: str, branch: str) -> str:
        ...

    def squash_pull(self, repo_root: Union[str, Path], prefix: str, url: str, branch: str) -> str:
        ...


def _normalize(relative: Optional[str]) -> str:
    """Strip trailing slashes and treat '.' as no path at all."""
    if not relative:
        return ""
    relative = relative.strip().rstrip("/")
    if relative in ("", "."):
        return ""
    while relative.startswith("./"):
        relative = relative[2:]
    return relative


def _relative_prefix(directory: Path, root: Path) -> Optional[str]:
    """Prefix of directory inside root, None when it lies outside."""
    relative = os.path.relpath(directory.resolve(), root.resolve())
    if relative == ".." or relative.startswith(".." + os.sep):
        return None
    return ROOT_PREFIX if relative == "." else Path(relative).as_posix()


class SubtreeSync:
    """Push and pull marked directories through git subtree."""

    def __init__(self, store: MarkerStore, backend: SubtreeBackend, config: Union["Config", dict]):
        self.store = store
        self.backend = backend
        self.config = config
        self.refresh_recorded_root = config.get("refresh_recorded_root", False)

    def resolve(self, invocation: SyncInvocation) -> ResolvedSync:
        """Find the governing marker and compute prefix and branch for an invocation."""
        repo_root = Path(invocation.repo_root)
        user_prefix = _normalize(invocation.invocation_prefix)
        target = _normalize(invocation.explicit_target)

        if user_prefix and self.store.exists(repo_root / user_prefix):
            subrepo_dir = repo_root / user_prefix
        elif target and self.store.exists(repo_root / target):
            subrepo_dir = repo_root / target
        elif self.store.exists(repo_root):
            subrepo_dir = repo_root
        else:
            attempted = repo_root / (target or user_prefix)
            raise MarkerNotFoundError(
                str(self.store.marker_path(attempted)),
                prefix=invocation.invocation_prefix or "",
                target=invocation.explicit_target,
            )

        prefix = _relative_prefix(subrepo_dir, repo_root)
        if prefix is None:
            raise InvalidArgumentError(
                "target", f"{invocation.explicit_target} is outside the repository {repo_root}"
            )

        marker = self.store.load(subrepo_dir)
        effective_branch = (invocation.explicit_branch or "").strip() or marker.branch

        logger.debug(f"Root: {repo_root} | Subrepo: {subrepo_dir} | Prefix: {prefix}")

        marker_updated = False
        root_moved = marker.recorded_root != str(repo_root)
        if effective_branch != marker.branch or (self.refresh_recorded_root and root_moved):
            updated = marker.with_branch(effective_branch, str(repo_root))
            self.store.save(subrepo_dir, updated)
            logger.info(
                f"Updated marker {self.store.marker_path(subrepo_dir)}: "
                f"branch {marker.branch} -> {updated.branch}"
            )
            marker = updated
            marker_updated = True
        elif root_moved:
            logger.debug(f"Marker records root {marker.recorded_root}, repository is at {repo_root}")

        return ResolvedSync(
            subrepo_dir=subrepo_dir,
            prefix=prefix,
            marker=marker,
            effective_branch=effective_branch,
            marker_updated=marker_updated,
        )

    def push(self, invocation: SyncInvocation) -> SyncResult:
        """Split the directory's history and push it to its remote branch."""
        resolved = self.resolve(invocation)
        logger.info(f"Pushing {resolved.prefix} to {resolved.marker.url} ({resolved.effective_branch})")
        output = self.backend.split_push(
            invocation.repo_root, resolved.prefix, resolved.marker.url, resolved.effective_branch
        )
        return SyncResult(operation="push", resolved=resolved, output=output or "")

    def pull(self, invocation: SyncInvocation) -> SyncResult:
        """Squash-merge the remote branch into the directory."""
        resolved = self.resolve(invocation)
        logger.info(f"Pulling {resolved.marker.url} ({resolved.effective_branch}) into {resolved.prefix}")
        output = self.backend.squash_pull(
            invocation.repo_root, resolved.prefix, resolved.marker.url, resolved.effective_branch
        )
        return SyncResult(operation="pull", resolved=resolved, output=output or "")
