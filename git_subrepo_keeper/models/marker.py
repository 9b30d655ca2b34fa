"""Marker model and sync invocation records"""
from enum import Enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class MarkerFormat(Enum):
    """On-disk serialisation of a marker file."""
    LINE = "line"          # "<url> <branch> <root>" on one line
    KEYVALUE = "keyvalue"  # one escaped key=value per line


@dataclass
class Marker:
    """Association between a directory and the remote it syncs with."""
    url: str
    branch: str
    recorded_root: str

    def with_branch(self, branch: str, recorded_root: str) -> "Marker":
        """Copy of this marker pointing at another branch."""
        return Marker(url=self.url, branch=branch, recorded_root=recorded_root)


@dataclass
class SyncInvocation:
    """Inputs of a single push or pull."""
    repo_root: Path
    invocation_prefix: str = ""
    explicit_target: Optional[str] = None
    explicit_branch: Optional[str] = None


@dataclass
class ResolvedSync:
    """Outcome of resolving which marker governs an invocation."""
    subrepo_dir: Path
    prefix: str
    marker: Marker
    effective_branch: str
    marker_updated: bool = False


@dataclass
class SyncResult:
    """Result of a push or pull that reached the backend."""
    operation: str
    resolved: ResolvedSync
    output: str = ""


@dataclass
class MarkerEntry:
    """A marker found while scanning a repository."""
    directory: Path
    marker: Optional[Marker] = None
    error: Optional[str] = None  # Set when the marker file is corrupt
