"""Data models for git-subrepo-keeper."""

from .marker import Marker, MarkerEntry, MarkerFormat, SyncInvocation, ResolvedSync, SyncResult
from .command import (
    Command,
    CommandKind,
    InitCommand,
    SyncCommand,
    SplitCommand,
    ListCommand,
    InstallAliasesCommand,
)

__all__ = [
    "Marker",
    "MarkerEntry",
    "MarkerFormat",
    "SyncInvocation",
    "ResolvedSync",
    "SyncResult",
    "Command",
    "CommandKind",
    "InitCommand",
    "SyncCommand",
    "SplitCommand",
    "ListCommand",
    "InstallAliasesCommand",
]
