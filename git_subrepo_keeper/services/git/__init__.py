"""Git-related services for git-subrepo-keeper."""

from .backend import GitBackend
from .aliases import AliasInstaller

__all__ = [
    "GitBackend",
    "AliasInstaller",
]
