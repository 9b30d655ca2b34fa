"""Core functionality for git-subrepo-keeper."""

from .subrepo_keeper import SubrepoKeeper

__all__ = ["SubrepoKeeper"]
