"""Command variants produced by the CLI parser."""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Union


class CommandKind(Enum):
    """Subcommands understood by git-subrepo-keeper."""
    INIT = "init"
    PUSH = "push"
    PULL = "pull"
    SPLIT = "split"
    LIST = "list"
    INSTALL_ALIASES = "install-aliases"


@dataclass(frozen=True)
class InitCommand:
    directory: str
    url: str
    branch: Optional[str] = None
    marker_format: Optional[str] = None
    kind: CommandKind = CommandKind.INIT


@dataclass(frozen=True)
class SyncCommand:
    """push or pull; kind tells which."""
    kind: CommandKind
    target: Optional[str] = None
    branch: Optional[str] = None


@dataclass(frozen=True)
class SplitCommand:
    folder: str
    repo_name: str
    owner: str
    branch: Optional[str] = None
    private: bool = False
    kind: CommandKind = CommandKind.SPLIT


@dataclass(frozen=True)
class ListCommand:
    kind: CommandKind = CommandKind.LIST


@dataclass(frozen=True)
class InstallAliasesCommand:
    scope: str = "global"
    kind: CommandKind = CommandKind.INSTALL_ALIASES


Command = Union[InitCommand, SyncCommand, SplitCommand, ListCommand, InstallAliasesCommand]
