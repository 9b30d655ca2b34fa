"""Command-line argument parsing for git-subrepo-keeper."""

import argparse
from typing import List, Optional

from git_subrepo_keeper.__version__ import __version__
from git_subrepo_keeper.constants import MARKER_FORMATS
from git_subrepo_keeper.models.command import (
    Command,
    CommandKind,
    InitCommand,
    InstallAliasesCommand,
    ListCommand,
    SplitCommand,
    SyncCommand,
)
from git_subrepo_keeper.services.git.aliases import SCOPES


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="git-subrepo-keeper",
        description="Keep folders in sync with their own repositories using git subtree",
        epilog="Each tracked folder holds a .subrepo marker with its remote URL and branch. "
        "'split' needs GITHUB_TOKEN (or 'github_token' in the config file) to create repositories.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-subrepo-keeper {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview mode - print git and GitHub operations without running them",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to a JSON config file (default: ~/.git-subrepo-keeper/config.json)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    init_parser = subparsers.add_parser(
        CommandKind.INIT.value, help="Start tracking a directory against a remote repository"
    )
    init_parser.add_argument("directory", help="Directory to track (created if missing)")
    init_parser.add_argument("url", help="Remote repository URL")
    init_parser.add_argument("branch", nargs="?", help="Remote branch (default: main)")
    init_parser.add_argument(
        "--format",
        dest="marker_format",
        choices=list(MARKER_FORMATS),
        help="Marker file format (default: from config, 'line')",
    )

    for kind, help_text in (
        (CommandKind.PUSH, "Split the tracked directory's history and push it to its remote"),
        (CommandKind.PULL, "Squash-merge the remote branch into the tracked directory"),
    ):
        sync_parser = subparsers.add_parser(kind.value, help=help_text)
        sync_parser.add_argument(
            "target", nargs="?", help="Tracked directory, relative to the repository root"
        )
        sync_parser.add_argument(
            "-b", "--branch", help="Remote branch to use (stored in the marker if it differs)"
        )

    split_parser = subparsers.add_parser(
        CommandKind.SPLIT.value, help="Move a folder into its own GitHub repository and track it"
    )
    split_parser.add_argument("folder", help="Folder to split out")
    split_parser.add_argument("repo_name", help="Name of the new repository")
    split_parser.add_argument("owner", help="GitHub user or organisation owning the repository")
    split_parser.add_argument("-b", "--branch", help="Branch to push to (default: main)")
    split_parser.add_argument(
        "--private", action="store_true", help="Create a private repository"
    )

    subparsers.add_parser(CommandKind.LIST.value, help="List tracked directories")

    aliases_parser = subparsers.add_parser(
        CommandKind.INSTALL_ALIASES.value, help="Install git subinit/subpush/subpull aliases"
    )
    aliases_parser.add_argument(
        "--scope", choices=list(SCOPES), default="global", help="Git config scope (default: global)"
    )

    return parser


def to_command(parsed_args: argparse.Namespace) -> Command:
    """Turn parsed arguments into a command value."""
    kind = CommandKind(parsed_args.command)
    if kind is CommandKind.INIT:
        return InitCommand(
            directory=parsed_args.directory,
            url=parsed_args.url,
            branch=parsed_args.branch,
            marker_format=parsed_args.marker_format,
        )
    if kind in (CommandKind.PUSH, CommandKind.PULL):
        return SyncCommand(kind=kind, target=parsed_args.target, branch=parsed_args.branch)
    if kind is CommandKind.SPLIT:
        return SplitCommand(
            folder=parsed_args.folder,
            repo_name=parsed_args.repo_name,
            owner=parsed_args.owner,
            branch=parsed_args.branch,
            private=parsed_args.private,
        )
    if kind is CommandKind.LIST:
        return ListCommand()
    if kind is CommandKind.INSTALL_ALIASES:
        return InstallAliasesCommand(scope=parsed_args.scope)
    raise ValueError(f"Unhandled command: {kind}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
