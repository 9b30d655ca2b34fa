"""Command-line interface for git-subrepo-keeper"""

import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_subrepo_keeper.cli.args import parse_args, to_command
from git_subrepo_keeper.config import Config
from git_subrepo_keeper.core import SubrepoKeeper
from git_subrepo_keeper.exceptions import (
    InvalidArgumentError,
    NotARepositoryError,
    SubrepoKeeperError,
)
from git_subrepo_keeper.logging_config import get_logger, setup_logging
from git_subrepo_keeper.models.command import (
    Command,
    CommandKind,
    InstallAliasesCommand,
)
from git_subrepo_keeper.services.display_service import DisplayService
from git_subrepo_keeper.services.git import AliasInstaller, GitBackend

console = Console()
logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_ARGUMENT = 2


def install_aliases(command: InstallAliasesCommand, config: Config) -> None:
    """Install aliases; global scope works outside any repository."""
    try:
        repo_root = GitBackend(config).current_repo_root(os.getcwd())
    except NotARepositoryError:
        repo_root = None
    aliases = AliasInstaller(config, repo_root).install(command.scope)
    DisplayService(verbose=config.verbose, debug=config.debug).display_aliases(aliases, command.scope)


def dispatch(command: Command, config: Config, cwd: str) -> None:
    """Run a command."""
    if command.kind is CommandKind.INSTALL_ALIASES:
        install_aliases(command, config)
        return

    keeper = SubrepoKeeper(cwd, config)
    if command.kind is CommandKind.INIT:
        keeper.init(command.directory, command.url, command.branch, command.marker_format)
    elif command.kind is CommandKind.PUSH:
        keeper.push(command.target, command.branch)
    elif command.kind is CommandKind.PULL:
        keeper.pull(command.target, command.branch)
    elif command.kind is CommandKind.SPLIT:
        keeper.split(command.folder, command.repo_name, command.owner, command.branch, command.private)
    elif command.kind is CommandKind.LIST:
        keeper.list_markers()
    else:
        raise ValueError(f"Unhandled command: {command.kind}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        # Command-line flags only override the config file when given
        config = Config.from_file(
            parsed_args.config,
            verbose=parsed_args.verbose or None,
            debug=parsed_args.debug or None,
            dry_run=parsed_args.dry_run or None,
        )

        if config.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                if key == "github_token" and value:
                    value = "***"
                console.print(f"  {key}: {value}")

        dispatch(to_command(parsed_args), config, os.getcwd())
        return EXIT_OK
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return EXIT_ERROR
    except InvalidArgumentError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_INVALID_ARGUMENT
    except (SubrepoKeeperError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
