"""Installation of the subinit/subpush/subpull git aliases"""

from pathlib import Path
from typing import Dict, Optional, Union, TYPE_CHECKING

import git
from git.config import get_config_path

from git_subrepo_keeper.constants import GIT_ALIASES
from git_subrepo_keeper.exceptions import InvalidArgumentError
from git_subrepo_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_subrepo_keeper.config import Config

logger = get_logger(__name__)

SCOPES = ("global", "repository")


class AliasInstaller:
    """Writes shell aliases that forward to the git-subrepo-keeper CLI.

    Git runs ``!`` aliases from the top of the working tree and exports the
    caller's subdirectory as ``GIT_PREFIX``; the CLI reads it back as the
    invocation prefix.
    """

    def __init__(self, config: Union["Config", dict], repo_root: Optional[Union[str, Path]] = None):
        self.config = config
        self.repo_root = repo_root
        self.command = config.get("alias_command", "git-subrepo-keeper")

    def alias_values(self) -> Dict[str, str]:
        """Alias name -> alias definition."""
        return {alias: f"!{self.command} {subcommand}" for alias, subcommand in GIT_ALIASES.items()}

    def _config_writer(self, scope: str):
        if scope == "global":
            return git.GitConfigParser(get_config_path("global"), read_only=False)
        if self.repo_root is None:
            raise InvalidArgumentError("scope", "repository scope requires running inside a repository")
        return git.Repo(str(self.repo_root)).config_writer(config_level="repository")

    def install(self, scope: str = "global") -> Dict[str, str]:
        """Install the aliases at the given scope and return what was written."""
        if scope not in SCOPES:
            raise InvalidArgumentError("scope", f"must be one of {list(SCOPES)}, got '{scope}'")

        values = self.alias_values()
        if self.config.get("dry_run", False):
            logger.info(f"[dry-run] would install aliases at {scope} scope: {values}")
            return values

        writer = self._config_writer(scope)
        try:
            for alias, value in values.items():
                writer.set_value("alias", alias, value)
                logger.debug(f"Set alias.{alias} = {value}")
        finally:
            writer.release()

        logger.info(f"Installed git aliases ({', '.join(values)}) at {scope} scope")
        return values
