"""Configuration handling for git-subrepo-keeper"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

from git_subrepo_keeper.constants import (
    DEFAULT_ALIAS_COMMAND,
    DEFAULT_BRANCH,
    DEFAULT_CONFIG_PATH,
    MARKER_FILENAME,
    MARKER_FORMATS,
)
from git_subrepo_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Configuration for git-subrepo-keeper with validation."""

    # Marker handling
    default_branch: str = DEFAULT_BRANCH
    marker_filename: str = MARKER_FILENAME
    marker_format: str = "line"  # line, keyvalue
    refresh_recorded_root: bool = False  # Rewrite the recorded root when the repo moved

    # Execution modes
    dry_run: bool = False
    verbose: bool = False
    debug: bool = False

    # GitHub integration (used by split)
    github_token: Optional[str] = None
    github_host: str = "github.com"

    # Command the installed git aliases call
    alias_command: str = DEFAULT_ALIAS_COMMAND

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_default_branch()
        self._validate_marker_filename()
        self._validate_marker_format()
        self._validate_github_host()
        self._validate_alias_command()

    def _validate_default_branch(self):
        """Validate default_branch is a single non-empty token."""
        if not self.default_branch or not self.default_branch.strip():
            raise ValueError("default_branch cannot be empty")
        self.default_branch = self.default_branch.strip()
        if any(ch.isspace() for ch in self.default_branch):
            raise ValueError(f"default_branch cannot contain whitespace, got '{self.default_branch}'")

    def _validate_marker_filename(self):
        """Validate marker_filename is a bare file name."""
        name = (self.marker_filename or "").strip()
        if not name or "/" in name or name in (".", ".."):
            raise ValueError(f"marker_filename must be a plain file name, got '{self.marker_filename}'")
        self.marker_filename = name

    def _validate_marker_format(self):
        """Validate marker_format is one of allowed values."""
        if self.marker_format not in MARKER_FORMATS:
            raise ValueError(
                f"marker_format must be one of {list(MARKER_FORMATS)}, got '{self.marker_format}'"
            )

    def _validate_github_host(self):
        """Validate github_host is not empty."""
        if not self.github_host or not self.github_host.strip():
            raise ValueError("github_host cannot be empty")
        self.github_host = self.github_host.strip().rstrip("/")

    def _validate_alias_command(self):
        """Validate alias_command is not empty."""
        if not self.alias_command or not self.alias_command.strip():
            raise ValueError("alias_command cannot be empty")
        self.alias_command = self.alias_command.strip()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known_fields)
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {', '.join(unknown)}")

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None, **overrides) -> "Config":
        """Load config from a JSON file, then apply keyword overrides.

        A missing file yields the defaults. Overrides whose value is None are
        skipped so unset command-line flags keep the file's value.
        """
        config_path = Path(path).expanduser() if path else DEFAULT_CONFIG_PATH
        data = {}
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
            if not isinstance(data, dict):
                raise ValueError(f"Config file {config_path} must contain a JSON object")
            logger.debug(f"Loaded config from {config_path}")
        else:
            logger.debug(f"No config file at {config_path}, using defaults")

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)
