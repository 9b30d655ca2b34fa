"""Shared constants for git-subrepo-keeper."""

from pathlib import Path

MARKER_FILENAME = ".subrepo"
DEFAULT_BRANCH = "main"

# Marker serialisation formats
MARKER_FORMAT_LINE = "line"
MARKER_FORMAT_KEYVALUE = "keyvalue"
MARKER_FORMATS = (MARKER_FORMAT_LINE, MARKER_FORMAT_KEYVALUE)

# Prefix handed to git subtree when the repository root is itself tracked
ROOT_PREFIX = "."

CONFIG_DIR = Path.home() / ".git-subrepo-keeper"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_ALIAS_COMMAND = "git-subrepo-keeper"

# git alias name -> CLI subcommand
GIT_ALIASES = {
    "subinit": "init",
    "subpush": "push",
    "subpull": "pull",
}

# Directories never searched for markers
SKIP_DIRS = {".git"}
