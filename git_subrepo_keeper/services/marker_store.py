"""Marker file storage.

A marker lives at ``<directory>/.subrepo`` and records the remote URL, the
branch and the repository root at creation time. Two formats are read:

- ``line``: ``<url> <branch> <root>`` on a single line. This is what the
  ``git subinit`` shell alias historically wrote. Everything after the second
  space belongs to the root, so only the URL and branch must be free of
  whitespace.
- ``keyvalue``: ``url=``, ``branch=`` and ``root=`` lines with percent-escaped
  values, so any character can be stored.

Writes go through a temp file in the same directory followed by a rename,
so a reader never sees half a marker.
"""
import os
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote, unquote

from git_subrepo_keeper.config import Config
from git_subrepo_keeper.constants import SKIP_DIRS
from git_subrepo_keeper.exceptions import (
    CorruptMarkerError,
    InvalidArgumentError,
    MarkerNotFoundError,
)
from git_subrepo_keeper.logging_config import get_logger
from git_subrepo_keeper.models.marker import Marker, MarkerEntry, MarkerFormat

logger = get_logger(__name__)

PathLike = Union[str, Path]

KEY_URL = "url"
KEY_BRANCH = "branch"
KEY_ROOT = "root"
# Characters kept verbatim in keyvalue values; everything else is escaped
_SAFE_CHARS = "/:@~+,;._-"


class MarkerStore:
    """Reads and writes per-directory markers."""

    def __init__(self, repo_root: PathLike, config: Optional[Config] = None):
        """Initialize the store.

        Args:
            repo_root: Root of the current repository, recorded in new markers
            config: Configuration (marker file name, format, default branch)
        """
        self.repo_root = Path(repo_root)
        self.config = config or Config()
        self.filename = self.config.marker_filename
        self.format = MarkerFormat(self.config.marker_format)

    def marker_path(self, directory: PathLike) -> Path:
        """Path of the marker file for a directory."""
        return Path(directory) / self.filename

    def exists(self, directory: PathLike) -> bool:
        """Check whether a directory has a marker."""
        return self.marker_path(directory).is_file()

    def create(self, directory: PathLike, url: str, branch: Optional[str] = None) -> Marker:
        """Create (or overwrite) the marker of a directory.

        Args:
            directory: Directory to track; created if missing
            url: Remote repository URL
            branch: Remote branch, defaults to the configured default branch

        Returns:
            The marker that was written
        """
        if directory is None or not str(directory).strip():
            raise InvalidArgumentError("directory", "a directory is required")
        if not url or not url.strip():
            raise InvalidArgumentError("url", "a remote URL is required")

        branch = (branch or "").strip() or self.config.default_branch
        marker = Marker(url=url.strip(), branch=branch, recorded_root=str(self.repo_root))

        target = Path(directory)
        target.mkdir(parents=True, exist_ok=True)
        self.save(target, marker)
        logger.info(f"Created marker for {target}: {marker.url} ({marker.branch})")
        return marker

    def load(self, directory: PathLike) -> Marker:
        """Read the marker of a directory."""
        path = self.marker_path(directory)
        if not path.is_file():
            raise MarkerNotFoundError(str(path))

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise CorruptMarkerError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})")

        lines = [line for line in content.splitlines() if line.strip()]
        if lines and lines[0].startswith(f"{KEY_URL}="):
            marker = self._parse_keyvalue(path, lines)
        else:
            marker = self._parse_line(path, content.splitlines()[0] if content else "")

        logger.debug(f"Loaded marker {path}: {marker}")
        return marker

    def save(self, directory: PathLike, marker: Marker) -> None:
        """Overwrite the marker of a directory atomically."""
        path = self.marker_path(directory)
        data = self._serialize(marker)

        temp_file = path.with_name(f"{path.name}.tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename (POSIX systems guarantee atomicity)
            temp_file.replace(path)
            logger.debug(f"Saved marker {path}")
        finally:
            # Clean up temp file if the rename never happened
            if temp_file.exists():
                temp_file.unlink()

    def find_all(self, root: Optional[PathLike] = None) -> List[MarkerEntry]:
        """Find every marker under a directory (the repository root by default)."""
        root = Path(root) if root is not None else self.repo_root
        entries = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            if self.filename not in filenames:
                continue
            directory = Path(dirpath)
            try:
                entries.append(MarkerEntry(directory=directory, marker=self.load(directory)))
            except CorruptMarkerError as e:
                logger.warning(str(e))
                entries.append(MarkerEntry(directory=directory, error=e.message))
        return entries

    def _serialize(self, marker: Marker) -> str:
        """Render a marker in the configured format."""
        if self.format is MarkerFormat.KEYVALUE:
            return "".join(
                f"{key}={quote(value, safe=_SAFE_CHARS)}\n"
                for key, value in (
                    (KEY_URL, marker.url),
                    (KEY_BRANCH, marker.branch),
                    (KEY_ROOT, marker.recorded_root),
                )
            )

        for name, value in (("url", marker.url), ("branch", marker.branch)):
            if not value or any(ch.isspace() for ch in value):
                raise InvalidArgumentError(
                    name, f"'{value}' cannot be stored in a line marker (empty or contains whitespace)"
                )
        if "\n" in marker.recorded_root or "\r" in marker.recorded_root:
            raise InvalidArgumentError("recorded_root", "line markers cannot hold line breaks")
        return f"{marker.url} {marker.branch} {marker.recorded_root}\n"

    @staticmethod
    def _parse_line(path: Path, line: str) -> Marker:
        tokens = line.split(None, 2)
        if len(tokens) < 3:
            raise CorruptMarkerError(
                str(path), f"expected '<url> <branch> <root>', found {len(tokens)} field(s)"
            )
        url, branch, root = tokens
        return Marker(url=url, branch=branch, recorded_root=root.strip())

    @staticmethod
    def _parse_keyvalue(path: Path, lines: List[str]) -> Marker:
        values = {}
        for line in lines:
            key, sep, value = line.partition("=")
            if not sep:
                raise CorruptMarkerError(str(path), f"line without '=': {line!r}")
            values[key.strip()] = unquote(value.strip())

        missing = [key for key in (KEY_URL, KEY_BRANCH, KEY_ROOT) if not values.get(key)]
        if missing:
            raise CorruptMarkerError(str(path), f"missing {', '.join(missing)}")
        return Marker(url=values[KEY_URL], branch=values[KEY_BRANCH], recorded_root=values[KEY_ROOT])
