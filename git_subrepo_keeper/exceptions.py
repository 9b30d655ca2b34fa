"""Custom exceptions for git-subrepo-keeper"""

from typing import Optional


class SubrepoKeeperError(Exception):
    """Base exception for all git-subrepo-keeper errors."""
    pass


class InvalidArgumentError(SubrepoKeeperError):
    """Exception raised when a required parameter is missing or unusable."""

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        self.message = message

        error_msg = f"Invalid argument '{argument}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class MarkerNotFoundError(SubrepoKeeperError):
    """Exception raised when no marker governs a directory or an invocation."""

    def __init__(self, path: str, prefix: Optional[str] = None, target: Optional[str] = None):
        self.path = path
        self.prefix = prefix
        self.target = target

        error_msg = f"Marker not found at {path}"
        if prefix is not None:
            error_msg += f" (current git prefix: '{prefix}'"
            if target:
                error_msg += f", target: '{target}'"
            error_msg += ")"

        super().__init__(error_msg)


class CorruptMarkerError(SubrepoKeeperError):
    """Exception raised when a marker file cannot be parsed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Corrupt marker file {path}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitOperationError(SubrepoKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, prefix: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.prefix = prefix
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if prefix:
            error_msg += f" for prefix '{prefix}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NotARepositoryError(GitOperationError):
    """Exception raised when a path is not inside a git working tree."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("find_repository", message=f"{path} is not inside a git working tree")


class GitHubAPIError(SubrepoKeeperError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
