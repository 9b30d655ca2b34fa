"""GitHub API integration service"""
import os
from typing import Optional, TYPE_CHECKING, Union
from github import Auth, Github, GithubException

from git_subrepo_keeper.exceptions import GitHubAPIError
from git_subrepo_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_subrepo_keeper.config import Config

logger = get_logger(__name__)


class GitHubService:
    def __init__(self, config: Union['Config', dict]):
        """Initialize the service."""
        self.config = config
        self.github_host = config.get('github_host', 'github.com')
        self.github_token = config.get('github_token') or os.environ.get('GITHUB_TOKEN')
        self.github: Optional[Github] = None

    @property
    def enabled(self) -> bool:
        return bool(self.github_token)

    def remote_url(self, owner: str, repo_name: str) -> str:
        """HTTPS clone URL of owner/repo_name."""
        return f"https://{self.github_host}/{owner}/{repo_name}.git"

    def _client(self) -> Github:
        if self.github is None:
            if self.github_host == "github.com":
                self.github = Github(auth=Auth.Token(self.github_token))
            else:
                # GitHub Enterprise exposes the API under /api/v3
                self.github = Github(
                    base_url=f"https://{self.github_host}/api/v3",
                    auth=Auth.Token(self.github_token),
                )
        return self.github

    def create_repository(self, owner: str, repo_name: str, private: bool = False) -> bool:
        """Create owner/repo_name.

        Returns:
            True if the repository was created, False if it already existed
        """
        if not self.enabled:
            raise GitHubAPIError("create_repository", "no GitHub token configured (set GITHUB_TOKEN)")

        try:
            gh = self._client()
            user = gh.get_user()
            if user.login.lower() == owner.lower():
                repo = user.create_repo(repo_name, private=private)
            else:
                repo = gh.get_organization(owner).create_repo(repo_name, private=private)
            logger.info(f"[GitHub] Created repository {repo.full_name}")
            return True
        except GithubException as e:
            if e.status == 422:
                logger.info(f"[GitHub] Repository {owner}/{repo_name} already exists, continuing")
                return False
            message = e.data.get("message") if isinstance(e.data, dict) else str(e)
            raise GitHubAPIError("create_repository", f"{owner}/{repo_name}: {message}")
