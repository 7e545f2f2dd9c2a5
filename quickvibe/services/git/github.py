"""GitHub issue integration service"""

import os
import re
from typing import Optional, List, Tuple, TYPE_CHECKING, Union
from urllib.parse import urlparse

import git
from github import Github, Auth, GithubException

from quickvibe.exceptions import GitHubAPIError
from quickvibe.models.issue import Issue
from quickvibe.logging_config import get_logger

if TYPE_CHECKING:
    from quickvibe.config import Config

logger = get_logger(__name__)

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
MAX_SLUG_LENGTH = 40


def parse_github_url(url: str) -> Tuple[str, str]:
    """Extract (owner, repo) from an SSH or HTTPS GitHub remote URL.

    Raises:
        GitHubAPIError: If the URL does not point at a GitHub repository
    """
    url = url.strip()
    if url.startswith("git@github.com:"):
        path = url[len("git@github.com:"):]
    elif url.startswith(("https://github.com/", "http://github.com/", "ssh://git@github.com/")):
        path = urlparse(url).path.strip("/")
    else:
        raise GitHubAPIError("detect_repository", f"not a GitHub repository: {url}")

    if path.endswith(".git"):
        path = path[:-4]
    parts = path.split("/")
    if len(parts) != 2 or not all(parts):
        raise GitHubAPIError("detect_repository", f"invalid GitHub URL: {url}")
    return parts[0], parts[1]


class GitHubService:
    """Fetch issues for a repository so a worktree can be started from one."""

    def __init__(self, config: Union["Config", dict]):
        """Initialize the service.

        The token is optional; without it only public repositories work and
        the API rate limit is much lower.
        """
        self.config = config
        self.github_token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        self.github: Optional[Github] = None

    def _client(self) -> Github:
        if self.github is None:
            if self.github_token:
                self.github = Github(auth=Auth.Token(self.github_token))
            else:
                logger.info("[GitHub] No token configured, using anonymous API access")
                self.github = Github()
        return self.github

    def _github_config(self):
        github_config = self.config.get("github")
        if isinstance(github_config, dict):
            from quickvibe.config import GitHubConfig

            github_config = GitHubConfig(**github_config)
        return github_config

    @staticmethod
    def detect_repository(repo_path: str) -> Tuple[str, str]:
        """Determine (owner, repo) from the origin remote of a repository.

        Raises:
            GitHubAPIError: If there is no origin remote or it is not on GitHub
        """
        try:
            url = git.Git(repo_path).remote("get-url", "origin")
        except git.exc.CommandError as e:
            raise GitHubAPIError("detect_repository", f"no git remote found: {e}") from e
        return parse_github_url(url)

    def fetch_issues(self, owner: str, repo: str) -> List[Issue]:
        """Fetch issues in the configured state, pull requests excluded.

        Raises:
            GitHubAPIError: On API failure
        """
        github_config = self._github_config()
        try:
            gh_repo = self._client().get_repo(f"{owner}/{repo}")
            issues: List[Issue] = []
            for item in gh_repo.get_issues(state=github_config.default_state):
                # The issues endpoint also returns pull requests
                if item.pull_request is not None:
                    continue
                issues.append(
                    Issue(number=item.number, title=item.title, state=item.state, url=item.html_url)
                )
                if len(issues) >= github_config.max_issues:
                    break
        except GithubException as e:
            logger.error(f"[GitHub] Failed to fetch issues for {owner}/{repo}: {e}")
            raise GitHubAPIError("fetch_issues", str(e)) from e

        logger.debug(f"[GitHub] Fetched {len(issues)} issues for {owner}/{repo}")
        return issues

    def fetch_issue_body(self, owner: str, repo: str, number: int) -> str:
        """Fetch the full body of a single issue.

        Raises:
            GitHubAPIError: On API failure
        """
        try:
            issue = self._client().get_repo(f"{owner}/{repo}").get_issue(number)
        except GithubException as e:
            raise GitHubAPIError("fetch_issue_body", str(e)) from e
        return issue.body or ""

    def branch_name_for_issue(self, issue: Issue) -> str:
        """Branch name for a worktree started from an issue: `<prefix><number>-<slug>`."""
        prefix = self._github_config().branch_prefix
        slug = _SLUG_INVALID.sub("-", issue.title.lower()).strip("-")[:MAX_SLUG_LENGTH].rstrip("-")
        name = f"{prefix}{issue.number}"
        return f"{name}-{slug}" if slug else name

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
            self.github = None
