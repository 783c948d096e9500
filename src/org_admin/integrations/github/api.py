from typing import Any

import aiohttp
import structlog

from org_admin.core.errors import GitHubAPIError, UserNotFoundError

logger = structlog.get_logger(__name__)


class GitHubClient:
    """
    A client for the GitHub REST API.

    Used for every mutating call (team memberships, issues) and for user
    profile lookups. Authenticates with a personal access token and keeps
    one pooled aiohttp session for the lifetime of a run.
    """

    def __init__(self, token: str, api_base_url: str = "https://api.github.com"):
        self._token = token
        self.api_base_url = api_base_url.rstrip("/")
        self._session: aiohttp.ClientSession | None = None

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "org-admin-cli",
        }

    async def get_user_profile(self, username: str) -> dict[str, Any]:
        """
        Fetch the public profile of a user.

        Raises:
            UserNotFoundError: If the user does not exist.
            GitHubAPIError: On any other non-200 response.
        """
        url = f"{self.api_base_url}/users/{username}"

        session = await self._get_session()
        async with session.get(url, headers=self._headers()) as response:
            if response.status == 200:
                return await response.json()
            if response.status == 404:
                logger.warning("user_not_found", username=username)
                raise UserNotFoundError(username)
            error_text = await response.text()
            logger.error("user_profile_fetch_failed", username=username, status=response.status)
            raise GitHubAPIError(response.status, error_text)

    async def add_team_member(self, org: str, team_slug: str, username: str, role: str = "member") -> dict[str, Any]:
        """
        Add a user to a team, or update the role they hold in it.
        """
        url = f"{self.api_base_url}/orgs/{org}/teams/{team_slug}/memberships/{username}"

        session = await self._get_session()
        async with session.put(url, headers=self._headers(), json={"role": role}) as response:
            if response.status == 200:
                logger.info("user_added_to_team", username=username, team=team_slug, role=role)
                return await response.json()
            error_text = await response.text()
            logger.error("user_add_to_team_failed", username=username, team=team_slug, status=response.status)
            raise GitHubAPIError(response.status, error_text)

    async def remove_team_member(self, org: str, team_slug: str, username: str) -> None:
        """Remove a user from a team."""
        url = f"{self.api_base_url}/orgs/{org}/teams/{team_slug}/memberships/{username}"

        session = await self._get_session()
        async with session.delete(url, headers=self._headers()) as response:
            if response.status == 204:
                logger.info("user_removed_from_team", username=username, team=team_slug)
                return
            error_text = await response.text()
            logger.error("user_remove_from_team_failed", username=username, team=team_slug, status=response.status)
            raise GitHubAPIError(response.status, error_text)

    async def create_issue(
        self, owner: str, repo: str, title: str, body: str, labels: list[str] | None = None
    ) -> dict[str, Any]:
        """Open an issue in a repository."""
        url = f"{self.api_base_url}/repos/{owner}/{repo}/issues"
        data = {"title": title, "body": body, "labels": labels or []}

        session = await self._get_session()
        async with session.post(url, headers=self._headers(), json=data) as response:
            if response.status == 201:
                result = await response.json()
                logger.info("issue_created", repo=f"{owner}/{repo}", number=result.get("number"))
                return result
            error_text = await response.text()
            logger.error("issue_creation_failed", repo=f"{owner}/{repo}", title=title, status=response.status)
            raise GitHubAPIError(response.status, error_text)

    async def close(self) -> None:
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session
