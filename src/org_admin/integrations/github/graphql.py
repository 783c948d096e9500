from typing import Any

import httpx
import structlog

from org_admin.core.errors import GitHubGraphQLError

logger = structlog.get_logger(__name__)


class GitHubGraphQLClient:
    def __init__(self, token: str, endpoint: str = "https://api.github.com/graphql", timeout: float = 30.0):
        self.token = token
        self.endpoint = endpoint
        self.timeout = timeout

    async def execute_query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Executes a GraphQL query against the GitHub API.

        Args:
            query: The GraphQL query string.
            variables: A dictionary of variables for the query.

        Returns:
            The ``data`` member of the JSON response.

        Raises:
            httpx.HTTPStatusError: If the request fails with a non-200 status code.
            GitHubGraphQLError: If the response carries GraphQL errors.
        """
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "User-Agent": "org-admin-cli",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint, json={"query": query, "variables": variables}, headers=headers
                )
                response.raise_for_status()

                payload = response.json()
                if not isinstance(payload, dict):
                    raise GitHubGraphQLError([{"message": "Expected a JSON object from the GraphQL API"}])

        except httpx.HTTPStatusError as e:
            logger.error("graphql_request_failed", status=e.response.status_code)
            raise

        if payload.get("errors"):
            logger.error("graphql_query_errors", errors=payload["errors"])
            raise GitHubGraphQLError(payload["errors"])

        data = payload.get("data")
        if not isinstance(data, dict):
            raise GitHubGraphQLError([{"message": "Response did not contain data"}])
        return data
