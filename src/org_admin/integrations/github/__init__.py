"""
GitHub API adapter.

This package provides integrations for GitHub API interactions.
"""

from org_admin.integrations.github.api import GitHubClient
from org_admin.integrations.github.graphql import GitHubGraphQLClient
from org_admin.integrations.github.org_graph import OrgGraphProvider

__all__ = [
    "GitHubClient",
    "GitHubGraphQLClient",
    "OrgGraphProvider",
]
