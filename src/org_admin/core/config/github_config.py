"""
GitHub configuration.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """GitHub configuration."""

    token: str
    api_base_url: str = "https://api.github.com"
    graphql_url: str = "https://api.github.com/graphql"
    admin_repo: str = "org-admin"
