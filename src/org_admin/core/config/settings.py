"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from org_admin.core.config.github_config import GitHubConfig
from org_admin.core.config.logging_config import LoggingConfig
from org_admin.core.config.npm_config import NpmConfig
from org_admin.core.config.teams_config import TeamsConfig
from org_admin.core.constants import DEFAULT_ORG
from org_admin.core.errors import ConfigurationError

# Load environment variables from a .env file
load_dotenv()


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        api_base_url = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
        self.github = GitHubConfig(
            token=os.getenv("GITHUB_TOKEN", ""),
            api_base_url=api_base_url,
            graphql_url=os.getenv("GITHUB_GRAPHQL_URL", f"{api_base_url}/graphql"),
            admin_repo=os.getenv("ORG_ADMIN_REPO", "org-admin"),
        )

        self.default_org = os.getenv("GITHUB_ORG", DEFAULT_ORG)

        self.npm = NpmConfig(
            org=os.getenv("NPM_ORG") or None,
            teams=_split_list(os.getenv("NPM_TEAMS")),
            binary=os.getenv("NPM_BINARY", "npm"),
            enabled=_as_bool(os.getenv("NPM_SYNC"), True),
        )

        self.teams = TeamsConfig(
            leads=os.getenv("LEADS_TEAM", "leads"),
            emeritus=os.getenv("EMERITUS_TEAM", "emeritus"),
            onboarding=_split_list(os.getenv("ONBOARDING_TEAMS")) or ["collaborators"],
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            json=_as_bool(os.getenv("LOG_JSON"), False),
        )

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.token:
            errors.append("GITHUB_TOKEN environment variable is not set")

        if errors:
            raise ConfigurationError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
