"""
Core error classes for the org-admin application.
"""

from typing import Any


class OrgAdminError(Exception):
    """Base class for every error raised by org-admin."""

    pass


class ConfigurationError(OrgAdminError):
    """Raised when required configuration (e.g. credentials) is missing."""

    pass


class ValidationError(OrgAdminError):
    """Raised when a request is invalid and must not be executed."""

    pass


class UnknownTeamError(ValidationError):
    """Raised when one or more team slugs do not exist in the organization."""

    def __init__(self, slugs: list[str]) -> None:
        self.slugs = slugs
        super().__init__(f"Unknown team(s): {', '.join(slugs)}")


class UserNotFoundError(ValidationError):
    """Raised when a GitHub user does not exist."""

    def __init__(self, login: str) -> None:
        self.login = login
        super().__init__(f"GitHub user not found: {login}")


class GitHubGraphQLError(OrgAdminError):
    """Raised when GitHub GraphQL API returns errors in the response."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__(f"GraphQL errors: {errors}")


class GitHubAPIError(OrgAdminError):
    """Raised when a GitHub REST call does not succeed."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        super().__init__(f"GitHub API returned {status}: {message}")


class NpmCommandError(OrgAdminError):
    """Raised when an npm CLI invocation exits with a non-zero code."""

    def __init__(self, cmd: list[str], returncode: int | None, stdout: str, stderr: str) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"{' '.join(cmd)} returned code {returncode}\nSTDOUT: {stdout}\nSTDERR: {stderr}")


class OTPRequiredError(NpmCommandError):
    """Raised when the npm registry requires a one-time password for the operation."""

    pass
