"""
Per-invocation options, validated once at the CLI boundary.
"""

from dataclasses import dataclass, field

from org_admin.core.constants import DEFAULT_MONTHS_INACTIVE_THRESHOLD, DEFAULT_ORG
from org_admin.core.errors import ValidationError


@dataclass(frozen=True)
class RunOptions:
    """Options recognized by the lifecycle commands."""

    org: str = DEFAULT_ORG
    dry_run: bool = False
    months_inactive_threshold: int = DEFAULT_MONTHS_INACTIVE_THRESHOLD
    username: str | None = None
    joining_teams: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        org = (self.org or "").strip()
        if not org:
            raise ValidationError("Organization name must not be empty")
        object.__setattr__(self, "org", org)

        if self.months_inactive_threshold < 1:
            raise ValidationError(
                f"months_inactive_threshold must be a positive number of months, got {self.months_inactive_threshold}"
            )

        if self.username is not None:
            username = self.username.strip().lstrip("@")
            object.__setattr__(self, "username", username or None)

        # Keep first occurrence order, drop blanks and duplicates
        teams = tuple(dict.fromkeys(slug.strip() for slug in self.joining_teams if slug.strip()))
        object.__setattr__(self, "joining_teams", teams)

    def require_username(self) -> str:
        """Return the username or raise when the command needs one."""
        if not self.username:
            raise ValidationError("Missing required username argument")
        return self.username
