"""
Well-known team slugs.
"""

from dataclasses import dataclass, field


@dataclass
class TeamsConfig:
    """Slugs of the teams with a special meaning in the lifecycle."""

    leads: str = "leads"
    emeritus: str = "emeritus"
    onboarding: list[str] = field(default_factory=lambda: ["collaborators"])
