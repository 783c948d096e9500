"""
npm registry configuration.
"""

from dataclasses import dataclass, field


@dataclass
class NpmConfig:
    """npm organization team configuration."""

    org: str | None = None
    # Empty means every team removed on GitHub is mirrored to npm
    teams: list[str] = field(default_factory=list)
    binary: str = "npm"
    enabled: bool = True
