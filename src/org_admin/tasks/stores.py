"""
Membership stores the execution engine writes to.
"""

from collections.abc import Iterable
from typing import Protocol

from org_admin.core.models import PlanAction, PlanEntry
from org_admin.integrations.github.api import GitHubClient
from org_admin.integrations.npm import NpmClient


class MembershipStore(Protocol):
    """An external system holding team memberships."""

    name: str
    # Whether independent writes for the same member may run concurrently
    concurrent_writes: bool

    def handles(self, entry: PlanEntry) -> bool: ...

    async def apply(self, entry: PlanEntry, otp: str | None = None) -> None: ...


class GitHubTeamStore:
    """GitHub organization teams."""

    name = "github"
    concurrent_writes = True

    def __init__(self, client: GitHubClient, org: str, role: str = "member"):
        self.client = client
        self.org = org
        self.role = role

    def handles(self, entry: PlanEntry) -> bool:
        return True

    async def apply(self, entry: PlanEntry, otp: str | None = None) -> None:
        if entry.action is PlanAction.ADD_TO_TEAM:
            await self.client.add_team_member(self.org, entry.team_slug, entry.login, role=self.role)
        else:
            await self.client.remove_team_member(self.org, entry.team_slug, entry.login)


class NpmTeamStore:
    """
    npm organization teams.

    Only removals are mirrored. When ``teams`` is given, only those team
    slugs exist on the registry side.
    """

    name = "npm"
    concurrent_writes = False

    def __init__(self, client: NpmClient, org: str, teams: Iterable[str] | None = None):
        self.client = client
        self.org = org
        self.teams = frozenset(teams or ())

    def handles(self, entry: PlanEntry) -> bool:
        if entry.action is not PlanAction.REMOVE_FROM_TEAM:
            return False
        return not self.teams or entry.team_slug in self.teams

    async def apply(self, entry: PlanEntry, otp: str | None = None) -> None:
        await self.client.remove_team_member(self.org, entry.team_slug, entry.login, otp=otp)
