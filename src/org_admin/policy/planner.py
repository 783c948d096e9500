"""Reconciliation planner.

Turns the org chart plus policy inputs into the ordered list of membership
mutations needed to reach the target state. Plans only contain changes that
are not already satisfied, so planning against a converged org chart yields
an empty plan.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from org_admin.core.constants import PRIVILEGED_ROLES
from org_admin.core.errors import UnknownTeamError, ValidationError
from org_admin.core.models import (
    MemberActivity,
    PlanAction,
    PlanEntry,
    ReconciliationPlan,
    Team,
    TeamMembership,
)
from org_admin.policy.recency import is_eligible_for_transition


class MembershipIndex:
    """
    Read-only lookup of the teams each login belongs to.

    Built in a single pass over the org chart; team order follows the
    order in which teams were fetched.
    """

    def __init__(self, teams: Iterable[Team]):
        self.teams_by_slug: dict[str, Team] = {}
        self._memberships: dict[str, list[tuple[Team, TeamMembership]]] = {}

        for team in teams:
            self.teams_by_slug[team.slug] = team
            for member in team.members:
                entries = self._memberships.setdefault(member.login, [])
                if all(existing.slug != team.slug for existing, _ in entries):
                    entries.append((team, member))

    def __contains__(self, login: object) -> bool:
        return login in self._memberships

    @property
    def logins(self) -> list[str]:
        return list(self._memberships)

    def team(self, slug: str) -> Team | None:
        return self.teams_by_slug.get(slug)

    def teams_of(self, login: str) -> list[Team]:
        return [team for team, _ in self._memberships.get(login, [])]

    def is_member(self, login: str, slug: str) -> bool:
        return any(team.slug == slug for team in self.teams_of(login))

    def is_privileged(self, login: str, leads_slug: str) -> bool:
        """Leads team members and holders of a privileged team role."""
        return any(
            team.slug == leads_slug or membership.role.upper() in PRIVILEGED_ROLES
            for team, membership in self._memberships.get(login, [])
        )


def build_membership_index(teams: Iterable[Team]) -> MembershipIndex:
    return MembershipIndex(teams)


def _removals(index: MembershipIndex, login: str, keep_slug: str) -> list[PlanEntry]:
    return [
        PlanEntry(login=login, action=PlanAction.REMOVE_FROM_TEAM, team_slug=team.slug)
        for team in index.teams_of(login)
        if team.slug != keep_slug
    ]


def plan_emeritus_transition(
    teams: Sequence[Team],
    activities: Iterable[MemberActivity],
    threshold_months: int,
    now: datetime | None = None,
    emeritus_slug: str = "emeritus",
    leads_slug: str = "leads",
    index: MembershipIndex | None = None,
) -> ReconciliationPlan:
    """
    Plan moving inactive members to the emeritus team.

    Each candidate gets one add to the emeritus team followed by one removal
    per other team they currently belong to. Leads, privileged roles and
    members already in the emeritus team are never planned.

    Raises:
        UnknownTeamError: If the emeritus team does not exist.
    """
    index = index or build_membership_index(teams)
    if index.team(emeritus_slug) is None:
        raise UnknownTeamError([emeritus_slug])

    candidates: list[str] = []
    for activity in activities:
        login = activity.login
        if login not in index or login in candidates:
            continue
        if not is_eligible_for_transition(activity, threshold_months, now):
            continue
        if index.is_privileged(login, leads_slug):
            continue
        if index.is_member(login, emeritus_slug):
            continue
        candidates.append(login)

    entries: list[PlanEntry] = []
    for login in candidates:
        entries.append(PlanEntry(login=login, action=PlanAction.ADD_TO_TEAM, team_slug=emeritus_slug))
        entries.extend(_removals(index, login, keep_slug=emeritus_slug))

    return ReconciliationPlan(entries=entries)


def plan_team_join(
    teams: Sequence[Team],
    login: str,
    target_slugs: Sequence[str],
    index: MembershipIndex | None = None,
) -> ReconciliationPlan:
    """
    Plan adding ``login`` to every team in ``target_slugs``.

    Raises:
        ValidationError: If no destination team is given.
        UnknownTeamError: If any destination slug is not a team of the organization.
    """
    if not target_slugs:
        raise ValidationError("At least one destination team is required")

    index = index or build_membership_index(teams)
    unknown = [slug for slug in target_slugs if index.team(slug) is None]
    if unknown:
        raise UnknownTeamError(unknown)

    entries = [
        PlanEntry(login=login, action=PlanAction.ADD_TO_TEAM, team_slug=slug)
        for slug in dict.fromkeys(target_slugs)
        if not index.is_member(login, slug)
    ]
    return ReconciliationPlan(entries=entries)


def plan_offboard(
    teams: Sequence[Team],
    login: str,
    emeritus_slug: str = "emeritus",
    index: MembershipIndex | None = None,
) -> ReconciliationPlan:
    """
    Plan removing ``login`` from every team.

    When the organization has an emeritus team the member is parked there
    instead of disappearing from the org chart. A login without any team
    membership yields an empty plan.
    """
    index = index or build_membership_index(teams)
    if login not in index:
        return ReconciliationPlan()

    entries = _removals(index, login, keep_slug=emeritus_slug)
    if index.team(emeritus_slug) is not None and not index.is_member(login, emeritus_slug):
        entries.append(PlanEntry(login=login, action=PlanAction.ADD_TO_TEAM, team_slug=emeritus_slug))

    return ReconciliationPlan(entries=entries)
