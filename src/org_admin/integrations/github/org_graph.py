"""
Organization graph adapter.

Builds the in-memory org chart (teams and their rosters) from cursor
paginated GraphQL queries, and looks up how recently each member
contributed to the organization.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import structlog

from org_admin.core.constants import GRAPHQL_PAGE_SIZE, MAX_CONTRIBUTION_WINDOW_YEARS
from org_admin.core.errors import GitHubGraphQLError
from org_admin.core.models import MemberActivity, Organization, Team, TeamMembership
from org_admin.core.utils.dates import years_before
from org_admin.integrations.github.graphql import GitHubGraphQLClient
from org_admin.integrations.github.models import (
    ContributionsResponse,
    MemberConnection,
    OrganizationResponse,
    TeamNode,
)

logger = structlog.get_logger(__name__)

_ORGANIZATION_QUERY = """
query Organization($orgName: String!) {
  organization(login: $orgName) {
    id
    login
    name
  }
}
"""

_TEAMS_QUERY = """
query OrgTeams($orgName: String!, $cursor: String, $pageSize: Int!) {
  organization(login: $orgName) {
    teams(first: $pageSize, after: $cursor) {
      edges {
        node {
          id
          name
          slug
          description
          privacy
          members(first: $pageSize, membership: IMMEDIATE) {
            edges {
              node {
                login
                name
                email
              }
              role
            }
            pageInfo {
              hasNextPage
              endCursor
            }
          }
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

_TEAM_MEMBERS_QUERY = """
query TeamMembers($orgName: String!, $slug: String!, $cursor: String, $pageSize: Int!) {
  organization(login: $orgName) {
    team(slug: $slug) {
      id
      name
      slug
      members(first: $pageSize, after: $cursor, membership: IMMEDIATE) {
        edges {
          node {
            login
            name
            email
          }
          role
        }
        pageInfo {
          hasNextPage
          endCursor
        }
      }
    }
  }
}
"""

_CONTRIBUTIONS_QUERY = """
query UserContributions($login: String!, $orgId: ID, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    login
    contributionsCollection(organizationID: $orgId, from: $from, to: $to) {
      pullRequestContributions(last: 1, orderBy: {direction: ASC}) {
        nodes {
          occurredAt
        }
      }
      issueContributions(last: 1, orderBy: {direction: ASC}) {
        nodes {
          occurredAt
        }
      }
      commitContributionsByRepository(maxRepositories: 25) {
        contributions(last: 1, orderBy: {field: OCCURRED_AT, direction: ASC}) {
          nodes {
            occurredAt
          }
        }
      }
    }
  }
}
"""


def contribution_windows(window_years: int, now: datetime) -> list[tuple[datetime, datetime]]:
    """
    Split ``window_years`` into non-overlapping one-year windows.

    Windows are returned most recent first: the first one ends at ``now``,
    the last one ends ``window_years - 1`` years before ``now``.
    """
    windows = []
    for offset in range(window_years):
        to_date = years_before(now, offset)
        from_date = years_before(to_date, MAX_CONTRIBUTION_WINDOW_YEARS)
        windows.append((from_date, to_date))
    return windows


class OrgGraphProvider:
    """
    Reads the organization graph and contribution facts from GitHub.

    Every remote failure propagates to the caller: a fetch either returns a
    complete result or raises.
    """

    def __init__(self, graphql_client: GitHubGraphQLClient, page_size: int = GRAPHQL_PAGE_SIZE):
        self.graphql = graphql_client
        self.page_size = page_size

    async def fetch_organization(self, name: str) -> Organization:
        data = await self.graphql.execute_query(_ORGANIZATION_QUERY, {"orgName": name})
        response = OrganizationResponse.model_validate(data)
        org = response.organization
        if org is None or org.id is None:
            raise GitHubGraphQLError([{"message": f"Organization '{name}' not found"}])

        organization = Organization(id=org.id, name=org.login or name)
        logger.info("organization_fetched", org=organization.name, org_id=organization.id)
        return organization

    async def fetch_team_graph(self, organization: Organization) -> list[Team]:
        """
        Fetch every team of the organization with its complete roster.

        Pages are requested strictly in cursor order.
        """
        teams: list[Team] = []
        cursor: str | None = None
        page = 0

        while True:
            data = await self.graphql.execute_query(
                _TEAMS_QUERY,
                {"orgName": organization.name, "cursor": cursor, "pageSize": self.page_size},
            )
            response = OrganizationResponse.model_validate(data)
            if response.organization is None or response.organization.teams is None:
                raise GitHubGraphQLError([{"message": f"Teams of '{organization.name}' are not readable"}])

            connection = response.organization.teams
            page += 1
            logger.debug("teams_page_fetched", org=organization.name, page=page, teams=len(connection.edges))

            for edge in connection.edges:
                teams.append(await self._complete_team(organization, edge.node))

            if not connection.page_info.has_next_page:
                break
            cursor = connection.page_info.end_cursor

        logger.info("team_graph_fetched", org=organization.name, teams=len(teams))
        return teams

    async def _complete_team(self, organization: Organization, node: TeamNode) -> Team:
        members = _to_memberships(node.members)
        page_info = node.members.page_info

        while page_info.has_next_page:
            data = await self.graphql.execute_query(
                _TEAM_MEMBERS_QUERY,
                {
                    "orgName": organization.name,
                    "slug": node.slug,
                    "cursor": page_info.end_cursor,
                    "pageSize": self.page_size,
                },
            )
            response = OrganizationResponse.model_validate(data)
            if response.organization is None or response.organization.team is None:
                raise GitHubGraphQLError([{"message": f"Team '{node.slug}' disappeared while paginating members"}])

            connection = response.organization.team.members
            members.extend(_to_memberships(connection))
            page_info = connection.page_info
            logger.debug("team_members_page_fetched", team=node.slug, members=len(members))

        return Team(
            id=node.id,
            name=node.name,
            slug=node.slug,
            description=node.description,
            privacy=node.privacy,
            members=members,
        )

    async def fetch_activity(
        self,
        organization: Organization,
        logins: Iterable[str],
        window_years: int,
        now: datetime | None = None,
    ) -> list[MemberActivity]:
        """
        Find the most recent contributions of each member.

        For each login the yearly windows are queried from the most recent
        to the oldest, stopping at the first window with any pull request,
        issue or commit. Members without activity in any window are returned
        with every timestamp absent.
        """
        now = now or datetime.now(UTC)
        windows = contribution_windows(window_years, now)
        activities: list[MemberActivity] = []

        for login in logins:
            activity: MemberActivity | None = None
            for from_date, to_date in windows:
                found = await self._fetch_window(organization, login, from_date, to_date)
                # Deleted or renamed accounts resolve to no user in every window
                if found is None:
                    break
                if found.has_activity:
                    activity = found
                    break

            if activity is None:
                logger.warning("no_contributions_found", login=login, years=window_years)
                activity = MemberActivity(login=login)

            activities.append(activity)

        return activities

    async def _fetch_window(
        self, organization: Organization, login: str, from_date: datetime, to_date: datetime
    ) -> MemberActivity | None:
        """Activity of one login within one window, or None when the user does not exist."""
        variables: dict[str, Any] = {
            "login": login,
            "orgId": organization.id,
            "from": from_date.isoformat(),
            "to": to_date.isoformat(),
        }
        logger.debug("fetching_contributions", login=login, start=variables["from"], end=variables["to"])

        data = await self.graphql.execute_query(_CONTRIBUTIONS_QUERY, variables)
        response = ContributionsResponse.model_validate(data)
        if response.user is None:
            logger.warning("contribution_user_missing", login=login)
            return None

        collection = response.user.contributions_collection
        return MemberActivity(
            login=login,
            last_pull_request_at=collection.pull_request_contributions.latest,
            last_issue_at=collection.issue_contributions.latest,
            last_commit_at=collection.last_commit_at,
        )


def _to_memberships(connection: MemberConnection) -> list[TeamMembership]:
    return [
        TeamMembership(login=edge.node.login, name=edge.node.name, email=edge.node.email, role=edge.role)
        for edge in connection.edges
    ]
