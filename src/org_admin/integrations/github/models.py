from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PageInfo(BaseModel):
    """Cursor state of a GraphQL connection."""

    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(False, alias="hasNextPage")
    end_cursor: str | None = Field(None, alias="endCursor")


class UserNode(BaseModel):
    login: str
    name: str | None = None
    email: str | None = None


class MemberEdge(BaseModel):
    """Team member with the role held in that team."""

    node: UserNode
    role: str = "MEMBER"


class MemberConnection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    edges: list[MemberEdge] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class TeamNode(BaseModel):
    """Team node as returned by the organization teams query."""

    id: str
    name: str
    slug: str
    description: str | None = None
    privacy: str | None = None
    members: MemberConnection = Field(default_factory=MemberConnection)


class TeamEdge(BaseModel):
    node: TeamNode


class TeamConnection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    edges: list[TeamEdge] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class OrganizationNode(BaseModel):
    """Root Organization Node from GraphQL."""

    id: str | None = None
    login: str | None = None
    name: str | None = None
    teams: TeamConnection | None = None
    team: TeamNode | None = None


class OrganizationResponse(BaseModel):
    organization: OrganizationNode | None


class ContributionNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    occurred_at: datetime = Field(alias="occurredAt")


class ContributionConnection(BaseModel):
    nodes: list[ContributionNode | None] = Field(default_factory=list)

    @property
    def latest(self) -> datetime | None:
        dates = [node.occurred_at for node in self.nodes if node is not None]
        return max(dates) if dates else None


class RepositoryCommitContributions(BaseModel):
    contributions: ContributionConnection = Field(default_factory=ContributionConnection)


class ContributionsCollection(BaseModel):
    """
    Maps the contributionsCollection of one user for one date window.
    """

    model_config = ConfigDict(populate_by_name=True)

    pull_request_contributions: ContributionConnection = Field(
        default_factory=ContributionConnection, alias="pullRequestContributions"
    )
    issue_contributions: ContributionConnection = Field(
        default_factory=ContributionConnection, alias="issueContributions"
    )
    commit_contributions_by_repository: list[RepositoryCommitContributions] = Field(
        default_factory=list, alias="commitContributionsByRepository"
    )

    @property
    def last_commit_at(self) -> datetime | None:
        dates = [
            repo.contributions.latest
            for repo in self.commit_contributions_by_repository
            if repo.contributions.latest is not None
        ]
        return max(dates) if dates else None


class ContributionUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    login: str
    contributions_collection: ContributionsCollection = Field(alias="contributionsCollection")


class ContributionsResponse(BaseModel):
    """Standard wrapper for the user contributions query."""

    user: ContributionUser | None
