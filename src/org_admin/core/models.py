from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Organization(BaseModel):
    """Root identity of the organization being reconciled."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class TeamMembership(BaseModel):
    """A single member entry of a team roster."""

    model_config = ConfigDict(frozen=True)

    login: str
    name: str | None = None
    email: str | None = None
    role: str = "MEMBER"


class Team(BaseModel):
    """A team of the organization with its full member roster."""

    id: str
    name: str
    slug: str
    description: str | None = None
    privacy: str | None = None
    members: list[TeamMembership] = Field(default_factory=list)


class MemberActivity(BaseModel):
    """
    Most recent contributions found for a member within the queried windows.

    A ``None`` field means nothing was found in the windows that were queried,
    not that the member never contributed.
    """

    login: str
    last_pull_request_at: datetime | None = None
    last_issue_at: datetime | None = None
    last_commit_at: datetime | None = None

    @property
    def timestamps(self) -> list[datetime]:
        return [
            ts
            for ts in (self.last_pull_request_at, self.last_issue_at, self.last_commit_at)
            if ts is not None
        ]

    @property
    def has_activity(self) -> bool:
        return bool(self.timestamps)


class PlanAction(str, Enum):
    ADD_TO_TEAM = "add_to_team"
    REMOVE_FROM_TEAM = "remove_from_team"


class PlanEntry(BaseModel):
    """One atomic membership mutation."""

    model_config = ConfigDict(frozen=True)

    login: str
    action: PlanAction
    team_slug: str

    def describe(self) -> str:
        if self.action is PlanAction.ADD_TO_TEAM:
            return f"add @{self.login} to team {self.team_slug}"
        return f"remove @{self.login} from team {self.team_slug}"


class ReconciliationPlan(BaseModel):
    """Ordered list of membership mutations."""

    entries: list[PlanEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    @property
    def logins(self) -> list[str]:
        """Affected logins in first-appearance order."""
        return list(dict.fromkeys(entry.login for entry in self.entries))

    def additions(self) -> list[PlanEntry]:
        return [entry for entry in self.entries if entry.action is PlanAction.ADD_TO_TEAM]

    def for_login(self, login: str) -> list[PlanEntry]:
        return [entry for entry in self.entries if entry.login == login]


class ExecutionStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


class EntryOutcome(BaseModel):
    """Outcome of one plan entry against one membership store."""

    entry: PlanEntry
    store: str
    status: ExecutionStatus
    error: str | None = None


class ExecutionReport(BaseModel):
    """Per-entry outcomes of a plan execution plus the global tally."""

    dry_run: bool = False
    outcomes: list[EntryOutcome] = Field(default_factory=list)

    def _count(self, status: ExecutionStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def applied(self) -> int:
        return self._count(ExecutionStatus.APPLIED)

    @property
    def skipped(self) -> int:
        return self._count(ExecutionStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(ExecutionStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.failed == 0

    def failures(self) -> list[EntryOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is ExecutionStatus.FAILED]

    def preview(self) -> list[str]:
        """Human readable line per outcome."""
        lines = []
        for outcome in self.outcomes:
            if outcome.status is ExecutionStatus.SKIPPED:
                lines.append(f"[DRY RUN] would {outcome.entry.describe()} ({outcome.store})")
            elif outcome.status is ExecutionStatus.APPLIED:
                lines.append(f"{outcome.entry.describe()} ({outcome.store}): done")
            else:
                lines.append(f"{outcome.entry.describe()} ({outcome.store}): FAILED {outcome.error}")
        return lines
