"""
Pytest configuration: src on sys.path plus in-memory collaborators shared by the tests.
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest
import structlog

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from org_admin.commands.base import CommandContext  # noqa: E402
from org_admin.core.errors import GitHubAPIError, OTPRequiredError, UserNotFoundError  # noqa: E402
from org_admin.core.models import MemberActivity, Organization, Team, TeamMembership  # noqa: E402


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by calendar months, clamping the day to 28."""
    total = moment.year * 12 + (moment.month - 1) - months
    return moment.replace(year=total // 12, month=total % 12 + 1, day=min(moment.day, 28))


def make_team(slug: str, logins: list[str], roles: dict[str, str] | None = None) -> Team:
    roles = roles or {}
    return Team(
        id=f"T_{slug}",
        name=slug.title(),
        slug=slug,
        members=[TeamMembership(login=login, role=roles.get(login, "MEMBER")) for login in logins],
    )


class FakeOrgGraph:
    """Org graph provider serving a fixed org chart and activity map."""

    def __init__(self, teams: list[Team], activity: dict[str, MemberActivity] | None = None):
        self.teams = teams
        self.activity = activity or {}
        self.calls: list[str] = []
        self.activity_logins: list[str] | None = None
        self.window_years: int | None = None

    async def fetch_organization(self, name: str) -> Organization:
        self.calls.append("fetch_organization")
        return Organization(id="O_123", name=name)

    async def fetch_team_graph(self, organization: Organization) -> list[Team]:
        self.calls.append("fetch_team_graph")
        return self.teams

    async def fetch_activity(self, organization, logins, window_years, now=None) -> list[MemberActivity]:
        self.calls.append("fetch_activity")
        self.activity_logins = list(logins)
        self.window_years = window_years
        return [self.activity.get(login, MemberActivity(login=login)) for login in self.activity_logins]


class FakeGitHub:
    """Records every REST call; fails the (method, team) pairs listed in ``failures``."""

    def __init__(self, failures: set[tuple[str, str]] | None = None, missing_users: set[str] | None = None):
        self.calls: list[tuple] = []
        self.failures = failures or set()
        self.missing_users = missing_users or set()
        self.closed = False

    @property
    def mutating_calls(self) -> list[tuple]:
        return [call for call in self.calls if call[0] != "get_user_profile"]

    async def get_user_profile(self, username: str) -> dict:
        self.calls.append(("get_user_profile", username))
        if username in self.missing_users:
            raise UserNotFoundError(username)
        return {"login": username, "name": username.title()}

    async def add_team_member(self, org: str, team_slug: str, username: str, role: str = "member") -> dict:
        self.calls.append(("add_team_member", org, team_slug, username, role))
        if ("add_team_member", team_slug) in self.failures:
            raise GitHubAPIError(422, "Validation Failed")
        return {"state": "active", "role": role}

    async def remove_team_member(self, org: str, team_slug: str, username: str) -> None:
        self.calls.append(("remove_team_member", org, team_slug, username))
        if ("remove_team_member", team_slug) in self.failures:
            raise GitHubAPIError(500, "Server Error")

    async def create_issue(self, owner: str, repo: str, title: str, body: str, labels=None) -> dict:
        self.calls.append(("create_issue", owner, repo, title, body, labels))
        return {"number": 1, "html_url": f"https://github.com/{owner}/{repo}/issues/1"}

    async def close(self) -> None:
        self.closed = True


class FakeNpm:
    """npm client asking for an OTP on the teams listed in ``otp_teams``."""

    def __init__(self, otp_teams: set[str] | None = None):
        self.calls: list[tuple] = []
        self.otp_teams = otp_teams or set()

    async def remove_team_member(self, org: str, team_slug: str, username: str, otp: str | None = None) -> str:
        self.calls.append(("remove_team_member", org, team_slug, username, otp))
        if team_slug in self.otp_teams and otp is None:
            raise OTPRequiredError(["npm", "team", "rm"], 1, "", "npm ERR! code EOTP")
        return ""


class FakePrompter:
    def __init__(self, confirm_answer: bool = True, otp: str = "123456"):
        self.confirm_answer = confirm_answer
        self.otp = otp
        self.questions: list[str] = []
        self.asked: list[str] = []

    async def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.confirm_answer

    async def ask(self, message: str, hide_input: bool = False) -> str:
        self.asked.append(message)
        return self.otp


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def now() -> datetime:
    return datetime.now(UTC)


@pytest.fixture
def months_ago(now):
    def _months_ago(months: int) -> datetime:
        return shift_months(now, months)

    return _months_ago


@pytest.fixture
def org_chart() -> list[Team]:
    """Leads, emeritus and a core team sharing members."""
    return [
        make_team("leads", ["lead1"]),
        make_team("emeritus", ["already_emeritus"]),
        make_team(
            "core",
            ["active_user", "inactive_user", "boundary_user", "inactive_no_contrib", "lead1", "already_emeritus"],
        ),
    ]


@pytest.fixture
def activity_for_threshold(months_ago):
    """Activity map for the org chart, relative to a threshold in months."""

    def _activity(threshold: int) -> dict[str, MemberActivity]:
        return {
            "active_user": MemberActivity(login="active_user", last_pull_request_at=months_ago(1)),
            "inactive_user": MemberActivity(login="inactive_user", last_issue_at=months_ago(threshold + 1)),
            "boundary_user": MemberActivity(login="boundary_user", last_commit_at=months_ago(threshold)),
            "lead1": MemberActivity(login="lead1", last_pull_request_at=months_ago(threshold + 10)),
            "already_emeritus": MemberActivity(login="already_emeritus", last_issue_at=months_ago(threshold + 2)),
            "inactive_no_contrib": MemberActivity(login="inactive_no_contrib"),
        }

    return _activity


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def fake_npm() -> FakeNpm:
    return FakeNpm()


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def make_context(fake_github, fake_npm, prompter):
    def _make(graph: FakeOrgGraph, **overrides) -> CommandContext:
        fields = {"graph": graph, "github": fake_github, "prompter": prompter, "npm": fake_npm}
        fields.update(overrides)
        return CommandContext(**fields)

    return _make


@pytest.fixture
def make_graph():
    return FakeOrgGraph


@pytest.fixture
def github_factory():
    return FakeGitHub


@pytest.fixture
def npm_factory():
    return FakeNpm


@pytest.fixture
def team_factory():
    return make_team
