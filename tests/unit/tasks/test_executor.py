"""Tests for the plan execution engine."""

import asyncio

import pytest

from org_admin.core.errors import GitHubAPIError, OTPRequiredError
from org_admin.core.models import ExecutionStatus, PlanAction, PlanEntry, ReconciliationPlan
from org_admin.tasks.executor import ExecutionEngine
from org_admin.tasks.stores import GitHubTeamStore, NpmTeamStore


def add(login: str, slug: str) -> PlanEntry:
    return PlanEntry(login=login, action=PlanAction.ADD_TO_TEAM, team_slug=slug)


def remove(login: str, slug: str) -> PlanEntry:
    return PlanEntry(login=login, action=PlanAction.REMOVE_FROM_TEAM, team_slug=slug)


class RecordingStore:
    """Store that records calls and tracks which members are in flight."""

    def __init__(self, name: str = "recording", concurrent_writes: bool = True, failing: set[str] | None = None):
        self.name = name
        self.concurrent_writes = concurrent_writes
        self.failing = failing or set()
        self.calls: list[tuple[str, str, str | None]] = []
        self.in_flight: list[str] = []
        self.max_members_in_flight = 0
        self.max_same_member_in_flight = 0

    def handles(self, entry: PlanEntry) -> bool:
        return True

    async def apply(self, entry: PlanEntry, otp: str | None = None) -> None:
        self.in_flight.append(entry.login)
        self.max_members_in_flight = max(self.max_members_in_flight, len(set(self.in_flight)))
        self.max_same_member_in_flight = max(self.max_same_member_in_flight, self.in_flight.count(entry.login))
        try:
            await asyncio.sleep(0.01)
            self.calls.append((entry.login, entry.team_slug, otp))
            if entry.team_slug in self.failing:
                raise GitHubAPIError(500, "boom")
        finally:
            self.in_flight.remove(entry.login)


class OTPStore(RecordingStore):
    """Store demanding an OTP; rejects the first ``rejections`` OTP attempts too."""

    def __init__(self, rejections: int = 0):
        super().__init__(name="npm", concurrent_writes=False)
        self.rejections = rejections

    async def apply(self, entry: PlanEntry, otp: str | None = None) -> None:
        self.calls.append((entry.login, entry.team_slug, otp))
        if otp is None or self.rejections > 0:
            if otp is not None:
                self.rejections -= 1
            raise OTPRequiredError(["npm", "team", "rm"], 1, "", "npm ERR! code EOTP")


@pytest.fixture
def plan() -> ReconciliationPlan:
    return ReconciliationPlan(
        entries=[
            add("alice", "emeritus"),
            remove("alice", "core"),
            remove("alice", "docs"),
            remove("alice", "plugins"),
            add("bob", "emeritus"),
            remove("bob", "core"),
        ]
    )


class TestDryRun:
    @pytest.mark.asyncio
    async def test_issues_no_calls_and_skips_everything(self, plan, prompter) -> None:
        store = RecordingStore()
        engine = ExecutionEngine([store], prompter)

        report = await engine.execute(plan, dry_run=True)

        assert store.calls == []
        assert report.dry_run is True
        assert report.skipped == len(plan)
        assert report.applied == 0
        assert all(outcome.status is ExecutionStatus.SKIPPED for outcome in report.outcomes)

    @pytest.mark.asyncio
    async def test_preview_is_human_readable(self, prompter) -> None:
        engine = ExecutionEngine([RecordingStore(name="github")], prompter)

        report = await engine.execute(ReconciliationPlan(entries=[add("alice", "emeritus")]), dry_run=True)

        assert report.preview() == ["[DRY RUN] would add @alice to team emeritus (github)"]


class TestLiveRun:
    @pytest.mark.asyncio
    async def test_applies_every_entry(self, plan, prompter) -> None:
        store = RecordingStore()
        engine = ExecutionEngine([store], prompter)

        report = await engine.execute(plan, dry_run=False)

        assert report.applied == len(plan)
        assert report.succeeded is True
        assert sorted(store.calls) == sorted((e.login, e.team_slug, None) for e in plan.entries)

    @pytest.mark.asyncio
    async def test_members_are_processed_one_at_a_time(self, plan, prompter) -> None:
        store = RecordingStore()
        engine = ExecutionEngine([store], prompter)

        await engine.execute(plan, dry_run=False)

        assert store.max_members_in_flight == 1
        logins = [login for login, _, _ in store.calls]
        assert logins == ["alice"] * 4 + ["bob"] * 2

    @pytest.mark.asyncio
    async def test_same_member_removals_run_concurrently(self, plan, prompter) -> None:
        store = RecordingStore()
        engine = ExecutionEngine([store], prompter)

        await engine.execute(plan, dry_run=False)

        assert store.max_same_member_in_flight == 3
        # The addition is resolved before removals start
        assert store.calls[0] == ("alice", "emeritus", None)

    @pytest.mark.asyncio
    async def test_serial_store_never_overlaps(self, plan, prompter) -> None:
        store = RecordingStore(concurrent_writes=False)
        engine = ExecutionEngine([store], prompter)

        await engine.execute(plan, dry_run=False)

        assert store.max_same_member_in_flight == 1
        assert [slug for _, slug, _ in store.calls[:4]] == ["emeritus", "core", "docs", "plugins"]

    @pytest.mark.asyncio
    async def test_failure_is_isolated_per_entry(self, plan, prompter) -> None:
        store = RecordingStore(failing={"core"})
        engine = ExecutionEngine([store], prompter)

        report = await engine.execute(plan, dry_run=False)

        assert report.failed == 2
        assert report.applied == len(plan) - 2
        assert report.succeeded is False
        assert {outcome.entry.login for outcome in report.failures()} == {"alice", "bob"}
        assert all("boom" in outcome.error for outcome in report.failures())

    @pytest.mark.asyncio
    async def test_failure_is_isolated_per_store(self, prompter) -> None:
        broken = RecordingStore(name="broken", failing={"core"})
        healthy = RecordingStore(name="healthy")
        engine = ExecutionEngine([broken, healthy], prompter)

        report = await engine.execute(ReconciliationPlan(entries=[remove("alice", "core")]), dry_run=False)

        statuses = {outcome.store: outcome.status for outcome in report.outcomes}
        assert statuses == {"broken": ExecutionStatus.FAILED, "healthy": ExecutionStatus.APPLIED}

    @pytest.mark.asyncio
    async def test_empty_plan(self, prompter) -> None:
        engine = ExecutionEngine([RecordingStore()], prompter)

        report = await engine.execute(ReconciliationPlan(), dry_run=False)

        assert report.outcomes == []
        assert report.succeeded is True


class TestOneTimePassword:
    @pytest.mark.asyncio
    async def test_prompts_once_and_retries_with_otp(self, prompter) -> None:
        store = OTPStore()
        engine = ExecutionEngine([store], prompter)

        report = await engine.execute(ReconciliationPlan(entries=[remove("alice", "core")]), dry_run=False)

        assert report.applied == 1
        assert len(prompter.asked) == 1
        assert store.calls == [("alice", "core", None), ("alice", "core", "123456")]

    @pytest.mark.asyncio
    async def test_second_failure_is_recorded(self, prompter) -> None:
        store = OTPStore(rejections=1)
        engine = ExecutionEngine([store], prompter)

        report = await engine.execute(
            ReconciliationPlan(entries=[remove("alice", "core"), remove("bob", "core")]), dry_run=False
        )

        assert [outcome.status for outcome in report.outcomes] == [ExecutionStatus.FAILED, ExecutionStatus.APPLIED]
        assert len(prompter.asked) == 2

    @pytest.mark.asyncio
    async def test_other_errors_do_not_prompt(self, prompter) -> None:
        store = RecordingStore(failing={"core"})
        engine = ExecutionEngine([store], prompter)

        await engine.execute(ReconciliationPlan(entries=[remove("alice", "core")]), dry_run=False)

        assert prompter.asked == []


class TestStores:
    @pytest.mark.asyncio
    async def test_github_store_routes_actions(self, fake_github) -> None:
        store = GitHubTeamStore(fake_github, "fastify")

        await store.apply(add("alice", "core"))
        await store.apply(remove("alice", "docs"))

        assert fake_github.calls == [
            ("add_team_member", "fastify", "core", "alice", "member"),
            ("remove_team_member", "fastify", "docs", "alice"),
        ]

    def test_npm_store_only_mirrors_removals(self, fake_npm) -> None:
        store = NpmTeamStore(fake_npm, "fastify")

        assert store.handles(remove("alice", "core")) is True
        assert store.handles(add("alice", "emeritus")) is False

    def test_npm_store_restricted_to_known_teams(self, fake_npm) -> None:
        store = NpmTeamStore(fake_npm, "fastify", teams=["developers"])

        assert store.handles(remove("alice", "developers")) is True
        assert store.handles(remove("alice", "core")) is False

    @pytest.mark.asyncio
    async def test_npm_store_passes_otp(self, fake_npm) -> None:
        store = NpmTeamStore(fake_npm, "fastify")

        await store.apply(remove("alice", "core"), otp="654321")

        assert fake_npm.calls == [("remove_team_member", "fastify", "core", "alice", "654321")]
