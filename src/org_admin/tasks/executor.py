"""
Plan execution engine.

Members are processed one at a time by a single worker draining a queue,
which keeps the write rate against the remote systems bounded. Independent
writes for the same member may run concurrently when the store allows it.
Failures are recorded per entry and store; nothing is rolled back.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog

from org_admin.core.errors import OTPRequiredError
from org_admin.core.models import (
    EntryOutcome,
    ExecutionReport,
    ExecutionStatus,
    PlanAction,
    PlanEntry,
    ReconciliationPlan,
)
from org_admin.prompts import Prompter
from org_admin.tasks.stores import MembershipStore


class ExecutionEngine:
    """Applies a reconciliation plan to a set of membership stores."""

    def __init__(self, stores: Sequence[MembershipStore], prompter: Prompter, logger: Any = None):
        self.stores = list(stores)
        self.prompter = prompter
        self.logger = logger or structlog.get_logger(__name__)

    async def execute(self, plan: ReconciliationPlan, dry_run: bool) -> ExecutionReport:
        report = ExecutionReport(dry_run=dry_run)

        if dry_run:
            for entry in plan.entries:
                for store in self._stores_for(entry):
                    report.outcomes.append(EntryOutcome(entry=entry, store=store.name, status=ExecutionStatus.SKIPPED))
            for line in report.preview():
                self.logger.info("dry_run_change", change=line)
            return report

        queue: asyncio.Queue[str | None] = asyncio.Queue()
        for login in plan.logins:
            queue.put_nowait(login)
        queue.put_nowait(None)

        await asyncio.create_task(self._worker(queue, plan, report))

        self.logger.info(
            "plan_executed",
            applied=report.applied,
            failed=report.failed,
            members=len(plan.logins),
        )
        return report

    async def _worker(self, queue: asyncio.Queue[str | None], plan: ReconciliationPlan, report: ExecutionReport):
        """Single worker: the next member starts only once the current one is resolved."""
        while True:
            login = await queue.get()
            try:
                if login is None:
                    return
                self.logger.debug("member_processing_started", login=login)
                report.outcomes.extend(await self._apply_member(plan.for_login(login)))
            finally:
                queue.task_done()

    async def _apply_member(self, entries: list[PlanEntry]) -> list[EntryOutcome]:
        outcomes: list[EntryOutcome] = []

        for store in self.stores:
            store_entries = [entry for entry in entries if store.handles(entry)]
            if not store_entries:
                continue

            if not store.concurrent_writes:
                for entry in store_entries:
                    outcomes.append(await self._apply_entry(store, entry))
                continue

            # Additions first, in plan order; removals are independent of each other
            for entry in store_entries:
                if entry.action is PlanAction.ADD_TO_TEAM:
                    outcomes.append(await self._apply_entry(store, entry))
            removals = [entry for entry in store_entries if entry.action is PlanAction.REMOVE_FROM_TEAM]
            outcomes.extend(await asyncio.gather(*(self._apply_entry(store, entry) for entry in removals)))

        return outcomes

    async def _apply_entry(self, store: MembershipStore, entry: PlanEntry) -> EntryOutcome:
        try:
            try:
                await store.apply(entry)
            except OTPRequiredError:
                self.logger.warning("otp_required", store=store.name, login=entry.login, team=entry.team_slug)
                otp = await self.prompter.ask(
                    f"{store.name} one-time password required to {entry.describe()}", hide_input=True
                )
                await store.apply(entry, otp=otp)
        except Exception as e:
            self.logger.error(
                "plan_entry_failed",
                store=store.name,
                login=entry.login,
                team=entry.team_slug,
                action=entry.action.value,
                error=str(e),
            )
            return EntryOutcome(entry=entry, store=store.name, status=ExecutionStatus.FAILED, error=str(e))

        return EntryOutcome(entry=entry, store=store.name, status=ExecutionStatus.APPLIED)

    def _stores_for(self, entry: PlanEntry) -> list[MembershipStore]:
        return [store for store in self.stores if store.handles(entry)]
