"""
Shared plumbing for the lifecycle commands.
"""

from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel

from org_admin.core.config.options import RunOptions
from org_admin.core.config.teams_config import TeamsConfig
from org_admin.core.models import ExecutionReport, ReconciliationPlan
from org_admin.integrations.github.api import GitHubClient
from org_admin.integrations.github.org_graph import OrgGraphProvider
from org_admin.integrations.npm import NpmClient
from org_admin.prompts import Prompter
from org_admin.tasks.executor import ExecutionEngine
from org_admin.tasks.stores import GitHubTeamStore, MembershipStore, NpmTeamStore


@dataclass
class CommandContext:
    """Collaborators injected into every command."""

    graph: OrgGraphProvider
    github: GitHubClient
    prompter: Prompter
    npm: NpmClient | None = None
    npm_org: str | None = None
    npm_teams: list[str] = field(default_factory=list)
    teams: TeamsConfig = field(default_factory=TeamsConfig)
    admin_repo: str = "org-admin"
    logger: Any = field(default_factory=lambda: structlog.get_logger("org_admin.commands"))

    def engine(self, org: str, include_npm: bool = False) -> ExecutionEngine:
        stores: list[MembershipStore] = [GitHubTeamStore(self.github, org)]
        if include_npm and self.npm is not None:
            stores.append(NpmTeamStore(self.npm, self.npm_org or org, self.npm_teams))
        return ExecutionEngine(stores, self.prompter, logger=self.logger)


class CommandResult(BaseModel):
    """What a command planned and, when it ran, what happened."""

    plan: ReconciliationPlan
    report: ExecutionReport | None = None
    issue_url: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.report is None or self.report.succeeded


async def preview_and_execute(
    ctx: CommandContext, options: RunOptions, plan: ReconciliationPlan, engine: ExecutionEngine
) -> CommandResult:
    """
    Run a plan through the engine.

    Dry runs only produce the preview. Live runs list the planned changes and
    ask the operator before touching anything.
    """
    if not plan:
        ctx.logger.info("nothing_to_reconcile", org=options.org)
        return CommandResult(plan=plan)

    if options.dry_run:
        report = await engine.execute(plan, dry_run=True)
        return CommandResult(plan=plan, report=report)

    for entry in plan.entries:
        ctx.logger.info("planned_change", change=entry.describe())

    if not await ctx.prompter.confirm(f"Apply {len(plan)} membership change(s) to {options.org}?"):
        ctx.logger.info("plan_declined", org=options.org, changes=len(plan))
        return CommandResult(plan=plan)

    report = await engine.execute(plan, dry_run=False)
    if not report.succeeded:
        for outcome in report.failures():
            ctx.logger.error(
                "change_not_applied",
                change=outcome.entry.describe(),
                store=outcome.store,
                error=outcome.error,
            )
        ctx.logger.warning("rerun_to_converge", failed=report.failed)
    return CommandResult(plan=plan, report=report)
