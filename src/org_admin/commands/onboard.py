"""
Onboarding: add a user to the organization's destination teams.
"""

from org_admin.commands.base import CommandContext, CommandResult, preview_and_execute
from org_admin.core.config.options import RunOptions
from org_admin.core.utils.logging import log_operation
from org_admin.policy.planner import plan_team_join


async def run_onboard(ctx: CommandContext, options: RunOptions) -> CommandResult:
    username = options.require_username()
    targets = list(options.joining_teams) or list(ctx.teams.onboarding)

    async with log_operation("onboard", log=ctx.logger, org=options.org, username=username, dry_run=options.dry_run):
        organization = await ctx.graph.fetch_organization(options.org)
        teams = await ctx.graph.fetch_team_graph(organization)

        # Unknown destination teams abort here, before any membership call
        plan = plan_team_join(teams, username, targets)

        profile = await ctx.github.get_user_profile(username)
        ctx.logger.info("onboarding_user", username=username, name=profile.get("name"), teams=targets)

        return await preview_and_execute(ctx, options, plan, ctx.engine(organization.name))
