"""
Offboarding: remove a user from every team and park them in emeritus.
"""

from org_admin.commands.base import CommandContext, CommandResult, preview_and_execute
from org_admin.core.config.options import RunOptions
from org_admin.core.utils.logging import log_operation
from org_admin.policy.planner import build_membership_index, plan_offboard


async def run_offboard(ctx: CommandContext, options: RunOptions) -> CommandResult:
    """
    Remove ``options.username`` from all GitHub teams and the matching npm teams.
    """
    username = options.require_username()

    async with log_operation("offboard", log=ctx.logger, org=options.org, username=username, dry_run=options.dry_run):
        organization = await ctx.graph.fetch_organization(options.org)
        teams = await ctx.graph.fetch_team_graph(organization)
        index = build_membership_index(teams)

        if username not in index:
            ctx.logger.warning("user_not_in_any_team", username=username, org=organization.name)
        elif index.team(ctx.teams.emeritus) is None:
            ctx.logger.warning("emeritus_team_missing", team=ctx.teams.emeritus)

        plan = plan_offboard(teams, username, emeritus_slug=ctx.teams.emeritus, index=index)
        engine = ctx.engine(organization.name, include_npm=True)
        return await preview_and_execute(ctx, options, plan, engine)
