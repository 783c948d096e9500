"""
Emeritus transition: move members inactive for longer than the threshold
to the emeritus team.
"""

from org_admin.commands.base import CommandContext, CommandResult, preview_and_execute
from org_admin.core.config.options import RunOptions
from org_admin.core.constants import EMERITUS_ISSUE_LABELS, EMERITUS_ISSUE_TITLE
from org_admin.core.errors import UnknownTeamError
from org_admin.core.utils.logging import log_operation
from org_admin.policy.planner import build_membership_index, plan_emeritus_transition
from org_admin.policy.recency import window_years_for_threshold


def render_emeritus_issue(org: str, logins: list[str], threshold_months: int) -> str:
    """Body of the issue proposing the move to the emeritus team."""
    users = "\n".join(f"- @{login}" for login in logins)
    return (
        f"The following users have been inactive for more than {threshold_months} months "
        f"and should be added to the emeritus team to control the access to the {org} organization:\n\n"
        f"{users}\n\n"
        "Comment here if you don't want to move them to emeritus team."
    )


async def run_emeritus(ctx: CommandContext, options: RunOptions) -> CommandResult:
    """
    Find inactive members, propose the move in an issue and apply it.

    In dry-run mode the candidates are only listed.
    """
    log = ctx.logger
    threshold = options.months_inactive_threshold

    async with log_operation("emeritus", log=log, org=options.org, dry_run=options.dry_run):
        organization = await ctx.graph.fetch_organization(options.org)
        teams = await ctx.graph.fetch_team_graph(organization)
        index = build_membership_index(teams)
        log.info("org_chart_loaded", teams=len(teams), members=len(index.logins))

        if index.team(ctx.teams.emeritus) is None:
            raise UnknownTeamError([ctx.teams.emeritus])

        # Leads and current emeritus members can never be candidates
        logins = [
            login
            for login in index.logins
            if not index.is_privileged(login, ctx.teams.leads) and not index.is_member(login, ctx.teams.emeritus)
        ]
        window_years = window_years_for_threshold(threshold)
        log.info("fetching_activity", members=len(logins), years=window_years)
        activities = await ctx.graph.fetch_activity(organization, logins, window_years)

        plan = plan_emeritus_transition(
            teams,
            activities,
            threshold,
            emeritus_slug=ctx.teams.emeritus,
            leads_slug=ctx.teams.leads,
            index=index,
        )
        candidates = [entry.login for entry in plan.additions()]
        log.info("emeritus_candidates_found", count=len(candidates))

        if options.dry_run:
            for login in candidates:
                log.info("emeritus_candidate", login=login, dry_run=True)
            return await preview_and_execute(ctx, options, plan, ctx.engine(organization.name))

        issue_url = None
        if candidates:
            issue = await ctx.github.create_issue(
                organization.name,
                ctx.admin_repo,
                EMERITUS_ISSUE_TITLE,
                render_emeritus_issue(organization.name, candidates, threshold),
                list(EMERITUS_ISSUE_LABELS),
            )
            issue_url = issue.get("html_url")
            log.info("emeritus_proposal_opened", url=issue_url)

        result = await preview_and_execute(ctx, options, plan, ctx.engine(organization.name))
        result.issue_url = issue_url
        return result
