"""org-admin CLI: onboard, offboard and emeritus lifecycle commands."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp
import click
import httpx
import pydantic
import structlog

from org_admin import __version__
from org_admin.commands import CommandContext, CommandResult, run_emeritus, run_offboard, run_onboard
from org_admin.core.config import Config, RunOptions, config
from org_admin.core.constants import DEFAULT_MONTHS_INACTIVE_THRESHOLD
from org_admin.core.errors import ConfigurationError, OrgAdminError, ValidationError
from org_admin.core.utils.logging import configure_logging
from org_admin.integrations.github import GitHubClient, GitHubGraphQLClient, OrgGraphProvider
from org_admin.integrations.npm import NpmClient
from org_admin.prompts import AutoConfirmPrompter, TerminalPrompter

logger = structlog.get_logger(__name__)

Command = Callable[[CommandContext, RunOptions], Awaitable[CommandResult]]


def build_context(settings: Config, assume_yes: bool = False) -> CommandContext:
    """Wire the real clients from configuration."""
    graphql = GitHubGraphQLClient(settings.github.token, endpoint=settings.github.graphql_url)
    return CommandContext(
        graph=OrgGraphProvider(graphql),
        github=GitHubClient(settings.github.token, api_base_url=settings.github.api_base_url),
        prompter=AutoConfirmPrompter() if assume_yes else TerminalPrompter(),
        npm=NpmClient(settings.npm.binary) if settings.npm.enabled else None,
        npm_org=settings.npm.org,
        npm_teams=settings.npm.teams,
        teams=settings.teams,
        admin_repo=settings.github.admin_repo,
        logger=structlog.get_logger("org_admin.commands"),
    )


async def _dispatch(command: Command, options: RunOptions, assume_yes: bool) -> CommandResult:
    ctx = build_context(config, assume_yes=assume_yes)
    try:
        return await command(ctx, options)
    finally:
        await ctx.github.close()


def _execute(obj: dict[str, Any], command: Command, dry_run: bool, assume_yes: bool, **overrides: Any) -> None:
    try:
        # Credentials are checked before any network call
        config.validate()
        options = RunOptions(org=obj["org"], dry_run=obj["dry_run"] or dry_run, **overrides)
        result = asyncio.run(_dispatch(command, options, obj["yes"] or assume_yes))
    except (ConfigurationError, ValidationError) as e:
        logger.error("invalid_request", error=str(e))
        raise SystemExit(1) from e
    except (OrgAdminError, httpx.HTTPError, aiohttp.ClientError, pydantic.ValidationError) as e:
        logger.error("command_failed", error=str(e))
        raise SystemExit(1) from e

    if result.report is not None:
        logger.info(
            "run_summary",
            applied=result.report.applied,
            skipped=result.report.skipped,
            failed=result.report.failed,
        )
    if not result.succeeded:
        raise SystemExit(1)


def _run_flags(func):
    """Accept the run flags after the subcommand too."""
    func = click.option(
        "--yes", "-y", "assume_yes", is_flag=True, default=False, help="Do not ask for confirmation."
    )(func)
    func = click.option(
        "--dry-run", is_flag=True, default=False, help="Show what would change without changing anything."
    )(func)
    return func


def _resolve_username(positional: str | None, option: str | None) -> str:
    username = positional or option
    if not username:
        raise click.UsageError("Missing required username argument")
    return username


@click.group()
@click.version_option(version=__version__)
@click.option("--org", default=None, help="GitHub organization (defaults to GITHUB_ORG or 'fastify').")
@click.option("--dry-run", is_flag=True, default=False, help="Show what would change without changing anything.")
@click.option("--yes", "-y", "assume_yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.option("--log-level", default=None, help="Log level (defaults to LOG_LEVEL or INFO).")
@click.option("--json-logs", is_flag=True, default=False, help="Emit JSON log lines.")
@click.pass_context
def main(ctx: click.Context, org: str | None, dry_run: bool, assume_yes: bool, log_level: str | None, json_logs: bool):
    """Manage the membership lifecycle of a GitHub organization."""
    configure_logging(level=log_level or config.logging.level, json_logs=json_logs or config.logging.json)
    ctx.obj = {"org": org or config.default_org, "dry_run": dry_run, "yes": assume_yes}


@main.command()
@click.argument("username", required=False)
@click.option("--username", "username_option", default=None, help="GitHub login to onboard.")
@click.option("--team", "teams", multiple=True, help="Destination team slug (repeatable).")
@_run_flags
@click.pass_obj
def onboard(
    obj: dict[str, Any],
    username: str | None,
    username_option: str | None,
    teams: tuple[str, ...],
    dry_run: bool,
    assume_yes: bool,
):
    """Add USERNAME to the onboarding teams."""
    login = _resolve_username(username, username_option)
    _execute(obj, run_onboard, dry_run, assume_yes, username=login, joining_teams=teams)


@main.command()
@click.argument("username", required=False)
@click.option("--username", "username_option", default=None, help="GitHub login to offboard.")
@_run_flags
@click.pass_obj
def offboard(obj: dict[str, Any], username: str | None, username_option: str | None, dry_run: bool, assume_yes: bool):
    """Remove USERNAME from every team."""
    login = _resolve_username(username, username_option)
    _execute(obj, run_offboard, dry_run, assume_yes, username=login)


@main.command()
@click.option(
    "--months-inactive-threshold",
    type=int,
    default=DEFAULT_MONTHS_INACTIVE_THRESHOLD,
    show_default=True,
    help="Months without contributions after which a member becomes emeritus.",
)
@_run_flags
@click.pass_obj
def emeritus(obj: dict[str, Any], months_inactive_threshold: int, dry_run: bool, assume_yes: bool):
    """Move members inactive for longer than the threshold to the emeritus team."""
    _execute(obj, run_emeritus, dry_run, assume_yes, months_inactive_threshold=months_inactive_threshold)


if __name__ == "__main__":
    main()
