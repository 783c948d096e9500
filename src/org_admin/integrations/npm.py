"""
npm registry team management through the npm CLI.
"""

import asyncio
import os

import structlog

from org_admin.core.errors import NpmCommandError, OTPRequiredError

logger = structlog.get_logger(__name__)

_OTP_MARKERS = ("code EOTP", "one-time password")


class NpmClient:
    """Runs ``npm team`` commands against an npm organization."""

    def __init__(self, binary: str = "npm"):
        self.binary = binary

    async def remove_team_member(self, org: str, team_slug: str, username: str, otp: str | None = None) -> str:
        """
        Remove a user from an npm organization team.

        Raises:
            OTPRequiredError: If the registry asks for a one-time password.
            NpmCommandError: If the command fails for any other reason.
        """
        args = ["team", "rm", f"@{org}:{team_slug}", username]
        if otp:
            args += ["--otp", otp]

        output = await self._run(args)
        logger.info("npm_team_member_removed", org=org, team=team_slug, username=username)
        return output

    async def _run(self, args: list[str]) -> str:
        cmd = [self.binary, *args]
        # OTP values never reach logs or error messages
        shown = [cmd[0], *("***" if prev == "--otp" else arg for prev, arg in zip(cmd, cmd[1:], strict=False))]
        logger.debug("npm_command_started", cmd=" ".join(shown))

        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=os.environ.copy(),
        )
        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        if process.returncode == 0:
            return stdout.strip()

        combined = f"{stdout}\n{stderr}"
        if any(marker in combined for marker in _OTP_MARKERS):
            raise OTPRequiredError(shown, process.returncode, stdout, stderr)
        raise NpmCommandError(shown, process.returncode, stdout, stderr)
