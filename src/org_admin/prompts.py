"""
Interactive operator surface.

Blocking terminal prompts run in a worker thread so the event loop only
suspends while waiting for the operator.
"""

import asyncio
from typing import Protocol

import click
import structlog

logger = structlog.get_logger(__name__)


class Prompter(Protocol):
    async def confirm(self, question: str) -> bool: ...

    async def ask(self, message: str, hide_input: bool = False) -> str: ...


class TerminalPrompter:
    """Prompts on the controlling terminal through click."""

    async def confirm(self, question: str) -> bool:
        return await asyncio.to_thread(click.confirm, question, default=False, err=True)

    async def ask(self, message: str, hide_input: bool = False) -> str:
        answer = await asyncio.to_thread(click.prompt, message, hide_input=hide_input, err=True)
        return str(answer).strip()


class AutoConfirmPrompter(TerminalPrompter):
    """Answers yes to every confirmation; free-text prompts still reach the terminal."""

    async def confirm(self, question: str) -> bool:
        logger.info("confirmation_auto_accepted", question=question)
        return True
