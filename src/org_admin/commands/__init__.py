"""
Lifecycle commands composing the graph adapter, the planner and the execution engine.
"""

from org_admin.commands.base import CommandContext, CommandResult
from org_admin.commands.emeritus import run_emeritus
from org_admin.commands.offboard import run_offboard
from org_admin.commands.onboard import run_onboard

__all__ = [
    "CommandContext",
    "CommandResult",
    "run_emeritus",
    "run_offboard",
    "run_onboard",
]
