"""
Membership policy: activity recency classification and reconciliation planning.

Everything in this package is pure and performs no I/O.
"""

from org_admin.policy.planner import (
    MembershipIndex,
    build_membership_index,
    plan_emeritus_transition,
    plan_offboard,
    plan_team_join,
)
from org_admin.policy.recency import is_eligible_for_transition, window_years_for_threshold

__all__ = [
    "MembershipIndex",
    "build_membership_index",
    "is_eligible_for_transition",
    "plan_emeritus_transition",
    "plan_offboard",
    "plan_team_join",
    "window_years_for_threshold",
]
