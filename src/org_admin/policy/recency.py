"""Recency classifier for emeritus eligibility.

Months are counted on the calendar (year and month only), so activity on
the 31st of a month and on the 1st of the same month are the same distance
away. Activity exactly ``threshold`` months ago still counts as active.
"""

import math
from datetime import UTC, datetime

from org_admin.core.models import MemberActivity
from org_admin.core.utils.dates import months_between


def is_eligible_for_transition(
    activity: MemberActivity, threshold_months: int, now: datetime | None = None
) -> bool:
    """
    Return True when no known contribution is within ``threshold_months``.

    A member without any recorded contribution is eligible.
    """
    now = now or datetime.now(UTC)
    return not any(months_between(ts, now) <= threshold_months for ts in activity.timestamps)


def window_years_for_threshold(threshold_months: int) -> int:
    """Number of one-year query windows needed to cover the threshold."""
    return math.ceil(threshold_months / 12)
