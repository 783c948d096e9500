"""
Shared utilities for logging and date arithmetic.
"""

from org_admin.core.utils.dates import months_between, years_before
from org_admin.core.utils.logging import configure_logging, log_operation

__all__ = [
    "configure_logging",
    "log_operation",
    "months_between",
    "years_before",
]
