"""
Organization membership lifecycle tooling.

Reconciles GitHub team membership and npm organization teams against
contribution activity.
"""

__version__ = "0.1.0"
