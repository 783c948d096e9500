"""
Application-wide constants.
"""

# Remote-imposed maximum page size for GraphQL connections
GRAPHQL_PAGE_SIZE = 100

# The contributions collection cannot span more than one year per query
MAX_CONTRIBUTION_WINDOW_YEARS = 1

DEFAULT_ORG = "fastify"
DEFAULT_MONTHS_INACTIVE_THRESHOLD = 12

# Team roles that are never demoted automatically
PRIVILEGED_ROLES: frozenset[str] = frozenset({"MAINTAINER"})

EMERITUS_ISSUE_TITLE = "Move to emeritus members"
EMERITUS_ISSUE_LABELS: list[str] = ["question"]
