from org_admin.tasks.executor import ExecutionEngine
from org_admin.tasks.stores import GitHubTeamStore, MembershipStore, NpmTeamStore

__all__ = [
    "ExecutionEngine",
    "GitHubTeamStore",
    "MembershipStore",
    "NpmTeamStore",
]
