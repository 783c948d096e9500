"""
External system integrations: GitHub (GraphQL + REST) and the npm registry.
"""
