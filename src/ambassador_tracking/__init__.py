"""
Ambassador compliance engine.

Normalizes activity counts from the analytics service, judges them
against weekly quotas, rolls ambassadors up by team, and serves the
filtered/sorted roster views and warning escalation state.
"""
