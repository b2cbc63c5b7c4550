"""
Core app for the newsroom backend.

Provides staff roles, the shared base model, standardized error handling,
request tracing, throttling and health checks.
"""
