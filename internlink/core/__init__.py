"""
Core utilities shared across the InternLink data layer.

This package hosts:
- configuration helpers (env vars, storage paths, feature flags)
- logging setup
- password hashing helpers
"""
