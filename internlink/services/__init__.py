"""
High-level use cases for the InternLink data layer.

Each service module orchestrates the collection store to implement business
rules (create records, run retention cleanup, seed demo data). Callers should
go through these services instead of reading collections directly.
"""
