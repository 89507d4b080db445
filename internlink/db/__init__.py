"""Database helpers (engine export)."""

from .session import Base, get_engine, make_engine

__all__ = ["Base", "get_engine", "make_engine"]
