"""Create the key-value table (also used by SQLKeyValueStore on startup)."""
from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers kv_entries on Base.metadata


def create_all(engine: Engine | None = None) -> Engine:
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine, tables=[models.KeyValueEntry.__table__])
    return engine


if __name__ == "__main__":
    try:
        bound = create_all()
        print(f"kv_entries ready on {bound.url.render_as_string(hide_password=True)}")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
