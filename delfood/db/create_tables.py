"""Create (or drop) the owner tables. Run as ``python -m delfood.db.create_tables``."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all(engine=None) -> None:
    Base.metadata.create_all(bind=engine or get_engine())


def drop_all(engine=None) -> None:
    Base.metadata.drop_all(bind=engine or get_engine())


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
