# backend/rentiful/db.py
from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import settings
from .geo import register_sqlite_spatial_functions


class Base(DeclarativeBase):
    pass


def build_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # TestClient and FastAPI's threadpool share connections across threads
        connect_args["check_same_thread"] = False

    eng = create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )

    if eng.dialect.name == "sqlite":

        @event.listens_for(eng, "connect")
        def _on_connect(dbapi_connection, _record) -> None:
            register_sqlite_spatial_functions(dbapi_connection)
            cur = dbapi_connection.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

    return eng


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_db():
    """
    IMPORTANT (Postgres):
    If any SQL statement fails, the transaction is aborted and the session
    cannot run further statements until a rollback happens.

    This dependency guarantees rollback on exceptions so errors don't cascade
    into "InFailedSqlTransaction" on later queries in the same request.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create tables directly (local/dev and tests). Production uses Alembic."""
    from . import models  # noqa: F401  (registers mappers)

    Base.metadata.create_all(bind=engine)
