# database/session.py
from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core import config


# -----------------------------------------------------------------------------------
# 1) DB URL
#    - priority:
#      1) explicit url argument
#      2) core.config.DATABASE_URL (env DATABASE_URL or DB_* parts)
# -----------------------------------------------------------------------------------
def resolve_database_url(url: str | None = None) -> str:
    database_url = url or config.DATABASE_URL
    if not database_url:
        raise RuntimeError(
            "No database configured. "
            "Set DATABASE_URL or DB_USER/DB_PASSWORD/DB_SERVER/DB_NAME in the environment/.env."
        )
    return database_url


def _enable_sqlite_fk(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _fk_pragma(dbapi_conn, _record):  # pragma: no cover - driver hook
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# -----------------------------------------------------------------------------------
# 2) SQLAlchemy Engine / sessionmaker
#    owned by the app lifespan (main.py), never created at import time
# -----------------------------------------------------------------------------------
def build_engine(url: str | None = None, *, echo: bool | None = None) -> Engine:
    database_url = resolve_database_url(url)
    echo = config.DB_ECHO if echo is None else echo

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, future=True, **kwargs)
        _enable_sqlite_fk(engine)
        return engine

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        future=True,
    )


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        future=True,
    )
