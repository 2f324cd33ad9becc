from sqlalchemy import create_engine, event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from fastapi import Request
from typing import Generator
import sqlite3
import logging
import uuid

from second_brain.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Stores with INSERT ... ON CONFLICT DO NOTHING, used for tag find-or-create
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def new_id() -> str:
    """Primary key for every table: 32 lowercase hex characters."""
    return uuid.uuid4().hex


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured store.

    Every statement is bounded by DB_STATEMENT_TIMEOUT_MS: PostgreSQL enforces
    it server side, SQLite uses it as the lock wait limit.
    """
    url = settings.database_url
    timeout_ms = settings.DB_STATEMENT_TIMEOUT_MS

    backend = make_url(url).get_backend_name()
    if backend not in UPSERT_INSERTS:
        raise ValueError(
            f"Unsupported database backend {backend!r}; expected one of {sorted(UPSERT_INSERTS)}"
        )

    if url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": timeout_ms / 1000,
        }
    else:
        connect_args = {"options": f"-c statement_timeout={timeout_ms}"}

    engine = create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=not url.startswith("sqlite"),
    )
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Request-scoped session; uncommitted work is discarded on any error."""
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
