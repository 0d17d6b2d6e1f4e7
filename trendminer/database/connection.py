"""SQLAlchemy engine and session helpers.

One engine is built at import time from settings.database_url and shared by
the API, the CLI and the record store. Sessions come in three flavours:

- get_session(): generator that commits on success, rolls back on error
- get_session_context(): the same as a ``with`` block, used by CLI commands
- get_db(): FastAPI dependency; only closes the session, the services commit
  their own work and the exception handlers shape the error response
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ..config.settings import settings

# SQLite connections are shared across FastAPI's worker threads
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_size=settings.database_pool_size,
    pool_pre_ping=True,  # Drop connections the server closed while idle
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_session() -> Generator[Session, None, None]:
    """Yield a session and commit it once the caller is done.

    Usage:
        for session in get_session():
            session.query(CustomModel).count()
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
    """``with get_session_context() as session: ...`` form of get_session()."""
    yield from get_session()


def get_db() -> Generator[Session, None, None]:
    """Per-request session for FastAPI routes (``Depends(get_db)``)."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
