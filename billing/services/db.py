"""Database engine and session factory construction.

Nothing here is created at import time: the app factory and the CLI build
one engine per process and pass the session factory down to the services.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from billing.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    Args:
        settings: Application settings (database_url)

    Returns:
        Engine; in-memory SQLite shares one connection via StaticPool
    """
    url = settings.database_url
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create the session factory bound to an engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


__all__ = ["create_db_engine", "create_session_factory"]
