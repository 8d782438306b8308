"""Database connection management and initialization."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from skillswap.config import DEFAULT_DATABASE_URL
from skillswap.storage.models import Base

# Module-level engine and session factory
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine(database_url: str | None = None) -> Engine:
    """Get or create the SQLAlchemy engine.

    Args:
        database_url: Optional SQLAlchemy URL. Defaults to data/skillswap.db.
            Only used when the engine is first created.

    Returns:
        SQLAlchemy Engine instance.
    """
    global _engine

    if _engine is None:
        if database_url is None:
            database_url = DEFAULT_DATABASE_URL

        url = make_url(database_url)
        connect_args = {}
        if url.get_backend_name() == "sqlite":
            # Ensure data directory exists for file databases
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            connect_args["check_same_thread"] = False

        _engine = create_engine(url, echo=False, connect_args=connect_args)

    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Return the shared session factory bound to the engine."""
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine())

    return _session_factory


@contextmanager
def get_session() -> Iterator[Session]:
    """Get a database session that commits on success.

    Yields:
        SQLAlchemy Session instance.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(database_url: str | None = None) -> None:
    """Initialize the database by creating all tables.

    Args:
        database_url: Optional SQLAlchemy URL. Defaults to data/skillswap.db.
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)


def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
