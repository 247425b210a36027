"""Database connection, session and transaction management."""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL, SQL_ECHO
from .errors import StoreError

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO):
    """Create an engine for the given URL.

    PostgreSQL gets a pooled engine. SQLite (used by tests and local runs)
    gets foreign key enforcement, and a single shared connection when the
    database lives in memory.
    """
    if url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        if ':memory:' in url or url in ('sqlite://', 'sqlite+pysqlite://'):
            kwargs['poolclass'] = StaticPool
        sqlite_engine = create_engine(url, echo=echo, **kwargs)
        event.listen(sqlite_engine, 'connect', _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20
    )


def make_session_factory(bind):
    """Session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


# Default engine and session factory, created on first use
_engine = None
_session_factory = None


def get_engine():
    global _engine
    if _engine is None:
        _engine = make_engine()
    return _engine


def SessionLocal():
    """Open a session on the default engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = make_session_factory(get_engine())
    return _session_factory()


def init_db(bind=None):
    """Initialize database (create all tables). Use Alembic for migrations in production."""
    from . import models  # noqa: F401  (register tables on Base.metadata)
    Base.metadata.create_all(bind=bind or get_engine())


@contextmanager
def transaction(db, action: str):
    """Run a unit of work that commits or rolls back as a whole.

    `action` names the operation in the generic error message, e.g.
    ``transaction(db, 'moving customer')`` fails with "Error moving customer".
    Service errors raised inside the block roll back and propagate unchanged;
    store failures are logged and re-raised as StoreError.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Store failure while {action}")
        raise StoreError(f"Error {action}") from e
    except Exception:
        db.rollback()
        raise


@contextmanager
def store_errors(db, action: str):
    """Read-only counterpart of transaction(): no commit, same error mapping."""
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Store failure while {action}")
        raise StoreError(f"Error {action}") from e
