"""
Database connection and session management for the Recipe Catalog.

Services never build engines or sessions themselves; they call
session_scope() or accept a caller's Session. SQLite connections get
foreign keys switched on and explicit BEGIN so savepoints nest.
"""

from typing import Optional
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..utils.config import get_config
from ..models.base import Base

logger = logging.getLogger(__name__)

# Global engine and session factory
_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """
    Enable foreign key constraints on every new SQLite connection.

    Recipe deletion relies on foreign keys being enforced: leftover join
    rows make the delete fail instead of leaving orphans behind.
    """
    if type(dbapi_connection).__module__.split(".")[0] != "sqlite3":
        return

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_transactions(engine: Engine) -> Engine:
    """
    Let SQLAlchemy emit BEGIN itself on a pysqlite engine.

    The pysqlite driver defers BEGIN until the first write, so a SAVEPOINT
    issued after plain reads would open the outer transaction and its
    RELEASE would commit. Emitting BEGIN when the connection begins keeps
    savepoints nested inside the session's transaction.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build an engine for the catalog database.

    Args:
        database_url: Database URL; defaults to the configured one
        echo: Log every SQL statement
    """
    if database_url is None:
        config = get_config()
        config.ensure_directories()
        database_url = config.database_url

    logger.info(f"Creating database engine: {database_url}")

    if ":memory:" in database_url or "mode=memory" in database_url:
        # In-memory databases live in one connection, shared through StaticPool
        return enable_sqlite_transactions(
            create_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        )

    if database_url.startswith("sqlite"):
        return enable_sqlite_transactions(
            create_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False, "timeout": 30},
            )
        )

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def _import_models() -> None:
    """Import all model modules so they register with Base.metadata."""
    from ..models import category, favorite, ingredient, recipe, user  # noqa: F401


def init_database(engine: Optional[Engine] = None) -> None:
    """
    Create any missing catalog tables. Existing tables are left untouched.

    Args:
        engine: Engine to create on; defaults to the global engine
    """
    if engine is None:
        engine = get_engine()

    logger.info("Initializing database tables")
    _import_models()
    Base.metadata.create_all(engine)
    logger.info("Database tables initialized successfully")


def get_engine(force_recreate: bool = False) -> Engine:
    """Return the process-wide engine, building it from config on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """
    Return the process-wide sessionmaker.

    Sessions keep loaded attributes after commit so services can build
    DTOs from objects they just saved.
    """
    global _SessionFactory

    if _SessionFactory is None:
        engine = get_engine()
        _SessionFactory = sessionmaker(bind=engine, expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    """Open a session from the global factory."""
    session_factory = get_session_factory()
    return session_factory()


@contextmanager
def session_scope():
    """
    Run one service operation in its own transaction.

    The session commits when the block exits normally and rolls back when
    it raises, so a rejected recipe or favorite change persists nothing.

    Example:
        with session_scope() as session:
            session.add(Category(name="DESSERT"))
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database() -> bool:
    """Check that the recipe, ingredient and category tables exist."""
    try:
        engine = get_engine()
        tables = inspect(engine).get_table_names()
        expected_tables = ["recipes", "ingredients", "categories"]
        return all(table in tables for table in expected_tables)
    except Exception as e:
        logger.error(f"Database verification failed: {e}")
        return False


def reset_database(confirm: bool = False) -> None:
    """
    Drop and recreate every catalog table, deleting all recipes and users.

    Raises:
        ValueError: Unless confirm is True
    """
    if not confirm:
        raise ValueError("Must pass confirm=True to reset database. This will delete all data!")

    logger.warning("RESETTING DATABASE - ALL DATA WILL BE LOST")

    engine = get_engine()
    _import_models()

    Base.metadata.drop_all(engine)
    logger.info("All tables dropped")

    Base.metadata.create_all(engine)
    logger.info("Tables recreated")


def close_connections() -> None:
    """Dispose of the global engine and session factory."""
    global _engine, _SessionFactory

    _SessionFactory = None

    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Create the catalog schema if needed and log whether it verified."""
    engine = get_engine()
    init_database(engine)

    if verify_database():
        logger.info("Database initialized and verified successfully")
    else:
        logger.warning("Database verification failed - tables may not exist")
