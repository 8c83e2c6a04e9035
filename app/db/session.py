"""
Database session management for DocNotes.

This module provides the `Database` handle that owns the SQLAlchemy engine
and session factory. The application factory constructs one instance,
initializes it at startup and disposes it at shutdown; request handlers get
sessions from it through the `get_db` dependency.

Usage:
    from app.db.session import Database

    database = Database("sqlite:///docnotes.db")
    database.init()
    database.dispose()
"""

import logging
import threading
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.db.models import Base

# Configure module logger
logger = logging.getLogger(__name__)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return _is_sqlite(url) and (":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite://"))


class Database:
    """
    Owns the engine and session factory for one database.

    Attributes:
        url: SQLAlchemy connection URL
        engine: The SQLAlchemy engine
        SessionLocal: Session factory bound to the engine
    """

    def __init__(self, url: str, echo: bool = False):
        """
        Create the engine and session factory. No connection is opened yet.

        Args:
            url: SQLAlchemy connection URL
            echo: Whether to log emitted SQL
        """
        self.url = url
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}

        if _is_sqlite(url):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(url):
                # A single shared connection keeps the in-memory schema alive
                engine_kwargs["poolclass"] = StaticPool

        logger.info(f"Creating SQLAlchemy engine for {self._safe_url()}")
        self.engine: Engine = create_engine(url, **engine_kwargs)

        if _is_sqlite(url):
            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON;")
                cursor.close()

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def _safe_url(self) -> str:
        """The connection URL with any password masked."""
        return self.engine_url_repr(self.url)

    @staticmethod
    def engine_url_repr(url: str) -> str:
        if "@" not in url or "://" not in url:
            return url
        scheme, rest = url.split("://", 1)
        credentials, host = rest.rsplit("@", 1)
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def verify_connection(self) -> bool:
        """
        Verify that we can connect to the database.

        Returns:
            True if connection succeeds, False otherwise
        """
        try:
            with self.engine.connect() as connection:
                result = connection.execute(text("SELECT 1")).scalar()
                logger.info(f"Database connection verified: {result}")
                return True
        except Exception as e:
            logger.error(f"Database connection verification failed: {e}")
            return False

    def init(self, reset: bool = False) -> None:
        """
        Initialize the database schema.

        Args:
            reset: Whether to drop all tables before creating them

        Raises:
            RuntimeError: If the database cannot be reached
        """
        logger.info("Initializing database schema...")
        if not self.verify_connection():
            raise RuntimeError(f"Could not connect to database at {self._safe_url()}")

        if reset:
            logger.info("Dropping all tables for reset...")
            Base.metadata.drop_all(bind=self.engine)

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database schema initialized with {len(Base.metadata.tables)} tables")

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database engine disposed")

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def get_session(self) -> Generator[Session, None, None]:
        """
        Yield a session and close it afterwards.

        Returns:
            SQLAlchemy Session for database operations
        """
        thread_id = threading.get_ident()
        logger.debug(f"Creating DB session for thread {thread_id}")
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()
            logger.debug(f"Closed DB session for thread {thread_id}")

