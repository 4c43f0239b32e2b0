from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    false,
    func,
    text,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import DatabaseError
from .settings import get_settings

logger = logging.getLogger(__name__)

metadata = MetaData()

todos = Table(
    "todos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("completed", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)


class Database:
    """
    Pooled database handle.

    The engine's connection pool is created eagerly but no connection is opened
    until the first statement runs, so constructing a Database never blocks on
    an unreachable server.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        retry_delay: float = 5.0,
    ) -> None:
        self.url = url
        self.retry_delay = retry_delay
        self.ready = False
        self.engine: Engine = create_engine(
            url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    @contextmanager
    def connect(self) -> Generator[Connection, None, None]:
        """Yield a transactional connection; commit on success, roll back on error."""
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            raise DatabaseError() from e

    def initialize(self) -> bool:
        """Make one attempt to reach the database and create the todos table."""
        try:
            with self.engine.begin() as conn:
                metadata.create_all(conn, checkfirst=True)
        except SQLAlchemyError as e:
            logger.warning(f"Database connection failed: {e}")
            return False
        self.ready = True
        logger.info("Database initialized (table ready)")
        return True

    def connect_with_retry(
        self,
        stop_event: Optional[threading.Event] = None,
        max_attempts: Optional[int] = None,
        delay_first: bool = False,
    ) -> bool:
        """
        Call initialize() until it succeeds, waiting retry_delay seconds between
        attempts. Retries forever unless max_attempts is given or stop_event is set.
        With delay_first the loop also waits before its first attempt, for callers
        that already made one.

        Returns:
            True once the database is ready, False if the loop gave up.
        """
        stop = stop_event or threading.Event()
        if delay_first:
            stop.wait(self.retry_delay)
        attempt = 0
        while not stop.is_set():
            attempt += 1
            if self.initialize():
                return True
            if max_attempts is not None and attempt >= max_attempts:
                logger.error(f"Giving up on database after {attempt} attempts")
                return False
            logger.warning(
                f"Retrying database connection in {self.retry_delay:g} seconds...",
                extra={"attempt": attempt},
            )
            stop.wait(self.retry_delay)
        return False

    def ping(self) -> bool:
        """Run a trivial query; used by the readiness probe."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


_database: Optional[Database] = None
_database_lock = threading.Lock()


# PUBLIC_INTERFACE
def get_database() -> Database:
    """Return the process-wide Database, creating it from settings on first use."""
    global _database
    with _database_lock:
        if _database is None:
            settings = get_settings()
            _database = Database(
                settings.database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                retry_delay=settings.db_connect_retry_seconds,
            )
        return _database


def reset_database() -> None:
    """Dispose the process-wide Database so the next get_database() rebuilds it."""
    global _database
    with _database_lock:
        if _database is not None:
            _database.dispose()
            logger.info("Database connection pool closed")
        _database = None
