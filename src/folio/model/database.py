"""
Database Model - Shared SQLAlchemy engine with connection pooling
"""
import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..utils.base import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class Database(metaclass=Base):
    """Database connection manager. One engine per process, reused across requests."""

    def __init__(self):
        self._engine: Optional[Engine] = None

    def connect(self, database_url: str, pool_size: int = 10) -> Engine:
        """Create the engine and its connection pool (no-op when already connected)."""
        if self._engine is not None:
            return self._engine

        options = {'pool_pre_ping': True}
        if database_url.startswith('sqlite'):
            engine = create_engine(database_url, **options)
            event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
        else:
            engine = create_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=pool_size,
                **options
            )

        try:
            with engine.connect():
                pass
        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to database: {e}")
            engine.dispose()
            raise

        self._engine = engine
        logger.info(f"Connected to database: {engine.url.render_as_string(hide_password=True)}")
        return engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise ConnectionError("Database not connected. Call connect() first.")
        return self._engine

    def begin(self):
        """Connection inside a transaction, committed on exit."""
        return self.engine.begin()

    def connection(self):
        return self.engine.connect()

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection closed")

    @property
    def is_connected(self) -> bool:
        return self._engine is not None
