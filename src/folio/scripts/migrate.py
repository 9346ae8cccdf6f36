"""
Schema migrations - Upgrade the database to the latest Alembic revision
"""
import logging
from typing import Optional

from alembic import command
from alembic.config import Config as AlembicConfig
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine

from ..utils.config import Config, ConfigurationError

logger = logging.getLogger(__name__)


def build_alembic_config(database_url: str) -> AlembicConfig:
    """Alembic configuration pointing at the packaged revisions, no ini file needed"""
    cfg = AlembicConfig()
    cfg.set_main_option('script_location', Config.MIGRATIONS_DIR)
    # ConfigParser interpolation treats '%' specially (URL-encoded passwords)
    cfg.set_main_option('sqlalchemy.url', database_url.replace('%', '%%'))
    return cfg


def run_migrations(database_url: Optional[str] = None, revision: str = 'head') -> None:
    """
    Apply every pending migration up to ``revision``.

    Running it against an up-to-date schema does nothing.

    Raises:
        ConfigurationError: If no database URL is configured
    """
    database_url = database_url or Config.DATABASE_URL
    if not database_url:
        raise ConfigurationError("Missing required environment variables: DATABASE_URL")

    before = get_current_revision(database_url)
    logger.info(f"Running migrations (current revision: {before or 'none'})")
    command.upgrade(build_alembic_config(database_url), revision)

    after = get_current_revision(database_url)
    if before == after:
        logger.info("Database schema already up to date")
    else:
        logger.info(f"Migrations complete: {before or 'none'} -> {after}")


def get_current_revision(database_url: str) -> Optional[str]:
    """Revision recorded in the database, None before the first migration"""
    engine = create_engine(database_url)
    try:
        with engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()
    finally:
        engine.dispose()
