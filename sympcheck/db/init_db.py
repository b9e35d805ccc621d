"""
Database initialization script.
"""
import logging

from sympcheck.db.session import create_tables
from sympcheck.core.config import settings

logger = logging.getLogger(__name__)


def init_db():
    """Initialize the database."""
    logger.info(f"Initializing database at {settings.database_url_safe}...")
    create_tables()
    logger.info("Database initialization completed")


if __name__ == "__main__":
    init_db()
