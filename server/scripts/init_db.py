#!/usr/bin/env python3
"""Create the catalog tables and seed categories.

Usage:
    python scripts/init_db.py [CATEGORY ...]

Categories named on the command line are created in the given display order
unless a category with the same name (case-insensitive) already exists.
"""
import logging
import sys
import time
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError

# Add parent directory to path so we can import storefront modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.core.config import get_settings
from storefront.core.db import engine, session_scope
from storefront.models import Base
from storefront.services.category_repository import CategoryRepository

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] %(levelname)s - %(message)s",
)


def wait_for_db(database_url: str, max_retries: int = 30, retry_interval: int = 2) -> bool:
    """Wait for database to become available.
    
    Args:
        database_url: SQLAlchemy database URL
        max_retries: Maximum number of connection attempts
        retry_interval: Seconds to wait between retries
        
    Returns:
        True if database is available, False otherwise
    """
    logger.info("Waiting for database to become available...")

    probe = create_engine(database_url, pool_pre_ping=True)

    for attempt in range(1, max_retries + 1):
        try:
            with probe.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established")
            probe.dispose()
            return True
        except OperationalError as e:
            if attempt == max_retries:
                logger.error(f"Failed to connect to database after {max_retries} attempts: {e}")
                probe.dispose()
                return False

            logger.warning(f"  Attempt {attempt}/{max_retries} failed, retrying in {retry_interval}s...")
            time.sleep(retry_interval)

    probe.dispose()
    return False


def seed_categories(names: list[str]) -> int:
    """Create missing categories, returning how many were added."""
    created = 0
    with session_scope() as session:
        repository = CategoryRepository(session)
        for display_order, name in enumerate(names):
            if repository.get_by_name(name) is not None:
                logger.info(f"  Category '{name}' already exists")
                continue
            repository.create(name, display_order=display_order)
            created += 1
            logger.info(f"  Created category '{name}'")
    return created


def main(argv: list[str]) -> int:
    """Main entry point.
    
    Returns:
        Exit code (0 = success, 1 = failure)
    """
    settings = get_settings()

    if not wait_for_db(settings.database_url):
        logger.error("Database is not available. Exiting.")
        return 1

    logger.info("Creating tables...")
    Base.metadata.create_all(engine)

    if argv:
        created = seed_categories(argv)
        logger.info(f"Seeded {created} new categories")

    logger.info("Database initialised")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
