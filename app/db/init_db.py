# File: app/db/init_db.py
"""
Database initialization script for DocNotes.

Creates the database directory (for SQLite) and the schema. Run with:

    python -m app.db.init_db [--reset]
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.db.session import Database

logger = logging.getLogger(__name__)


def create_database_directory(config: Settings) -> None:
    """Create the SQLite database directory if it doesn't exist."""
    if not config.DATABASE_URL.startswith("sqlite"):
        return
    db_dir = Path(config.DATABASE_PATH).parent
    if not db_dir.exists():
        logger.info(f"Creating database directory: {db_dir}")
        os.makedirs(db_dir, exist_ok=True)


def main(reset: bool = False, config: Optional[Settings] = None) -> None:
    """
    Initialize the database.

    Args:
        reset: Whether to reset the database by dropping all tables first
        config: Settings to use (module settings by default)
    """
    config = config or default_settings
    create_database_directory(config)

    database = Database(config.DATABASE_URL, echo=config.DB_ECHO)
    try:
        database.init(reset=reset)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")
        raise
    finally:
        database.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Initialize the DocNotes database")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    args = parser.parse_args()

    main(reset=args.reset)
