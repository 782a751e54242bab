# app/db/init_db.py
"""Database initialization utilities."""
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from app.config.logging import get_logger
from app.db.base import Base
from app.db.session import engine as default_engine

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create any missing tables.

    Note: suitable for development and tests. Production schemas should be
    managed with migrations.
    """
    bind = bind or default_engine
    try:
        existing_tables = set(inspect(bind).get_table_names())
        missing = [name for name in Base.metadata.tables if name not in existing_tables]

        if missing:
            Base.metadata.create_all(bind=bind)
            logger.info(f"Database tables created: {', '.join(missing)}")
        else:
            logger.info(f"Database already initialized with {len(existing_tables)} tables")

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise

