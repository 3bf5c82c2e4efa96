"""Database initialization utilities."""
import logging
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from guesthouse.db.base import Base

logger = logging.getLogger(__name__)


def import_models() -> None:
    """Import all models so they register with Base.metadata."""
    import guesthouse.models  # noqa: F401


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create any missing tables.

    Note: This is suitable for development/testing only.
    """
    if bind is None:
        from guesthouse.db.session import engine as bind

    import_models()
    existing_tables = set(inspect(bind).get_table_names())
    Base.metadata.create_all(bind=bind)
    created = sorted(set(Base.metadata.tables) - existing_tables)
    if created:
        logger.info("Database tables created", extra={"tables": created})
    else:
        logger.info("Database already initialized", extra={"table_count": len(existing_tables)})

