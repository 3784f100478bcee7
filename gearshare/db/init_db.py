# File: gearshare/db/init_db.py

"""
Database initialization helpers.

Importing the model modules here registers every table on Base.metadata
and lets the string-based relationships between them resolve.
"""

import logging

from sqlalchemy.engine import Engine

from gearshare.db.session import engine as default_engine
from gearshare.models.base import Base
from gearshare.models import account, booking, gear, user  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(bind: Engine | None = None) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    bind = bind or default_engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))
