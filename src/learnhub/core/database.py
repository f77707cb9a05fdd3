"""Database connection and session management.

This module handles the database connection using SQLAlchemy.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from learnhub.config import DATA_DIR, DATABASE_URL
from learnhub.models.base import Base
# Import models to ensure they are registered with Base.metadata
import learnhub.models  # noqa: F401

logger = logging.getLogger(__name__)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # Ensure data directory exists
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create tables if they do not exist."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")


def get_db():
    """Dependency for getting a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
