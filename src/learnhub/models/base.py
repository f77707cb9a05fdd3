"""Declarative base shared by all database models."""

from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Return the current UTC time as an aware datetime."""
    return datetime.now(pytz.utc)
