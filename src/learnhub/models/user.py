"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash, salt embedded
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")  # 'student', 'teacher', or 'admin'
    bio = Column(Text, nullable=True)
    profile_pic_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    sessions = relationship(
        "UserSessionModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
