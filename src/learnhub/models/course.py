"""Course database model."""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text

from .base import Base, utcnow


class CourseModel(Base):
    """Course database model.

    ``teacher_id`` is a plain reference to the owning user; deleting a course
    does not touch its lessons, enrollments or reviews.
    """

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False)
    teacher_id = Column(Integer, index=True, nullable=False)
    price = Column(Float, nullable=False, default=0)
    is_free = Column(Boolean, nullable=False, default=True)
    thumbnail_url = Column(String, nullable=True)
    status = Column(String, index=True, nullable=False, default="draft")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
