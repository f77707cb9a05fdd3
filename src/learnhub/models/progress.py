from sqlalchemy import Boolean, Column, DateTime, Integer

from .base import Base, utcnow


class ProgressModel(Base):
    __tablename__ = "progress"

    # No uniqueness on (student_id, lesson_id): every post is a new row
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    student_id = Column(Integer, index=True, nullable=False)
    lesson_id = Column(Integer, index=True, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
