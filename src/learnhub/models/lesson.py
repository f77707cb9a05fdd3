from sqlalchemy import Column, DateTime, Integer, String

from .base import Base, utcnow


class LessonModel(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False)
    course_id = Column(Integer, index=True, nullable=False)
    content_type = Column(String, nullable=False)
    content_url = Column(String, nullable=False)
    order = Column(Integer, nullable=False)  # display order, not unique
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
