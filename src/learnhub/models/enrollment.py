"""Enrollment database model."""

from sqlalchemy import Boolean, Column, DateTime, Integer, UniqueConstraint

from .base import Base, utcnow


class EnrollmentModel(Base):
    """A student's registration in a course."""

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "course_id",
            name="uq_enrollments_student_course",
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    student_id = Column(Integer, index=True, nullable=False)
    course_id = Column(Integer, index=True, nullable=False)
    enrolled_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed = Column(Boolean, nullable=False, default=False)
    completion_percentage = Column(Integer, nullable=False, default=0)
    last_accessed = Column(DateTime(timezone=True), nullable=True)
