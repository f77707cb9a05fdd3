"""Enrollment and lesson progress tracking.

An enrollment links a student to a course; progress rows record a student
completing (or not) one lesson. The enrollment's completion percentage is a
stored field that callers set directly. With ``derive_completion`` enabled,
recording progress also recomputes it from the student's completed lessons.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytz
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub.config import DERIVE_COMPLETION_FROM_PROGRESS
from learnhub.core.exceptions import AlreadyEnrolledError, EntityNotFoundError
from learnhub.models.course import CourseModel
from learnhub.models.enrollment import EnrollmentModel
from learnhub.models.lesson import LessonModel
from learnhub.models.progress import ProgressModel

logger = logging.getLogger(__name__)


class EnrollmentManager:
    """Manages enrollment and progress operations using SQLAlchemy."""

    def __init__(self, db: Session, derive_completion: bool = DERIVE_COMPLETION_FROM_PROGRESS):
        """Initialize EnrollmentManager.

        Args:
            db: SQLAlchemy Session.
            derive_completion: Recompute enrollment completion from progress
                rows whenever progress is recorded or updated.
        """
        self.db = db
        self.derive_completion = derive_completion

    # --- Enrollments ---

    def enroll(
        self,
        student_id: int,
        course_id: int,
        completed: bool = False,
        completion_percentage: int = 0,
    ) -> EnrollmentModel:
        """Enroll a student in a course.

        The unique constraint on (student_id, course_id) decides whether the
        enrollment already exists, so concurrent requests cannot both succeed.

        Raises:
            EntityNotFoundError: If the course does not exist.
            AlreadyEnrolledError: If the student is already enrolled.
        """
        if self.db.get(CourseModel, course_id) is None:
            raise EntityNotFoundError("Course", course_id)

        now = datetime.now(pytz.utc)
        model = EnrollmentModel(
            student_id=student_id,
            course_id=course_id,
            enrolled_at=now,
            completed=completed,
            completion_percentage=completion_percentage,
            last_accessed=now,
        )
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(
                "Rejected duplicate enrollment: student %s, course %s",
                student_id,
                course_id,
            )
            raise AlreadyEnrolledError(student_id, course_id) from e
        self.db.refresh(model)
        logger.info(
            "Enrolled student %s in course %s (enrollment %s)",
            student_id,
            course_id,
            model.id,
        )
        return model

    def get_enrollment(self, enrollment_id: int) -> EnrollmentModel:
        model = self.db.get(EnrollmentModel, enrollment_id)
        if model is None:
            raise EntityNotFoundError("Enrollment", enrollment_id)
        return model

    def find_enrollment(self, student_id: int, course_id: int) -> Optional[EnrollmentModel]:
        return (
            self.db.query(EnrollmentModel)
            .filter(
                EnrollmentModel.student_id == student_id,
                EnrollmentModel.course_id == course_id,
            )
            .first()
        )

    def list_enrollments_for_student(
        self, student_id: int
    ) -> List[Tuple[EnrollmentModel, Optional[CourseModel]]]:
        """List a student's enrollments, each paired with its course.

        Courses are loaded in a single query; the course is None when it has
        been deleted since the student enrolled.
        """
        enrollments = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.student_id == student_id)
            .order_by(EnrollmentModel.id)
            .all()
        )
        course_ids = {e.course_id for e in enrollments}
        courses = {}
        if course_ids:
            courses = {
                c.id: c
                for c in self.db.query(CourseModel).filter(CourseModel.id.in_(course_ids))
            }
        return [(e, courses.get(e.course_id)) for e in enrollments]

    def list_enrollments_for_course(self, course_id: int) -> List[EnrollmentModel]:
        return (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.course_id == course_id)
            .order_by(EnrollmentModel.id)
            .all()
        )

    def update_enrollment(self, enrollment_id: int, changes: Dict[str, Any]) -> EnrollmentModel:
        """Apply a partial update.

        ``last_accessed`` is set to now on every call, whatever else changes.
        """
        model = self.get_enrollment(enrollment_id)
        if changes.get("completed") is not None:
            model.completed = changes["completed"]
        if changes.get("completion_percentage") is not None:
            model.completion_percentage = changes["completion_percentage"]
        model.last_accessed = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(model)
        return model

    # --- Progress ---

    def record_progress(self, student_id: int, lesson_id: int, completed: bool = False) -> ProgressModel:
        """Insert a progress row.

        Repeated calls for the same lesson add new rows rather than updating
        an existing one.
        """
        now = datetime.now(pytz.utc)
        model = ProgressModel(
            student_id=student_id,
            lesson_id=lesson_id,
            completed=completed,
            completed_at=now if completed else None,
            created_at=now,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        if self.derive_completion:
            self.sync_completion(student_id, lesson_id)
        return model

    def get_progress(self, progress_id: int) -> ProgressModel:
        model = self.db.get(ProgressModel, progress_id)
        if model is None:
            raise EntityNotFoundError("Progress", progress_id)
        return model

    def update_progress(self, progress_id: int, completed: bool) -> ProgressModel:
        """Set ``completed`` and recompute ``completed_at`` from it."""
        model = self.get_progress(progress_id)
        model.completed = completed
        model.completed_at = datetime.now(pytz.utc) if completed else None
        self.db.commit()
        self.db.refresh(model)
        if self.derive_completion:
            self.sync_completion(model.student_id, model.lesson_id)
        return model

    def list_progress_for_student(self, student_id: int) -> List[ProgressModel]:
        return (
            self.db.query(ProgressModel)
            .filter(ProgressModel.student_id == student_id)
            .order_by(ProgressModel.id)
            .all()
        )

    def sync_completion(self, student_id: int, lesson_id: int) -> Optional[EnrollmentModel]:
        """Recompute an enrollment's completion from lesson progress.

        The percentage is the share of the course's lessons with at least one
        completed progress row for the student. Returns None when the lesson
        or the enrollment does not exist.
        """
        lesson = self.db.get(LessonModel, lesson_id)
        if lesson is None:
            return None
        enrollment = self.find_enrollment(student_id, lesson.course_id)
        if enrollment is None:
            return None

        total = (
            self.db.query(func.count(LessonModel.id))
            .filter(LessonModel.course_id == lesson.course_id)
            .scalar()
        )
        done = (
            self.db.query(func.count(func.distinct(ProgressModel.lesson_id)))
            .join(LessonModel, LessonModel.id == ProgressModel.lesson_id)
            .filter(
                LessonModel.course_id == lesson.course_id,
                ProgressModel.student_id == student_id,
                ProgressModel.completed.is_(True),
            )
            .scalar()
        )
        percentage = int(round(100 * done / total)) if total else 0
        enrollment.completion_percentage = percentage
        enrollment.completed = total > 0 and done >= total
        enrollment.last_accessed = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(enrollment)
        logger.debug(
            "Enrollment %s completion set to %s%%", enrollment.id, percentage
        )
        return enrollment
