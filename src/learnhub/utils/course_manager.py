"""Course and lesson catalog utilities."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pytz
from sqlalchemy.orm import Session

from learnhub.config import COURSE_STATUS_DRAFT, COURSE_STATUSES
from learnhub.core.exceptions import EntityNotFoundError
from learnhub.models.course import CourseModel
from learnhub.models.lesson import LessonModel

logger = logging.getLogger(__name__)

_COURSE_FIELDS = (
    "title",
    "description",
    "category",
    "price",
    "is_free",
    "thumbnail_url",
    "status",
)
_LESSON_FIELDS = ("title", "content_type", "content_url", "order")


class CourseManager:
    """Manages course and lesson operations.

    Visibility and ownership are decided by the caller (see
    ``learnhub.core.permissions``); this class only reads and writes rows.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Courses ---

    def create_course(
        self,
        title: str,
        description: str,
        category: str,
        teacher_id: int,
        price: float = 0,
        is_free: bool = True,
        thumbnail_url: Optional[str] = None,
        status: str = COURSE_STATUS_DRAFT,
    ) -> CourseModel:
        """Create a new course owned by ``teacher_id``."""
        if status not in COURSE_STATUSES:
            raise ValueError(f"Invalid course status: {status}")
        now = datetime.now(pytz.utc)
        model = CourseModel(
            title=title,
            description=description,
            category=category,
            teacher_id=teacher_id,
            price=price,
            is_free=is_free,
            thumbnail_url=thumbnail_url,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created course %s for teacher %s", model.id, teacher_id)
        return model

    def get_course(self, course_id: int) -> CourseModel:
        model = self.db.get(CourseModel, course_id)
        if model is None:
            raise EntityNotFoundError("Course", course_id)
        return model

    def get_courses(self, course_ids: Iterable[int]) -> Dict[int, CourseModel]:
        """Fetch several courses in one query, keyed by id."""
        ids = set(course_ids)
        if not ids:
            return {}
        models = self.db.query(CourseModel).filter(CourseModel.id.in_(ids)).all()
        return {m.id: m for m in models}

    def list_courses(self, status: Optional[str] = None) -> List[CourseModel]:
        """List all courses, optionally restricted to one status."""
        query = self.db.query(CourseModel)
        if status:
            query = query.filter(CourseModel.status == status)
        return query.order_by(CourseModel.id).all()

    def list_courses_by_teacher(
        self, teacher_id: int, status: Optional[str] = None
    ) -> List[CourseModel]:
        query = self.db.query(CourseModel).filter(CourseModel.teacher_id == teacher_id)
        if status:
            query = query.filter(CourseModel.status == status)
        return query.order_by(CourseModel.id).all()

    def update_course(self, course_id: int, changes: Dict[str, Any]) -> CourseModel:
        """Apply a partial update and bump ``updated_at``.

        Any status may be set, including moving a published course back to
        draft.
        """
        model = self.get_course(course_id)
        if "status" in changes and changes["status"] not in COURSE_STATUSES:
            raise ValueError(f"Invalid course status: {changes['status']}")
        for field in _COURSE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(model, field, changes[field])
        if "thumbnail_url" in changes and changes["thumbnail_url"] is None:
            model.thumbnail_url = None
        model.updated_at = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated course %s", course_id)
        return model

    def delete_course(self, course_id: int) -> None:
        """Hard delete a course. Lessons, enrollments and reviews are kept."""
        model = self.get_course(course_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted course %s", course_id)

    # --- Lessons ---

    def create_lesson(
        self,
        course_id: int,
        title: str,
        content_type: str,
        content_url: str,
        order: int,
    ) -> LessonModel:
        self.get_course(course_id)
        model = LessonModel(
            title=title,
            course_id=course_id,
            content_type=content_type,
            content_url=content_url,
            order=order,
            created_at=datetime.now(pytz.utc),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created lesson %s in course %s", model.id, course_id)
        return model

    def get_lesson(self, lesson_id: int) -> LessonModel:
        model = self.db.get(LessonModel, lesson_id)
        if model is None:
            raise EntityNotFoundError("Lesson", lesson_id)
        return model

    def list_lessons(self, course_id: int) -> List[LessonModel]:
        """List a course's lessons in display order."""
        return (
            self.db.query(LessonModel)
            .filter(LessonModel.course_id == course_id)
            .order_by(LessonModel.order.asc(), LessonModel.id.asc())
            .all()
        )

    def count_lessons(self, course_id: int) -> int:
        return (
            self.db.query(LessonModel)
            .filter(LessonModel.course_id == course_id)
            .count()
        )

    def update_lesson(self, lesson_id: int, changes: Dict[str, Any]) -> LessonModel:
        model = self.get_lesson(lesson_id)
        for field in _LESSON_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(model, field, changes[field])
        self.db.commit()
        self.db.refresh(model)
        return model

    def delete_lesson(self, lesson_id: int) -> None:
        model = self.get_lesson(lesson_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted lesson %s", lesson_id)
