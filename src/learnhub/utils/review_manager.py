"""Course review utilities."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

import pytz
from sqlalchemy.orm import Session

from learnhub.core.exceptions import EntityNotFoundError
from learnhub.models.course import CourseModel
from learnhub.models.review import ReviewModel
from learnhub.models.user import UserModel

logger = logging.getLogger(__name__)


class ReviewManager:
    """Manages course reviews."""

    def __init__(self, db: Session):
        self.db = db

    def create_review(
        self,
        student_id: int,
        course_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> ReviewModel:
        """Store a review. Ratings are not range checked and a student may
        review the same course more than once."""
        if self.db.get(CourseModel, course_id) is None:
            raise EntityNotFoundError("Course", course_id)
        model = ReviewModel(
            student_id=student_id,
            course_id=course_id,
            rating=rating,
            comment=comment,
            created_at=datetime.now(pytz.utc),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Student %s reviewed course %s", student_id, course_id)
        return model

    def list_reviews_for_course(
        self, course_id: int
    ) -> List[Tuple[ReviewModel, Optional[UserModel]]]:
        """List a course's reviews paired with their reviewers.

        Reviewers are loaded in one query; the user is None if the account
        no longer exists.
        """
        reviews = (
            self.db.query(ReviewModel)
            .filter(ReviewModel.course_id == course_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            .all()
        )
        student_ids = {r.student_id for r in reviews}
        users = {}
        if student_ids:
            users = {
                u.id: u
                for u in self.db.query(UserModel).filter(UserModel.id.in_(student_ids))
            }
        return [(r, users.get(r.student_id)) for r in reviews]
