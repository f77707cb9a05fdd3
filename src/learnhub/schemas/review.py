from datetime import datetime
from typing import Optional

from learnhub.schemas.base import ApiModel
from learnhub.schemas.user import ReviewerInfo


class ReviewCreate(ApiModel):
    student_id: int
    course_id: int
    rating: int  # no range check
    comment: Optional[str] = None


class Review(ApiModel):
    id: int
    student_id: int
    course_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ReviewWithUser(Review):
    user: Optional[ReviewerInfo] = None
