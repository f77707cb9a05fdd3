from .base import Base
from .user import UserModel
from .user_session import UserSessionModel
from .course import CourseModel
from .lesson import LessonModel
from .enrollment import EnrollmentModel
from .progress import ProgressModel
from .review import ReviewModel

__all__ = [
    "Base",
    "UserModel",
    "UserSessionModel",
    "CourseModel",
    "LessonModel",
    "EnrollmentModel",
    "ProgressModel",
    "ReviewModel",
]
