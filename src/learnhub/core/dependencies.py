"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Each manager gets a request-scoped database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from learnhub.core.database import get_db
from learnhub.generators.ContentGenerator import ContentGenerator
from learnhub.utils import analytics_manager
from learnhub.utils import course_manager
from learnhub.utils import enrollment_manager
from learnhub.utils import review_manager
from learnhub.utils import user_manager

# Singleton for ContentGenerator (holds the LLM client)
_content_generator_instance: ContentGenerator = None


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_course_manager(db: Session = Depends(get_db)) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session."""
    return course_manager.CourseManager(db)


def get_enrollment_manager(
    db: Session = Depends(get_db),
) -> enrollment_manager.EnrollmentManager:
    """Get EnrollmentManager instance with request-scoped DB session."""
    return enrollment_manager.EnrollmentManager(db)


def get_review_manager(db: Session = Depends(get_db)) -> review_manager.ReviewManager:
    """Get ReviewManager instance with request-scoped DB session."""
    return review_manager.ReviewManager(db)


def get_analytics_manager(
    db: Session = Depends(get_db),
) -> analytics_manager.AnalyticsManager:
    """Get AnalyticsManager instance with request-scoped DB session."""
    return analytics_manager.AnalyticsManager(db)


def get_content_generator() -> ContentGenerator:
    """Get ContentGenerator singleton instance.

    Returns:
        ContentGenerator instance (singleton).
    """
    global _content_generator_instance
    if _content_generator_instance is None:
        _content_generator_instance = ContentGenerator()
    return _content_generator_instance


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
CourseManagerDep = Annotated[
    course_manager.CourseManager, Depends(get_course_manager)
]
EnrollmentManagerDep = Annotated[
    enrollment_manager.EnrollmentManager, Depends(get_enrollment_manager)
]
ReviewManagerDep = Annotated[
    review_manager.ReviewManager, Depends(get_review_manager)
]
AnalyticsManagerDep = Annotated[
    analytics_manager.AnalyticsManager, Depends(get_analytics_manager)
]
ContentGeneratorDep = Annotated[
    ContentGenerator, Depends(get_content_generator)
]
