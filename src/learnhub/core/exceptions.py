"""Custom exception classes for LearnHub.

Managers raise these exceptions; route handlers translate them into HTTP
responses.
"""

from typing import Any


class LearnHubError(Exception):
    """Base exception for all LearnHub errors."""

    pass


class AuthenticationError(LearnHubError):
    """Raised when the caller is not authenticated or credentials are wrong."""

    pass


class PermissionDeniedError(LearnHubError):
    """Raised when an authenticated caller may not perform an operation."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class EntityNotFoundError(LearnHubError):
    """Raised when a referenced entity cannot be found."""

    def __init__(self, entity: str, entity_id: Any):
        """Initialize the exception.

        Args:
            entity: Human readable entity name, e.g. "Course".
            entity_id: The ID that was not found.
        """
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class UserAlreadyExistsError(LearnHubError):
    """Raised when registering a user whose email or username is taken."""

    pass


class AlreadyEnrolledError(LearnHubError):
    """Raised when a student is already enrolled in a course."""

    def __init__(self, student_id: int, course_id: int):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__("Already enrolled in this course")


class ContentGenerationError(LearnHubError):
    """Raised when the AI content provider fails or returns bad output."""

    pass
