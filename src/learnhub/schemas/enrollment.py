"""Enrollment and lesson progress schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from learnhub.schemas.base import ApiModel
from learnhub.schemas.course import Course


class EnrollmentCreate(ApiModel):
    student_id: int
    course_id: int
    completed: bool = False
    completion_percentage: int = Field(default=0, ge=0, le=100)


class EnrollmentUpdate(ApiModel):
    completed: Optional[bool] = None
    completion_percentage: Optional[int] = Field(default=None, ge=0, le=100)


class Enrollment(ApiModel):
    id: int
    student_id: int
    course_id: int
    enrolled_at: datetime
    completed: bool
    completion_percentage: int
    last_accessed: Optional[datetime] = None


class EnrollmentWithCourse(Enrollment):
    course: Optional[Course] = Field(
        default=None,
        description="The enrolled course, or null if it has been deleted.",
    )


class ProgressCreate(ApiModel):
    student_id: int
    lesson_id: int
    completed: bool = False


class ProgressUpdate(ApiModel):
    completed: bool


class Progress(ApiModel):
    id: int
    student_id: int
    lesson_id: int
    completed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
