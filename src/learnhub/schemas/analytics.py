"""Analytics response schemas."""

from typing import Dict, List

from learnhub.schemas.base import ApiModel


class MonthlyStats(ApiModel):
    students: int
    enrollments: int
    completion_rate: float


class PlatformOverview(ApiModel):
    total_students: int
    total_teachers: int
    total_admins: int
    total_courses: int
    published_courses: int
    courses_by_status: Dict[str, int]
    total_enrollments: int
    completed_enrollments: int
    completion_rate: float
    monthly_data: Dict[str, MonthlyStats]


class CourseEnrollmentStats(ApiModel):
    course_id: int
    title: str
    enrollments: int
    completed: int


class TeacherOverview(ApiModel):
    total_courses: int
    published_courses: int
    total_students: int
    completion_rate: float
    course_data: List[CourseEnrollmentStats]
