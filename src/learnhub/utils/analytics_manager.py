"""Dashboard analytics.

Aggregates are computed on request from the stored rows. Monthly trends are
bucketed from the ``created_at`` and ``enrolled_at`` timestamps.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from learnhub.config import (
    COURSE_STATUS_PUBLISHED,
    COURSE_STATUSES,
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_TEACHER,
    TRENDS_MONTHS,
)
from learnhub.models.course import CourseModel
from learnhub.models.enrollment import EnrollmentModel
from learnhub.models.user import UserModel

logger = logging.getLogger(__name__)


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed enrollments; 0 when there are none."""
    if total <= 0:
        return 0.0
    return completed / total * 100


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def recent_months(now: datetime, count: int) -> List[Tuple[int, int]]:
    """The ``count`` calendar months ending with ``now``'s, oldest first."""
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def month_key(year: int, month: int) -> str:
    return f"{year}-{month}"


class AnalyticsManager:
    """Computes platform and per-teacher statistics."""

    def __init__(self, db: Session, trend_months: int = TRENDS_MONTHS):
        self.db = db
        self.trend_months = trend_months

    def _count_users_by_role(self) -> Dict[str, int]:
        rows = (
            self.db.query(UserModel.role, func.count(UserModel.id))
            .group_by(UserModel.role)
            .all()
        )
        return dict(rows)

    def _count_courses_by_status(self) -> Dict[str, int]:
        rows = (
            self.db.query(CourseModel.status, func.count(CourseModel.id))
            .group_by(CourseModel.status)
            .all()
        )
        counts = {status: 0 for status in COURSE_STATUSES}
        counts.update(dict(rows))
        return counts

    def overview(self, now: Optional[datetime] = None) -> dict:
        """Platform-wide statistics for the admin dashboard.

        Args:
            now: Reference time for the monthly buckets; defaults to now.

        Returns:
            Dictionary matching ``PlatformOverview``.
        """
        now = now or datetime.now(pytz.utc)
        users_by_role = self._count_users_by_role()
        courses_by_status = self._count_courses_by_status()

        # Enrollments held by student accounts, in one query
        enrollment_rows = (
            self.db.query(EnrollmentModel.enrolled_at, EnrollmentModel.completed)
            .join(UserModel, UserModel.id == EnrollmentModel.student_id)
            .filter(UserModel.role == ROLE_STUDENT)
            .all()
        )
        total_enrollments = len(enrollment_rows)
        completed_enrollments = sum(1 for _, completed in enrollment_rows if completed)

        student_created = [
            created_at
            for (created_at,) in self.db.query(UserModel.created_at).filter(
                UserModel.role == ROLE_STUDENT
            )
        ]

        return {
            "total_students": users_by_role.get(ROLE_STUDENT, 0),
            "total_teachers": users_by_role.get(ROLE_TEACHER, 0),
            "total_admins": users_by_role.get(ROLE_ADMIN, 0),
            "total_courses": sum(courses_by_status.values()),
            "published_courses": courses_by_status.get(COURSE_STATUS_PUBLISHED, 0),
            "courses_by_status": courses_by_status,
            "total_enrollments": total_enrollments,
            "completed_enrollments": completed_enrollments,
            "completion_rate": completion_rate(completed_enrollments, total_enrollments),
            "monthly_data": self._monthly_data(now, student_created, enrollment_rows),
        }

    def _monthly_data(
        self,
        now: datetime,
        student_created: List[datetime],
        enrollment_rows: List[Tuple[datetime, bool]],
    ) -> Dict[str, dict]:
        """Bucket signups and enrollments into calendar months.

        ``students`` is the number of student accounts that existed at the end
        of the month; ``enrollments`` and ``completion_rate`` cover
        enrollments made during the month.
        """
        months = recent_months(_as_utc(now), self.trend_months)
        signups = Counter()
        for created_at in student_created:
            created_at = _as_utc(created_at)
            signups[(created_at.year, created_at.month)] += 1

        enrolled = Counter()
        completed = Counter()
        for enrolled_at, is_completed in enrollment_rows:
            enrolled_at = _as_utc(enrolled_at)
            bucket = (enrolled_at.year, enrolled_at.month)
            enrolled[bucket] += 1
            if is_completed:
                completed[bucket] += 1

        first_month = months[0]
        running_students = sum(n for bucket, n in signups.items() if bucket < first_month)
        data = {}
        for bucket in months:
            running_students += signups[bucket]
            data[month_key(*bucket)] = {
                "students": running_students,
                "enrollments": enrolled[bucket],
                "completion_rate": completion_rate(completed[bucket], enrolled[bucket]),
            }
        return data

    def teacher_overview(self, teacher_id: int) -> dict:
        """Statistics for one teacher's courses.

        Returns:
            Dictionary matching ``TeacherOverview``.
        """
        courses = (
            self.db.query(CourseModel)
            .filter(CourseModel.teacher_id == teacher_id)
            .order_by(CourseModel.id)
            .all()
        )
        course_ids = [c.id for c in courses]

        totals = Counter()
        done = Counter()
        if course_ids:
            rows = (
                self.db.query(EnrollmentModel.course_id, EnrollmentModel.completed)
                .filter(EnrollmentModel.course_id.in_(course_ids))
                .all()
            )
            for course_id, is_completed in rows:
                totals[course_id] += 1
                if is_completed:
                    done[course_id] += 1

        course_data = [
            {
                "course_id": c.id,
                "title": c.title,
                "enrollments": totals[c.id],
                "completed": done[c.id],
            }
            for c in courses
        ]
        total_enrollments = sum(totals.values())
        return {
            "total_courses": len(courses),
            "published_courses": sum(
                1 for c in courses if c.status == COURSE_STATUS_PUBLISHED
            ),
            "total_students": total_enrollments,
            "completion_rate": completion_rate(sum(done.values()), total_enrollments),
            "course_data": course_data,
        }
