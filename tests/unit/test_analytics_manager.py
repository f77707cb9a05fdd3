"""Unit tests for dashboard analytics."""

from datetime import datetime

import pytest
import pytz

from learnhub.models.enrollment import EnrollmentModel
from learnhub.utils.analytics_manager import (
    AnalyticsManager,
    completion_rate,
    month_key,
    recent_months,
)
from learnhub.utils.course_manager import CourseManager
from learnhub.utils.user_manager import UserManager

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=pytz.utc)


def at(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 9, 0, tzinfo=pytz.utc)


class TestHelpers:
    """Tests for the pure helpers."""

    def test_completion_rate_is_zero_without_enrollments(self) -> None:
        assert completion_rate(0, 0) == 0

    @pytest.mark.parametrize(
        "completed, total, expected",
        [(1, 4, 25.0), (3, 3, 100.0), (0, 5, 0.0), (2, 3, 200 / 3)],
    )
    def test_completion_rate_is_percentage(self, completed, total, expected) -> None:
        assert completion_rate(completed, total) == pytest.approx(expected)

    def test_recent_months_crosses_year_boundary(self) -> None:
        assert recent_months(at(2026, 2, 1), 3) == [(2025, 12), (2026, 1), (2026, 2)]

    def test_month_key_has_no_zero_padding(self) -> None:
        assert month_key(2026, 3) == "2026-3"


@pytest.fixture
def populated(db):
    """Two students, one teacher and enrollments spread over three months."""
    users = UserManager(db)
    courses = CourseManager(db)

    def make_user(username: str, role: str, created: datetime):
        user = users.create_user(
            username=username,
            email=f"{username}@example.com",
            password="pw123456",
            first_name=username.title(),
            last_name="Test",
            role=role,
        )
        user.created_at = created
        db.commit()
        return user

    teacher = make_user("teach", "teacher", at(2025, 6, 1))
    first = make_user("first", "student", at(2025, 12, 10))
    second = make_user("second", "student", at(2026, 2, 5))

    published = courses.create_course(
        title="Python", description="D", category="Programming",
        teacher_id=teacher.id, status="published",
    )
    draft = courses.create_course(
        title="Design", description="D", category="Design", teacher_id=teacher.id,
    )
    courses.create_course(
        title="Other", description="D", category="Business", teacher_id=999,
        status="archived",
    )

    rows = [
        (first.id, published.id, at(2026, 1, 10), True),
        (second.id, published.id, at(2026, 2, 10), False),
        (first.id, draft.id, at(2026, 2, 12), True),
        # Enrollments held by non-students are left out of the platform totals
        (teacher.id, published.id, at(2026, 2, 20), False),
    ]
    for student_id, course_id, enrolled_at, completed in rows:
        db.add(EnrollmentModel(
            student_id=student_id,
            course_id=course_id,
            enrolled_at=enrolled_at,
            completed=completed,
            completion_percentage=100 if completed else 0,
            last_accessed=enrolled_at,
        ))
    db.commit()
    return {"teacher": teacher, "published": published, "draft": draft}


class TestOverview:
    """Tests for AnalyticsManager.overview."""

    def test_empty_platform(self, db) -> None:
        overview = AnalyticsManager(db, trend_months=6).overview(now=NOW)

        assert overview["total_students"] == 0
        assert overview["total_enrollments"] == 0
        assert overview["completion_rate"] == 0
        assert list(overview["monthly_data"]) == [
            "2025-10", "2025-11", "2025-12", "2026-1", "2026-2", "2026-3",
        ]
        assert all(m["enrollments"] == 0 for m in overview["monthly_data"].values())

    def test_totals(self, db, populated) -> None:
        overview = AnalyticsManager(db, trend_months=3).overview(now=NOW)

        assert overview["total_students"] == 2
        assert overview["total_teachers"] == 1
        assert overview["total_admins"] == 0
        assert overview["total_courses"] == 3
        assert overview["published_courses"] == 1
        assert overview["courses_by_status"] == {"draft": 1, "published": 1, "archived": 1}
        assert overview["total_enrollments"] == 3
        assert overview["completed_enrollments"] == 2
        assert overview["completion_rate"] == pytest.approx(200 / 3)

    def test_monthly_buckets_follow_timestamps(self, db, populated) -> None:
        monthly = AnalyticsManager(db, trend_months=3).overview(now=NOW)["monthly_data"]

        assert monthly == {
            "2026-1": {"students": 1, "enrollments": 1, "completion_rate": 100.0},
            "2026-2": {"students": 2, "enrollments": 2, "completion_rate": 50.0},
            "2026-3": {"students": 2, "enrollments": 0, "completion_rate": 0.0},
        }

    def test_monthly_buckets_are_stable_between_calls(self, db, populated) -> None:
        manager = AnalyticsManager(db, trend_months=3)

        assert manager.overview(now=NOW)["monthly_data"] == manager.overview(now=NOW)["monthly_data"]


class TestTeacherOverview:
    """Tests for AnalyticsManager.teacher_overview."""

    def test_per_course_counts(self, db, populated) -> None:
        overview = AnalyticsManager(db).teacher_overview(populated["teacher"].id)

        assert overview["total_courses"] == 2
        assert overview["published_courses"] == 1
        assert overview["total_students"] == 4
        assert overview["completion_rate"] == pytest.approx(50.0)
        assert overview["course_data"] == [
            {
                "course_id": populated["published"].id,
                "title": "Python",
                "enrollments": 3,
                "completed": 1,
            },
            {
                "course_id": populated["draft"].id,
                "title": "Design",
                "enrollments": 1,
                "completed": 1,
            },
        ]

    def test_teacher_without_courses(self, db) -> None:
        overview = AnalyticsManager(db).teacher_overview(12345)

        assert overview["total_courses"] == 0
        assert overview["completion_rate"] == 0
        assert overview["course_data"] == []
