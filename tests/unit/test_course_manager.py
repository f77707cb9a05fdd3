"""Unit tests for CourseManager."""

import pytest

from learnhub.core.exceptions import EntityNotFoundError
from learnhub.utils.course_manager import CourseManager

pytestmark = pytest.mark.unit


@pytest.fixture
def manager(db) -> CourseManager:
    return CourseManager(db)


@pytest.fixture
def course(manager):
    return manager.create_course(
        title="Intro to Python",
        description="Learn the basics.",
        category="Programming",
        teacher_id=10,
    )


class TestCourses:
    """Tests for course operations."""

    def test_create_defaults_to_draft(self, course) -> None:
        assert course.status == "draft"
        assert course.is_free is True
        assert course.price == 0

    def test_invalid_status_rejected(self, manager) -> None:
        with pytest.raises(ValueError):
            manager.create_course(
                title="T", description="D", category="Design", teacher_id=1, status="live"
            )

    def test_get_missing_course(self, manager) -> None:
        with pytest.raises(EntityNotFoundError, match="Course not found"):
            manager.get_course(999)

    def test_list_filters_by_status(self, manager, course) -> None:
        published = manager.create_course(
            title="Design 101",
            description="Shapes.",
            category="Design",
            teacher_id=11,
            status="published",
        )

        assert [c.id for c in manager.list_courses()] == [course.id, published.id]
        assert [c.id for c in manager.list_courses("published")] == [published.id]
        assert [c.id for c in manager.list_courses_by_teacher(10)] == [course.id]

    def test_update_bumps_updated_at_and_allows_any_transition(self, manager, course) -> None:
        before = course.updated_at

        updated = manager.update_course(course.id, {"status": "published", "title": "New"})
        assert updated.title == "New"
        assert updated.updated_at > before

        reverted = manager.update_course(course.id, {"status": "draft"})
        assert reverted.status == "draft"

    def test_delete_is_hard_and_keeps_lessons(self, manager, course) -> None:
        lesson = manager.create_lesson(course.id, "L1", "video", "http://v/1", 1)

        manager.delete_course(course.id)

        with pytest.raises(EntityNotFoundError):
            manager.get_course(course.id)
        assert manager.get_lesson(lesson.id).course_id == course.id

    def test_get_courses_batches_by_id(self, manager, course) -> None:
        assert list(manager.get_courses([course.id, 12345])) == [course.id]
        assert manager.get_courses([]) == {}


class TestLessons:
    """Tests for lesson operations."""

    def test_lesson_requires_existing_course(self, manager) -> None:
        with pytest.raises(EntityNotFoundError):
            manager.create_lesson(999, "L1", "video", "http://v/1", 1)

    def test_lessons_listed_by_order_then_id(self, manager, course) -> None:
        third = manager.create_lesson(course.id, "C", "pdf", "http://p/3", 3)
        first = manager.create_lesson(course.id, "A", "video", "http://v/1", 1)
        first_too = manager.create_lesson(course.id, "A2", "quiz", "http://q/1", 1)

        ids = [l.id for l in manager.list_lessons(course.id)]

        assert ids == [first.id, first_too.id, third.id]
        assert manager.count_lessons(course.id) == 3

    def test_update_and_delete_lesson(self, manager, course) -> None:
        lesson = manager.create_lesson(course.id, "L1", "video", "http://v/1", 1)

        updated = manager.update_lesson(lesson.id, {"title": "Renamed", "order": 5})
        assert updated.title == "Renamed"
        assert updated.order == 5

        manager.delete_lesson(lesson.id)
        with pytest.raises(EntityNotFoundError):
            manager.get_lesson(lesson.id)
