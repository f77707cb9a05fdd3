"""Unit tests for the role and ownership policy table."""

from types import SimpleNamespace

import pytest

from learnhub.core.exceptions import AuthenticationError, PermissionDeniedError
from learnhub.core.permissions import (
    ADMIN_ONLY,
    OWNER,
    POLICIES,
    SELF,
    STAFF,
    authorize,
    can_view_course,
    check_ownership,
    check_role,
    get_policy,
    is_privileged,
)

pytestmark = pytest.mark.unit


def make_user(role: str, user_id: int = 1) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, role=role)


def make_course(status: str, teacher_id: int = 10) -> SimpleNamespace:
    return SimpleNamespace(status=status, teacher_id=teacher_id)


class TestPolicyTable:
    """Tests for the declared policies."""

    def test_unknown_operation_raises(self) -> None:
        with pytest.raises(ValueError):
            get_policy("course:teleport")

    @pytest.mark.parametrize(
        "operation, roles, ownership",
        [
            ("users:list", ADMIN_ONLY, None),
            ("course:create", STAFF, None),
            ("course:update", STAFF, OWNER),
            ("lesson:delete", STAFF, OWNER),
            ("enrollment:update", frozenset({"student", "teacher", "admin"}), SELF),
            ("ai:generate", STAFF, None),
            ("analytics:overview", ADMIN_ONLY, None),
            ("analytics:teacher", STAFF, OWNER),
        ],
    )
    def test_policy_entries(self, operation, roles, ownership) -> None:
        policy = POLICIES[operation]

        assert policy.roles == roles
        assert policy.ownership == ownership


class TestRoleStage:
    """Tests for check_role."""

    def test_anonymous_caller_is_unauthenticated(self) -> None:
        with pytest.raises(AuthenticationError):
            check_role("course:create", None)

    def test_student_cannot_create_course(self) -> None:
        with pytest.raises(PermissionDeniedError):
            check_role("course:create", make_user("student"))

    @pytest.mark.parametrize("role", ["teacher", "admin"])
    def test_staff_can_create_course(self, role: str) -> None:
        check_role("course:create", make_user(role))

    def test_teacher_cannot_see_platform_overview(self) -> None:
        with pytest.raises(PermissionDeniedError):
            check_role("analytics:overview", make_user("teacher"))


class TestOwnershipStage:
    """Tests for check_ownership."""

    def test_owner_rule_allows_owning_teacher(self) -> None:
        check_ownership("course:update", make_user("teacher", 10), 10)

    def test_owner_rule_rejects_other_teacher(self) -> None:
        with pytest.raises(PermissionDeniedError):
            check_ownership("course:update", make_user("teacher", 11), 10)

    def test_owner_rule_allows_admin(self) -> None:
        check_ownership("course:delete", make_user("admin", 99), 10)

    def test_owner_rule_rejects_missing_owner(self) -> None:
        with pytest.raises(PermissionDeniedError):
            check_ownership("lesson:update", make_user("teacher", 10), None)

    def test_self_rule_allows_same_student(self) -> None:
        check_ownership("enrollment:create", make_user("student", 5), 5)

    def test_self_rule_rejects_other_student(self) -> None:
        with pytest.raises(PermissionDeniedError):
            check_ownership("enrollment:create", make_user("student", 5), 6)

    def test_self_rule_allows_teacher_for_any_student(self) -> None:
        check_ownership("progress:update", make_user("teacher", 10), 5)

    def test_authorize_runs_both_stages(self) -> None:
        with pytest.raises(PermissionDeniedError):
            authorize("course:update", make_user("student", 10), 10)
        authorize("course:update", make_user("teacher", 10), 10)


class TestCourseVisibility:
    """Tests for can_view_course and is_privileged."""

    def test_published_course_is_public(self) -> None:
        assert can_view_course(None, make_course("published")) is True

    @pytest.mark.parametrize("status", ["draft", "archived"])
    def test_unpublished_course_hidden_from_anonymous_and_students(self, status: str) -> None:
        course = make_course(status)

        assert can_view_course(None, course) is False
        assert can_view_course(make_user("student", 10), course) is False

    def test_unpublished_course_visible_to_owner_and_admin(self) -> None:
        course = make_course("draft", teacher_id=10)

        assert can_view_course(make_user("teacher", 10), course) is True
        assert can_view_course(make_user("teacher", 11), course) is False
        assert can_view_course(make_user("admin", 1), course) is True

    def test_is_privileged(self) -> None:
        assert is_privileged(None) is False
        assert is_privileged(make_user("student")) is False
        assert is_privileged(make_user("teacher")) is True
        assert is_privileged(make_user("admin")) is True
