"""Role and ownership policies.

Every protected operation is listed in ``POLICIES`` with the roles that may
attempt it and, optionally, an ownership rule checked against the record
being touched:

- ``"owner"``: admins, or the user whose id matches the resource owner
  (a course's ``teacher_id``).
- ``"self"``: admins and teachers, or the student the record belongs to.

The checks are pure functions of the caller and the resource. Route handlers
run the role stage through the ``require`` dependency before any other work
and the ownership stage once the owning id is known.
"""

from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Optional

from fastapi import Depends, HTTPException, status

from learnhub.config import (
    COURSE_STATUS_PUBLISHED,
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_TEACHER,
    USER_ROLES,
)
from learnhub.core.exceptions import AuthenticationError, PermissionDeniedError

OWNER = "owner"
SELF = "self"

ANY_ROLE: FrozenSet[str] = frozenset(USER_ROLES)
STAFF: FrozenSet[str] = frozenset({ROLE_TEACHER, ROLE_ADMIN})
ADMIN_ONLY: FrozenSet[str] = frozenset({ROLE_ADMIN})


@dataclass(frozen=True)
class Policy:
    """Capability required for one operation."""

    roles: FrozenSet[str] = ANY_ROLE
    ownership: Optional[str] = None


POLICIES = {
    "users:list": Policy(ADMIN_ONLY),
    "users:list_by_role": Policy(STAFF),
    "course:create": Policy(STAFF),
    "course:update": Policy(STAFF, OWNER),
    "course:delete": Policy(STAFF, OWNER),
    "lesson:create": Policy(STAFF, OWNER),
    "lesson:update": Policy(STAFF, OWNER),
    "lesson:delete": Policy(STAFF, OWNER),
    "enrollment:create": Policy(ANY_ROLE, SELF),
    "enrollment:read": Policy(ANY_ROLE, SELF),
    "enrollment:update": Policy(ANY_ROLE, SELF),
    "progress:create": Policy(ANY_ROLE, SELF),
    "progress:read": Policy(ANY_ROLE, SELF),
    "progress:update": Policy(ANY_ROLE, SELF),
    "review:create": Policy(ANY_ROLE, SELF),
    "ai:generate": Policy(STAFF),
    "analytics:overview": Policy(ADMIN_ONLY),
    "analytics:teacher": Policy(STAFF, OWNER),
}


def get_policy(operation: str) -> Policy:
    try:
        return POLICIES[operation]
    except KeyError:
        raise ValueError(f"No policy defined for operation: {operation}") from None


def check_role(operation: str, user: Optional[Any]) -> None:
    """Run the role stage of an operation's policy.

    Args:
        operation: Key into ``POLICIES``.
        user: The authenticated caller, or None for anonymous requests.

    Raises:
        AuthenticationError: If there is no caller.
        PermissionDeniedError: If the caller's role is not permitted.
    """
    policy = get_policy(operation)
    if user is None:
        raise AuthenticationError("Authentication required")
    if user.role not in policy.roles:
        raise PermissionDeniedError()


def check_ownership(operation: str, user: Any, owner_id: Optional[int]) -> None:
    """Run the ownership stage of an operation's policy.

    Args:
        operation: Key into ``POLICIES``.
        user: The authenticated caller.
        owner_id: Owning teacher id for ``"owner"`` rules, or the student id
            named by the record for ``"self"`` rules.

    Raises:
        PermissionDeniedError: If the caller may not act on this record.
    """
    policy = get_policy(operation)
    if policy.ownership is None or user.role == ROLE_ADMIN:
        return
    if policy.ownership == SELF and user.role == ROLE_TEACHER:
        return
    if owner_id is None or user.id != owner_id:
        raise PermissionDeniedError()


def authorize(operation: str, user: Optional[Any], owner_id: Optional[int] = None) -> None:
    """Run both stages of an operation's policy."""
    check_role(operation, user)
    check_ownership(operation, user, owner_id)


def is_privileged(user: Optional[Any]) -> bool:
    """Whether the caller may see unpublished catalog listings."""
    return user is not None and user.role in STAFF


def can_view_course(user: Optional[Any], course: Any) -> bool:
    """Published courses are public; others only to their teacher or an admin."""
    if course.status == COURSE_STATUS_PUBLISHED:
        return True
    if user is None:
        return False
    if user.role == ROLE_ADMIN:
        return True
    return user.role == ROLE_TEACHER and user.id == course.teacher_id


def is_student(user: Optional[Any]) -> bool:
    return user is not None and user.role == ROLE_STUDENT


def to_http_exception(exc: Exception) -> HTTPException:
    """Translate a guard failure into an HTTP error."""
    if isinstance(exc, AuthenticationError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        )
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=str(exc) or "Permission denied",
    )


def require(operation: str) -> Callable[..., Any]:
    """Build a dependency that enforces the role stage of ``operation``.

    The dependency returns the authenticated user so handlers can use it for
    the ownership stage.
    """
    # Imported here so the auth routes can import this module freely
    from learnhub.api.routes.auth import get_optional_user

    get_policy(operation)

    def dependency(user=Depends(get_optional_user)):
        try:
            check_role(operation, user)
        except (AuthenticationError, PermissionDeniedError) as exc:
            raise to_http_exception(exc)
        return user

    return dependency


def enforce_ownership(operation: str, user: Any, owner_id: Optional[int]) -> None:
    """Ownership stage for route handlers, raising ``HTTPException``."""
    try:
        check_ownership(operation, user, owner_id)
    except PermissionDeniedError as exc:
        raise to_http_exception(exc)
