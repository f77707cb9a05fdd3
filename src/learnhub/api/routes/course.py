"""Course catalog routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from learnhub.api.routes.auth import get_optional_user
from learnhub.config import COURSE_STATUS_PUBLISHED, COURSE_STATUSES, ROLE_ADMIN, ROLE_TEACHER
from learnhub.core.dependencies import CourseManagerDep, UserManagerDep
from learnhub.core.exceptions import EntityNotFoundError
from learnhub.core.permissions import (
    can_view_course,
    enforce_ownership,
    is_privileged,
    require,
)
from learnhub.schemas.course import Course, CourseCreate, CourseUpdate, Lesson

router = APIRouter(prefix="/api", tags=["Course"])

COURSE_NOT_FOUND = "Course not found"


def get_course_or_404(course_manager, course_id: int):
    try:
        return course_manager.get_course(course_id)
    except EntityNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=COURSE_NOT_FOUND,
        )


def get_visible_course(course_manager, course_id: int, user):
    course = get_course_or_404(course_manager, course_id)
    if not can_view_course(user, course):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied",
        )
    return course


@router.post(
    "/courses",
    response_model=Course,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course",
)
def create_course(
    req: CourseCreate,
    course_manager: CourseManagerDep,
    user_manager: UserManagerDep,
    current_user=Depends(require("course:create")),
) -> Course:
    """Create a course.

    Teachers always own the courses they create. Admins may create a course
    on behalf of any teacher or admin by passing ``teacherId``.
    """
    teacher_id = req.teacher_id if req.teacher_id is not None else current_user.id
    if teacher_id != current_user.id:
        if current_user.role != ROLE_ADMIN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Teachers can only create their own courses.",
            )
        owner = user_manager.get_user(teacher_id)
        if owner is None or owner.role not in (ROLE_TEACHER, ROLE_ADMIN):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="teacherId must refer to a teacher or admin.",
            )

    model = course_manager.create_course(
        title=req.title,
        description=req.description,
        category=req.category,
        teacher_id=teacher_id,
        price=req.price,
        is_free=req.is_free,
        thumbnail_url=req.thumbnail_url,
        status=req.status,
    )
    return Course.model_validate(model)


@router.get("/courses", response_model=List[Course], summary="List courses")
def list_courses(
    course_manager: CourseManagerDep,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    current_user=Depends(get_optional_user),
) -> List[Course]:
    """List courses.

    Teachers and admins may filter by any status (or none). Everyone else
    only ever sees published courses; their filter is ignored.
    """
    if is_privileged(current_user):
        if status_filter is not None and status_filter not in COURSE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status: {status_filter}",
            )
        models = course_manager.list_courses(status_filter)
    else:
        models = course_manager.list_courses(COURSE_STATUS_PUBLISHED)
    return [Course.model_validate(m) for m in models]


@router.get("/courses/{course_id}", response_model=Course, summary="Get a course")
def get_course(
    course_id: int,
    course_manager: CourseManagerDep,
    current_user=Depends(get_optional_user),
) -> Course:
    course = get_visible_course(course_manager, course_id, current_user)
    return Course.model_validate(course)


@router.get(
    "/teachers/{teacher_id}/courses",
    response_model=List[Course],
    summary="List a teacher's courses",
)
def list_teacher_courses(
    teacher_id: int,
    course_manager: CourseManagerDep,
    current_user=Depends(get_optional_user),
) -> List[Course]:
    models = course_manager.list_courses_by_teacher(teacher_id)
    return [
        Course.model_validate(m)
        for m in models
        if can_view_course(current_user, m)
    ]


@router.put("/courses/{course_id}", response_model=Course, summary="Update a course")
def update_course(
    course_id: int,
    req: CourseUpdate,
    course_manager: CourseManagerDep,
    current_user=Depends(require("course:update")),
) -> Course:
    course = get_course_or_404(course_manager, course_id)
    enforce_ownership("course:update", current_user, course.teacher_id)
    model = course_manager.update_course(course_id, req.model_dump(exclude_unset=True))
    return Course.model_validate(model)


@router.delete(
    "/courses/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a course",
)
def delete_course(
    course_id: int,
    course_manager: CourseManagerDep,
    current_user=Depends(require("course:delete")),
) -> Response:
    course = get_course_or_404(course_manager, course_id)
    enforce_ownership("course:delete", current_user, course.teacher_id)
    course_manager.delete_course(course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/courses/{course_id}/lessons",
    response_model=List[Lesson],
    summary="List a course's lessons",
)
def list_course_lessons(
    course_id: int,
    course_manager: CourseManagerDep,
    current_user=Depends(get_optional_user),
) -> List[Lesson]:
    get_visible_course(course_manager, course_id, current_user)
    return [Lesson.model_validate(m) for m in course_manager.list_lessons(course_id)]
