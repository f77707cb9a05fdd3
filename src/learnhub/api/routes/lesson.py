"""Lesson routes.

Lessons inherit ownership and visibility from their parent course.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from learnhub.api.routes.auth import get_optional_user
from learnhub.api.routes.course import get_course_or_404, get_visible_course
from learnhub.core.dependencies import CourseManagerDep
from learnhub.core.exceptions import EntityNotFoundError
from learnhub.core.permissions import enforce_ownership, require
from learnhub.schemas.course import Lesson, LessonCreate, LessonUpdate

router = APIRouter(prefix="/api/lessons", tags=["Lesson"])


def _lesson_owner_id(course_manager, lesson) -> Optional[int]:
    # Lessons can outlive their course; only admins may touch those
    try:
        return course_manager.get_course(lesson.course_id).teacher_id
    except EntityNotFoundError:
        return None


def _get_lesson_or_404(course_manager, lesson_id: int):
    try:
        return course_manager.get_lesson(lesson_id)
    except EntityNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson not found",
        )


@router.post(
    "",
    response_model=Lesson,
    status_code=status.HTTP_201_CREATED,
    summary="Create a lesson",
)
def create_lesson(
    req: LessonCreate,
    course_manager: CourseManagerDep,
    current_user=Depends(require("lesson:create")),
) -> Lesson:
    course = get_course_or_404(course_manager, req.course_id)
    enforce_ownership("lesson:create", current_user, course.teacher_id)
    model = course_manager.create_lesson(
        course_id=req.course_id,
        title=req.title,
        content_type=req.content_type,
        content_url=req.content_url,
        order=req.order,
    )
    return Lesson.model_validate(model)


@router.get("/{lesson_id}", response_model=Lesson, summary="Get a lesson")
def get_lesson(
    lesson_id: int,
    course_manager: CourseManagerDep,
    current_user=Depends(get_optional_user),
) -> Lesson:
    lesson = _get_lesson_or_404(course_manager, lesson_id)
    get_visible_course(course_manager, lesson.course_id, current_user)
    return Lesson.model_validate(lesson)


@router.put("/{lesson_id}", response_model=Lesson, summary="Update a lesson")
def update_lesson(
    lesson_id: int,
    req: LessonUpdate,
    course_manager: CourseManagerDep,
    current_user=Depends(require("lesson:update")),
) -> Lesson:
    lesson = _get_lesson_or_404(course_manager, lesson_id)
    enforce_ownership("lesson:update", current_user, _lesson_owner_id(course_manager, lesson))
    model = course_manager.update_lesson(lesson_id, req.model_dump(exclude_unset=True))
    return Lesson.model_validate(model)


@router.delete(
    "/{lesson_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a lesson",
)
def delete_lesson(
    lesson_id: int,
    course_manager: CourseManagerDep,
    current_user=Depends(require("lesson:delete")),
) -> Response:
    lesson = _get_lesson_or_404(course_manager, lesson_id)
    enforce_ownership("lesson:delete", current_user, _lesson_owner_id(course_manager, lesson))
    course_manager.delete_lesson(lesson_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
