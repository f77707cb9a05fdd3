"""Enrollment and lesson progress routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from learnhub.api.routes.course import get_visible_course
from learnhub.core.dependencies import CourseManagerDep, EnrollmentManagerDep
from learnhub.core.exceptions import AlreadyEnrolledError, EntityNotFoundError
from learnhub.core.permissions import enforce_ownership, require
from learnhub.schemas.course import Course
from learnhub.schemas.enrollment import (
    Enrollment,
    EnrollmentCreate,
    EnrollmentUpdate,
    EnrollmentWithCourse,
    Progress,
    ProgressCreate,
    ProgressUpdate,
)

router = APIRouter(prefix="/api", tags=["Enrollment"])


def _not_found(exc: EntityNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post(
    "/enrollments",
    response_model=Enrollment,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll a student in a course",
)
def create_enrollment(
    req: EnrollmentCreate,
    enrollment_manager: EnrollmentManagerDep,
    course_manager: CourseManagerDep,
    current_user=Depends(require("enrollment:create")),
) -> Enrollment:
    """Enroll a student.

    Students may only enroll themselves; teachers and admins may enroll
    anyone, but only in courses the caller can see. A second enrollment for
    the same student and course is rejected with 400.
    """
    enforce_ownership("enrollment:create", current_user, req.student_id)
    get_visible_course(course_manager, req.course_id, current_user)
    try:
        model = enrollment_manager.enroll(
            student_id=req.student_id,
            course_id=req.course_id,
            completed=req.completed,
            completion_percentage=req.completion_percentage,
        )
    except AlreadyEnrolledError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except EntityNotFoundError as e:
        raise _not_found(e)
    return Enrollment.model_validate(model)


@router.get(
    "/students/{student_id}/enrollments",
    response_model=List[EnrollmentWithCourse],
    summary="List a student's enrollments",
)
def list_student_enrollments(
    student_id: int,
    enrollment_manager: EnrollmentManagerDep,
    current_user=Depends(require("enrollment:read")),
) -> List[EnrollmentWithCourse]:
    enforce_ownership("enrollment:read", current_user, student_id)
    results = []
    for enrollment, course in enrollment_manager.list_enrollments_for_student(student_id):
        item = EnrollmentWithCourse.model_validate(enrollment)
        item.course = Course.model_validate(course) if course is not None else None
        results.append(item)
    return results


@router.put(
    "/enrollments/{enrollment_id}",
    response_model=Enrollment,
    summary="Update an enrollment",
)
def update_enrollment(
    enrollment_id: int,
    req: EnrollmentUpdate,
    enrollment_manager: EnrollmentManagerDep,
    current_user=Depends(require("enrollment:update")),
) -> Enrollment:
    """Update completion fields. ``lastAccessed`` is refreshed on every call."""
    try:
        enrollment = enrollment_manager.get_enrollment(enrollment_id)
    except EntityNotFoundError as e:
        raise _not_found(e)
    enforce_ownership("enrollment:update", current_user, enrollment.student_id)
    model = enrollment_manager.update_enrollment(
        enrollment_id, req.model_dump(exclude_unset=True)
    )
    return Enrollment.model_validate(model)


@router.post(
    "/progress",
    response_model=Progress,
    status_code=status.HTTP_201_CREATED,
    summary="Record lesson progress",
)
def create_progress(
    req: ProgressCreate,
    enrollment_manager: EnrollmentManagerDep,
    current_user=Depends(require("progress:create")),
) -> Progress:
    enforce_ownership("progress:create", current_user, req.student_id)
    model = enrollment_manager.record_progress(
        student_id=req.student_id,
        lesson_id=req.lesson_id,
        completed=req.completed,
    )
    return Progress.model_validate(model)


@router.put(
    "/progress/{progress_id}",
    response_model=Progress,
    summary="Update lesson progress",
)
def update_progress(
    progress_id: int,
    req: ProgressUpdate,
    enrollment_manager: EnrollmentManagerDep,
    current_user=Depends(require("progress:update")),
) -> Progress:
    try:
        progress = enrollment_manager.get_progress(progress_id)
    except EntityNotFoundError as e:
        raise _not_found(e)
    enforce_ownership("progress:update", current_user, progress.student_id)
    model = enrollment_manager.update_progress(progress_id, req.completed)
    return Progress.model_validate(model)


@router.get(
    "/students/{student_id}/progress",
    response_model=List[Progress],
    summary="List a student's lesson progress",
)
def list_student_progress(
    student_id: int,
    enrollment_manager: EnrollmentManagerDep,
    current_user=Depends(require("progress:read")),
) -> List[Progress]:
    enforce_ownership("progress:read", current_user, student_id)
    return [
        Progress.model_validate(m)
        for m in enrollment_manager.list_progress_for_student(student_id)
    ]
