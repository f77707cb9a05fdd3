"""Course review routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from learnhub.core.dependencies import ReviewManagerDep
from learnhub.core.exceptions import EntityNotFoundError
from learnhub.core.permissions import enforce_ownership, require
from learnhub.schemas.review import Review, ReviewCreate, ReviewWithUser
from learnhub.schemas.user import ReviewerInfo

router = APIRouter(prefix="/api", tags=["Review"])


@router.post(
    "/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED,
    summary="Review a course",
)
def create_review(
    req: ReviewCreate,
    review_manager: ReviewManagerDep,
    current_user=Depends(require("review:create")),
) -> Review:
    enforce_ownership("review:create", current_user, req.student_id)
    try:
        model = review_manager.create_review(
            student_id=req.student_id,
            course_id=req.course_id,
            rating=req.rating,
            comment=req.comment,
        )
    except EntityNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return Review.model_validate(model)


@router.get(
    "/courses/{course_id}/reviews",
    response_model=List[ReviewWithUser],
    summary="List a course's reviews",
)
def list_course_reviews(
    course_id: int,
    review_manager: ReviewManagerDep,
) -> List[ReviewWithUser]:
    results = []
    for review, user in review_manager.list_reviews_for_course(course_id):
        item = ReviewWithUser.model_validate(review)
        item.user = ReviewerInfo.model_validate(user) if user is not None else None
        results.append(item)
    return results
