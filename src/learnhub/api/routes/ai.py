"""AI content generation routes.

Each endpoint forwards one request to the chat model; failures are reported
as a generic 500 without retrying.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from learnhub.core.dependencies import ContentGeneratorDep
from learnhub.core.exceptions import ContentGenerationError
from learnhub.core.permissions import require
from learnhub.schemas.ai import (
    CustomContentRequest,
    CustomContentResponse,
    LessonPlanRequest,
    LessonPlanResponse,
    NotesResponse,
    Quiz,
    QuizRequest,
    SummaryResponse,
    TextContentRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])


def _upstream_failure(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


@router.post("/generate-summary", response_model=SummaryResponse, summary="Summarize text")
def generate_summary(
    req: TextContentRequest,
    generator: ContentGeneratorDep,
    current_user=Depends(require("ai:generate")),
) -> SummaryResponse:
    try:
        return SummaryResponse(summary=generator.generate_summary(req.text))
    except ContentGenerationError:
        raise _upstream_failure("Failed to generate summary")


@router.post("/generate-quiz", response_model=Quiz, summary="Generate quiz questions")
def generate_quiz(
    req: QuizRequest,
    generator: ContentGeneratorDep,
    current_user=Depends(require("ai:generate")),
) -> Quiz:
    try:
        return Quiz.model_validate(
            generator.generate_quiz(req.text, req.number_of_questions)
        )
    except ContentGenerationError:
        raise _upstream_failure("Failed to generate quiz")


@router.post("/generate-notes", response_model=NotesResponse, summary="Generate study notes")
def generate_notes(
    req: TextContentRequest,
    generator: ContentGeneratorDep,
    current_user=Depends(require("ai:generate")),
) -> NotesResponse:
    try:
        return NotesResponse(notes=generator.generate_study_notes(req.text))
    except ContentGenerationError:
        raise _upstream_failure("Failed to generate study notes")


@router.post(
    "/generate-lesson-plan",
    response_model=LessonPlanResponse,
    summary="Generate a lesson plan",
)
def generate_lesson_plan(
    req: LessonPlanRequest,
    generator: ContentGeneratorDep,
    current_user=Depends(require("ai:generate")),
) -> LessonPlanResponse:
    try:
        return LessonPlanResponse(
            lesson_plan=generator.generate_lesson_plan(req.topic, req.duration)
        )
    except ContentGenerationError:
        raise _upstream_failure("Failed to generate lesson plan")


@router.post(
    "/generate-custom",
    response_model=CustomContentResponse,
    summary="Generate content from instructions",
)
def generate_custom(
    req: CustomContentRequest,
    generator: ContentGeneratorDep,
    current_user=Depends(require("ai:generate")),
) -> CustomContentResponse:
    try:
        return CustomContentResponse(
            content=generator.generate_custom_content(req.instructions, req.reference)
        )
    except ContentGenerationError:
        raise _upstream_failure("Failed to generate custom content")
