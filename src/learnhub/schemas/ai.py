"""Request and response schemas for AI content generation."""

from typing import List, Optional

from pydantic import Field

from learnhub.schemas.base import ApiModel


class TextContentRequest(ApiModel):
    text: str = Field(min_length=1, description="Source material to work from.")


class QuizRequest(TextContentRequest):
    number_of_questions: int = Field(default=5, ge=1, le=50)


class LessonPlanRequest(ApiModel):
    topic: str = Field(min_length=1)
    duration: str = "60 minutes"


class CustomContentRequest(ApiModel):
    instructions: str = Field(min_length=1)
    reference: Optional[str] = None


class QuizQuestion(ApiModel):
    question: str = Field(description="Question text.")
    options: List[str] = Field(description="Answer options, usually four.")
    correct_index: int = Field(description="Index of the correct option.")


class Quiz(ApiModel):
    questions: List[QuizQuestion]


class SummaryResponse(ApiModel):
    summary: str


class NotesResponse(ApiModel):
    notes: str


class LessonPlanResponse(ApiModel):
    lesson_plan: str


class CustomContentResponse(ApiModel):
    content: str
