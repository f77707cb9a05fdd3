"""Instructional content generation.

This module forwards teacher requests to the configured chat model: lesson
summaries, quizzes, study notes, lesson plans and free-form content. Each
request is a single call with no retries; any failure surfaces as
ContentGenerationError.
"""

import logging
from typing import Any, Dict, Optional

from langchain_core.output_parsers import JsonOutputParser, StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import ValidationError

from learnhub.config import get_default_llm
from learnhub.core.exceptions import ContentGenerationError
from learnhub.generators.config import DEFAULT_CONFIG, GeneratorConfig
from learnhub.schemas.ai import Quiz

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = ChatPromptTemplate.from_messages([
    ("user",
     "Please create a concise educational summary of the following text, "
     "highlighting key concepts and important points:\n\n{text}"),
])

QUIZ_PROMPT = ChatPromptTemplate.from_messages([
    ("user",
     """Based on the following educational content, generate {number_of_questions} quiz questions with multiple choice answers (4 options per question). For each question, indicate the correct answer.

<CONTENT>
{text}
</CONTENT>

<FORMAT_INSTRUCTIONS>
Respond with a single JSON object:
{{"questions": [{{"question": "Question text here?", "options": ["Option A", "Option B", "Option C", "Option D"], "correctIndex": 0}}]}}
</FORMAT_INSTRUCTIONS>"""),
])

NOTES_PROMPT = ChatPromptTemplate.from_messages([
    ("user",
     "Create comprehensive study notes from the following educational content. "
     "Include bullet points, section headings, and highlight key concepts. "
     "Format it in markdown for readability:\n\nContent:\n{text}"),
])

LESSON_PLAN_PROMPT = ChatPromptTemplate.from_messages([
    ("user",
     'Create a detailed lesson plan for teaching "{topic}" in a {duration} session. '
     "Include learning objectives, activities, time allocation, materials needed, "
     "and assessment methods. Format the response in markdown."),
])

CUSTOM_PROMPT = ChatPromptTemplate.from_messages([
    ("user",
     "Generate educational content based on these instructions: {instructions}"
     "{reference_block}"),
])


class ContentGenerator:
    """Generate instructional content with a chat model.

    The model is created from the provider registry on first use, so the
    API can start without provider credentials.
    """

    def __init__(self, llm: Any = None, config: Optional[GeneratorConfig] = None):
        """Initialize ContentGenerator.

        Args:
            llm: Chat model to use. If None, ``get_default_llm()`` is called
                on first use.
            config: Output limits. If None, uses DEFAULT_CONFIG.
        """
        self._llm = llm
        self.config = config or DEFAULT_CONFIG

    @property
    def llm(self) -> Any:
        if self._llm is None:
            try:
                self._llm = get_default_llm()
            except ValueError as e:
                logger.error("AI provider is not configured: %s", e)
                raise ContentGenerationError("AI provider is not configured") from e
        return self._llm

    def _bound_llm(self, max_tokens: int) -> Any:
        return self.llm.bind(max_tokens=max_tokens)

    def _run_text(self, kind: str, prompt: ChatPromptTemplate, max_tokens: int, **inputs) -> str:
        chain = prompt | self._bound_llm(max_tokens) | StrOutputParser()
        try:
            result = chain.invoke(inputs)
        except Exception as e:
            logger.error("Failed to generate %s: %s", kind, e, exc_info=True)
            raise ContentGenerationError(f"Failed to generate {kind}") from e
        if not result or not result.strip():
            raise ContentGenerationError(f"Failed to generate {kind}")
        return result

    def generate_summary(self, text: str) -> str:
        return self._run_text(
            "summary", SUMMARY_PROMPT, self.config.summary_max_tokens, text=text
        )

    def generate_quiz(self, text: str, number_of_questions: Optional[int] = None) -> Dict[str, Any]:
        """Generate multiple-choice questions.

        Args:
            text: Source material.
            number_of_questions: How many questions to ask for.

        Returns:
            ``{"questions": [{"question", "options", "correctIndex"}, ...]}``

        Raises:
            ContentGenerationError: If the call fails or the model's JSON does
                not have the expected shape.
        """
        count = number_of_questions or self.config.default_question_count
        chain = QUIZ_PROMPT | self._bound_llm(self.config.quiz_max_tokens) | JsonOutputParser()
        try:
            raw = chain.invoke({"text": text, "number_of_questions": count})
        except Exception as e:
            logger.error("Failed to generate quiz questions: %s", e, exc_info=True)
            raise ContentGenerationError("Failed to generate quiz questions") from e

        try:
            quiz = Quiz.model_validate(raw)
        except ValidationError as e:
            logger.error("Quiz output has unexpected shape: %s", e)
            raise ContentGenerationError("Failed to generate quiz questions") from e
        return quiz.model_dump(by_alias=True)

    def generate_study_notes(self, text: str) -> str:
        return self._run_text(
            "study notes", NOTES_PROMPT, self.config.notes_max_tokens, text=text
        )

    def generate_lesson_plan(self, topic: str, duration: Optional[str] = None) -> str:
        return self._run_text(
            "lesson plan",
            LESSON_PLAN_PROMPT,
            self.config.lesson_plan_max_tokens,
            topic=topic,
            duration=duration or self.config.default_lesson_duration,
        )

    def generate_custom_content(self, instructions: str, reference: Optional[str] = None) -> str:
        reference_block = f"\n\nReference material:\n{reference}" if reference else ""
        return self._run_text(
            "custom content",
            CUSTOM_PROMPT,
            self.config.custom_max_tokens,
            instructions=instructions,
            reference_block=reference_block,
        )
