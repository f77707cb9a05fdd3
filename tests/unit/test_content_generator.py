"""Unit tests for ContentGenerator using a fake chat model."""

import json

import pytest
from langchain_core.language_models import FakeListChatModel

from learnhub.core.exceptions import ContentGenerationError
from learnhub.generators.ContentGenerator import ContentGenerator

pytestmark = pytest.mark.unit

QUIZ_JSON = json.dumps({
    "questions": [
        {
            "question": "What does len() return?",
            "options": ["Length", "Type", "Id", "Hash"],
            "correctIndex": 0,
        },
    ],
})


def generator_with(*responses: str) -> ContentGenerator:
    return ContentGenerator(llm=FakeListChatModel(responses=list(responses)))


class TestTextGeneration:
    """Tests for the plain-text generators."""

    def test_summary(self) -> None:
        assert generator_with("A short summary.").generate_summary("Long text") == "A short summary."

    def test_study_notes(self) -> None:
        notes = generator_with("# Notes\n- point").generate_study_notes("Content")

        assert notes.startswith("# Notes")

    def test_lesson_plan(self) -> None:
        assert generator_with("Plan").generate_lesson_plan("Recursion") == "Plan"

    def test_custom_content_with_reference(self) -> None:
        assert generator_with("Custom").generate_custom_content("Write a poem", "Ref") == "Custom"

    def test_empty_output_is_an_error(self) -> None:
        with pytest.raises(ContentGenerationError, match="Failed to generate summary"):
            generator_with("   ").generate_summary("Text")


class TestQuizGeneration:
    """Tests for generate_quiz."""

    def test_quiz_parsed_into_camel_case(self) -> None:
        quiz = generator_with(QUIZ_JSON).generate_quiz("Python basics", 1)

        assert quiz == {
            "questions": [
                {
                    "question": "What does len() return?",
                    "options": ["Length", "Type", "Id", "Hash"],
                    "correctIndex": 0,
                },
            ],
        }

    def test_quiz_in_markdown_fence_is_accepted(self) -> None:
        quiz = generator_with(f"```json\n{QUIZ_JSON}\n```").generate_quiz("Python basics")

        assert len(quiz["questions"]) == 1

    def test_non_json_output_is_an_error(self) -> None:
        with pytest.raises(ContentGenerationError):
            generator_with("Sorry, I can't do that.").generate_quiz("Python basics")

    def test_wrong_shape_is_an_error(self) -> None:
        with pytest.raises(ContentGenerationError):
            generator_with('{"questions": [{"question": "Q?"}]}').generate_quiz("Python basics")


class TestProviderConfiguration:
    """Tests for the lazily created default model."""

    def test_missing_api_key_is_a_generation_error(self, monkeypatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "")
        monkeypatch.setattr("learnhub.config.DEFAULT_LLM_PROVIDER", "openai")

        with pytest.raises(ContentGenerationError, match="not configured"):
            ContentGenerator().generate_summary("Text")
