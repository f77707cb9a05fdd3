"""API tests for AI content generation endpoints."""

import json

import pytest

pytestmark = pytest.mark.api


class TestAccess:
    """Tests for who may call the AI endpoints."""

    def test_anonymous_rejected(self, client) -> None:
        response = client.post("/api/ai/generate-summary", json={"text": "Hello"})

        assert response.status_code == 401

    def test_student_rejected(self, client, account, fake_llm_generator) -> None:
        fake_llm_generator("never used")
        student = account("student")

        response = client.post(
            "/api/ai/generate-summary", json={"text": "Hello"}, headers=student["headers"]
        )

        assert response.status_code == 403


class TestGeneration:
    """Tests for each generation endpoint."""

    @pytest.fixture
    def teacher(self, account) -> dict:
        return account("teacher")

    def test_summary(self, client, teacher, fake_llm_generator) -> None:
        fake_llm_generator("Short summary.")

        response = client.post(
            "/api/ai/generate-summary", json={"text": "Long text"}, headers=teacher["headers"]
        )

        assert response.status_code == 200
        assert response.json() == {"summary": "Short summary."}

    def test_quiz(self, client, teacher, fake_llm_generator) -> None:
        questions = [
            {"question": f"Q{i}?", "options": ["a", "b", "c", "d"], "correctIndex": i % 4}
            for i in range(3)
        ]
        fake_llm_generator(json.dumps({"questions": questions}))

        response = client.post(
            "/api/ai/generate-quiz",
            json={"text": "Material", "numberOfQuestions": 3},
            headers=teacher["headers"],
        )

        assert response.status_code == 200
        assert response.json() == {"questions": questions}

    def test_notes(self, client, teacher, fake_llm_generator) -> None:
        fake_llm_generator("# Notes")

        response = client.post(
            "/api/ai/generate-notes", json={"text": "Material"}, headers=teacher["headers"]
        )

        assert response.json() == {"notes": "# Notes"}

    def test_lesson_plan(self, client, teacher, fake_llm_generator) -> None:
        fake_llm_generator("1. Intro")

        response = client.post(
            "/api/ai/generate-lesson-plan", json={"topic": "Loops"}, headers=teacher["headers"]
        )

        assert response.json() == {"lessonPlan": "1. Intro"}

    def test_custom(self, client, teacher, fake_llm_generator) -> None:
        fake_llm_generator("Custom text")

        response = client.post(
            "/api/ai/generate-custom",
            json={"instructions": "Write an exercise", "reference": "Chapter 2"},
            headers=teacher["headers"],
        )

        assert response.json() == {"content": "Custom text"}

    @pytest.mark.parametrize(
        "path, body",
        [
            ("/api/ai/generate-summary", {}),
            ("/api/ai/generate-notes", {"text": ""}),
            ("/api/ai/generate-lesson-plan", {"duration": "30 minutes"}),
            ("/api/ai/generate-custom", {"reference": "x"}),
        ],
    )
    def test_missing_input_is_a_validation_error(self, client, teacher, fake_llm_generator, path, body) -> None:
        fake_llm_generator("unused")

        response = client.post(path, json=body, headers=teacher["headers"])

        assert response.status_code == 400

    def test_bad_model_output_is_a_generic_500(self, client, teacher, fake_llm_generator) -> None:
        fake_llm_generator("this is not json")

        response = client.post(
            "/api/ai/generate-quiz", json={"text": "Material"}, headers=teacher["headers"]
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to generate quiz"}
