"""Generator configuration module.

This module defines per-kind output limits for ContentGenerator.
"""

from dataclasses import dataclass


@dataclass
class GeneratorConfig:
    """Output limits for AI content generation."""

    summary_max_tokens: int = 500
    notes_max_tokens: int = 1000
    lesson_plan_max_tokens: int = 1000
    custom_max_tokens: int = 1500
    quiz_max_tokens: int = 2000

    default_question_count: int = 5
    default_lesson_duration: str = "60 minutes"


DEFAULT_CONFIG = GeneratorConfig()
