"""Configuration module for LearnHub.

This module provides centralized configuration management, including directory
paths, API server settings, session settings, LLM configuration, and domain
constants. All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.parent.resolve()

DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/learnhub.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Session Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "learnhub-secret-key-dev")
JWT_ALGORITHM: str = "HS256"
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "learnhub_session")
SESSION_EXPIRE_MINUTES: int = int(os.getenv("SESSION_EXPIRE_MINUTES", str(60 * 24)))
SESSION_COOKIE_SECURE: bool = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Domain Constants ---

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_ADMIN = "admin"
USER_ROLES: List[str] = [ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN]

COURSE_STATUS_DRAFT = "draft"
COURSE_STATUS_PUBLISHED = "published"
COURSE_STATUS_ARCHIVED = "archived"
COURSE_STATUSES: List[str] = [
    COURSE_STATUS_DRAFT,
    COURSE_STATUS_PUBLISHED,
    COURSE_STATUS_ARCHIVED,
]

COURSE_CATEGORIES: List[str] = [
    "Programming",
    "Design",
    "Data Science",
    "Business",
    "Marketing",
    "AI & Machine Learning",
    "Cryptocurrency",
]

LESSON_CONTENT_TYPES: List[str] = [
    "video",
    "pdf",
    "presentation",
    "quiz",
    "assignment",
    "ai_generated",
]

DEFAULT_AVATAR_URL_TEMPLATE: str = (
    "https://ui-avatars.com/api/?name={first_name}+{last_name}"
    "&background=3B82F6&color=fff"
)

# --- Bootstrap Configuration ---

BOOTSTRAP_DEFAULT_USERS: bool = (
    os.getenv("BOOTSTRAP_DEFAULT_USERS", "true").lower() == "true"
)

# Baseline accounts created on first run, one per role
DEFAULT_USERS: List[Dict[str, Optional[str]]] = [
    {
        "username": "admin",
        "email": "admin@learnhub.com",
        "password": os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123"),
        "first_name": "Admin",
        "last_name": "User",
        "role": ROLE_ADMIN,
        "bio": "Platform administrator",
    },
    {
        "username": "teacher",
        "email": "teacher@learnhub.com",
        "password": os.getenv("DEFAULT_TEACHER_PASSWORD", "teacher123"),
        "first_name": "Default",
        "last_name": "Teacher",
        "role": ROLE_TEACHER,
        "bio": "Course author",
    },
    {
        "username": "student",
        "email": "student@learnhub.com",
        "password": os.getenv("DEFAULT_STUDENT_PASSWORD", "student123"),
        "first_name": "Default",
        "last_name": "Student",
        "role": ROLE_STUDENT,
        "bio": None,
    },
]

# --- Progress Configuration ---

# When enabled, recording lesson progress recomputes the enrollment's
# completion percentage from the student's completed lessons.
DERIVE_COMPLETION_FROM_PROGRESS: bool = (
    os.getenv("DERIVE_COMPLETION_FROM_PROGRESS", "false").lower() == "true"
)

# --- Analytics Configuration ---

TRENDS_MONTHS: int = int(os.getenv("TRENDS_MONTHS", "6"))

# --- LLM Configuration ---

TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))

# Default provider for AI content generation
DEFAULT_LLM_PROVIDER: str = os.getenv("DEFAULT_LLM_PROVIDER", "openai")

# Provider registry for OpenAI-compatible endpoints
LLM_PROVIDERS: Dict[str, Dict[str, Optional[str]]] = {
    "openai": {
        "display_name": "OpenAI",
        "base_url": None,
        "default_model": "gpt-4o",
        "env_key": "OPENAI_API_KEY",
    },
    "deepseek": {
        "display_name": "DeepSeek",
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
        "env_key": "DEEPSEEK_API_KEY",
    },
    "gemini": {
        "display_name": "Google Gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "default_model": "gemini-2.5-flash",
        "env_key": "GOOGLE_API_KEY",
    },
}


def get_default_llm() -> Any:
    """Get the default LLM instance.

    Returns:
        An LLM instance configured based on DEFAULT_LLM_PROVIDER.

    Raises:
        ValueError: If the provider is unknown or its API key is not set.

    Note:
        This function uses lazy import so that the API can start without
        langchain being initialized.
    """
    from langchain_openai import ChatOpenAI

    provider = DEFAULT_LLM_PROVIDER
    if provider not in LLM_PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}")

    provider_config = LLM_PROVIDERS[provider]
    api_key = os.getenv(provider_config["env_key"])

    if not api_key:
        raise ValueError(
            f"{provider_config['env_key']} must be set to use {provider_config['display_name']}"
        )

    kwargs = {
        "model": provider_config["default_model"],
        "api_key": api_key,
        "temperature": TEMPERATURE,
        # One call per request; failures go straight back to the caller
        "max_retries": 0,
    }
    if provider_config["base_url"]:
        kwargs["base_url"] = provider_config["base_url"]

    return ChatOpenAI(**kwargs)
