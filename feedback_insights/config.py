"""Configuration management for the feedback insights service."""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # OpenAI Configuration
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    AI_MODEL = os.getenv("AI_MODEL", "gpt-3.5-turbo")
    AI_TIMEOUT_SECONDS = int(os.getenv("AI_TIMEOUT_SECONDS", "5"))
    AI_PROVIDER_ENABLED = os.getenv("AI_PROVIDER_ENABLED", "true").lower() == "true"

    # Database Configuration
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./feedback.db")

    # Cache Configuration
    CACHE_MAX_SIZE = int(os.getenv("CACHE_MAX_SIZE", "1000"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Label vocabularies
    SUPPORTED_SENTIMENTS = ["positive", "negative", "neutral"]
    SUPPORTED_URGENCIES = ["low", "medium", "high"]
    SUPPORTED_THEMES = [
        "bug",
        "feature-request",
        "performance",
        "ux",
        "documentation",
        "pricing",
        "security",
        "integration",
        "mobile",
        "accessibility",
        "api",
        "support"
    ]

    # Fallback labels when classification fails
    DEFAULT_SENTIMENT = "neutral"
    DEFAULT_THEMES = "general"
    DEFAULT_URGENCY = "medium"


config = Config()
