"""
Application settings loaded from environment variables.

Uses pydantic-settings so that every config value is validated at startup.
Both external secrets (backend key, Gemini key) are optional: a missing
backend key only fails once a request reaches Supabase, and a missing
Gemini key turns the AI features into a fixed error message.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ─────────────────────────────────────────────────
    APP_NAME: str = "Agency Hub"
    DEBUG: bool = False
    ENVIRONMENT: str = "dev"

    # ── Supabase (backend-as-a-service) ─────────────────────
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    PROJECTS_TABLE: str = "projects"
    RESERVATIONS_TABLE: str = "reservations"

    # ── Gemini LLM ──────────────────────────────────────────
    # Empty key disables briefing/chat without crashing the app.
    GEMINI_API_KEY: str = ""
    LLM_MODEL: str = "gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = 60.0
    CHAT_CONTEXT_LIMIT: int = 20

    # ── Dashboard behaviour ─────────────────────────────────
    DEFAULT_DEADLINE_DAYS: int = 30


# Singleton: imported everywhere as `from agency_hub.core.config import settings`
settings = Settings()
