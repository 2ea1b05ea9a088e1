"""
Application configuration loaded from environment variables.
Uses pydantic-settings for typed, validated config.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All environment variables required by the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Supabase ──────────────────────────────────────────────
    supabase_url: str
    supabase_service_role_key: str   # service role key (bypasses RLS)

    # ── JWT ───────────────────────────────────────────────────
    jwt_secret: str
    jwt_algorithm: str = "HS256"

    # ── Client runtime ────────────────────────────────────────
    api_base_url: str = "http://localhost:8000"
    token_storage_key: str = "auth_token"
    token_query_param: str = "token"
    token_storage_path: str = ".mockrise/token_store.json"
    request_timeout_seconds: float = 15.0

    # ── Pending interviewer polling ───────────────────────────
    pending_poll_interval_seconds: int = 30
    pending_initial_delay_seconds: float = 1.0

    # ── App ───────────────────────────────────────────────────
    app_name: str = "mockrise-access"
    debug: bool = False


# Singleton — import this wherever config is needed
settings = Settings()  # type: ignore[call-arg]
