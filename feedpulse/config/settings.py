"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables** - e.g. UPSTASH_REDIS_REST_URL=https://...
#   2. **.env file** - key=value lines in the project root .env file
#
# Field ``upstash_redis_rest_url`` maps to env var ``UPSTASH_REDIS_REST_URL``.
# Defaults apply when neither source sets a field.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """feedpulse application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Storage backend ===
    # "memory" = process-local list only; "sqlite" / "redis" = that backend
    # in front of a memory tier that takes over when it is unreachable.
    feedback_backend: str = "memory"
    feedback_db_path: str = "data/feedback.db"
    upstash_redis_rest_url: str = ""
    upstash_redis_rest_token: str = ""
    redis_feedback_key: str = "feedback:all"
    store_timeout_seconds: float = 5.0

    # === Seeding ===
    seed_sample_feedback: bool = False
    seed_csv_path: str = "feedback.csv"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"
    config_path: str = "config/config.yaml"

    def redis_configured(self) -> bool:
        """Return True when both Upstash REST credentials are present."""
        return bool(self.upstash_redis_rest_url and self.upstash_redis_rest_token)
