"""
app/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; Docker Compose injects these at runtime.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "Multipart Upload API"
    app_version: str = "1.0.0"
    debug: bool = False

    # ── Multipart decoding ─────────────────────────────────────────────────────
    max_upload_bytes: int = 50 * 1024 * 1024   # whole request body, not per part
    multipart_strict: bool = False              # raise on nameless parts instead of dropping them

    # ── Object storage ─────────────────────────────────────────────────────────
    storage_root: str = "./data/uploads"
    url_expiry_hours: int = 24

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Single shared instance — import this everywhere.
settings = Settings()
