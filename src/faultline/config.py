from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Pydantic Settings reads env vars prefixed with ``FAULTLINE_`` (case-insensitive).
    In development, it also reads from .env file if present.
    In production, set environment variables directly (Docker, k8s, etc.).
    """

    # Minimum level for the root logger (DEBUG, INFO, WARNING, ERROR)
    log_level: str = "INFO"

    # JSON lines for production; False switches to structlog's console renderer
    log_json: bool = True

    # Header carrying the request id in and out (see middleware.RequestIDMiddleware)
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_prefix="FAULTLINE_",
        env_file=".env",  # Load from .env in development
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


settings = Settings()
