from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

    app_name: str = Field(default="DocHelper AI", alias="APP_NAME")
    # Anything other than "production" behaves as development.
    environment: str = Field(default="development", alias="ENVIRONMENT")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3003, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash-lite", alias="GEMINI_MODEL")
    ai_request_timeout_ms: int = Field(default=30000, alias="AI_REQUEST_TIMEOUT_MS")
    ai_max_output_tokens: int = Field(default=32768, alias="AI_MAX_OUTPUT_TOKENS")

    # Client initialization: attempt n waits n * backoff seconds after failing.
    ai_max_init_attempts: int = Field(default=3, alias="AI_MAX_INIT_ATTEMPTS")
    ai_init_backoff_seconds: float = Field(default=1.0, alias="AI_INIT_BACKOFF_SECONDS")
    ai_init_reset_on_request: bool = Field(default=False, alias="AI_INIT_RESET_ON_REQUEST")

    max_text_length: int = Field(default=32000, alias="MAX_TEXT_LENGTH")
    max_body_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_BODY_BYTES")

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5174", "http://127.0.0.1:5174"],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["Content-Type", "Authorization"],
        alias="CORS_ALLOW_HEADERS",
    )

    client_dev_origin: str = Field(default="http://localhost:5174", alias="CLIENT_DEV_ORIGIN")
    client_dist_dir: str = Field(default="dist", alias="CLIENT_DIST_DIR")

    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    docs_url: Optional[str] = Field(default="/docs", alias="DOCS_URL")
    redoc_url: Optional[str] = Field(default="/redoc", alias="REDOC_URL")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()  # type: ignore[call-arg]
