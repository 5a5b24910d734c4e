import logging
from typing import List, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    SERVICE_NAME: str = "idea-enhancer-service"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    HOST: str = "0.0.0.0"
    PORT: int = 3001
    LOG_LEVEL: str = "INFO"

    # Credentials (required, from environment)
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    REQUEST_TIMEOUT_SECONDS: float = 60.0
    MAX_BODY_BYTES: int = 10 * 1024 * 1024

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT: str = "100 per 15 minutes"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    CORS_ORIGIN_REGEX: str = (
        r"^https?://((localhost|127\.0\.0\.1)(:\d+)?"
        r"|[A-Za-z0-9.-]+\.vercel\.app"
        r"|[A-Za-z0-9.-]+\.onrender\.com)$"
    )

    # When false, upstream error text stays in the server logs
    EXPOSE_PROVIDER_ERRORS: bool = False

    @field_validator("GEMINI_API_KEY")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("GEMINI_API_KEY must not be blank")
        return value

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Load settings once; exit the process when the credential is missing."""
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            if "GEMINI_API_KEY" in missing:
                logger.error("GEMINI_API_KEY environment variable is required")
            else:
                logger.error(f"Invalid configuration: {e}")
            raise SystemExit(1)
    return _settings
