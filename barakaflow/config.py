from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./barakaflow.db"
    AUTO_CREATE_TABLES: bool = True

    # Security
    SECRET_KEY: str = "something"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    CORS_ORIGINS: str = "http://localhost:5173"

    # IANA zone used for "which calendar day is this task on"; server local time if unset
    TIMEZONE: str | None = None

    # Assistant
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_TIMEOUT_SECONDS: float = 30.0
    SUGGESTION_CACHE_TTL_SECONDS: int = 60 * 60 * 24 * 7
    CHAT_MAX_TOKENS: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_FILE: str | None = "error.log"

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.TIMEZONE) if self.TIMEZONE else None

settings = Settings()
