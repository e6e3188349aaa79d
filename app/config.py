"""Agate AI — Central Configuration via Pydantic Settings."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

SQLITE_FALLBACK_URL = "sqlite:///./agate.db"


class Settings(BaseSettings):
    """Read from environment variables, then a local .env file."""

    # ── Database ──
    database_url: str = ""

    # ── AI Provider ──
    ai_provider: Literal["gemini", "openai"] = "gemini"
    ai_api_key: Optional[str] = None  # unset → mock mode
    ai_model: str = "gemini-2.5-flash"
    ai_temperature: float = 0.7
    ai_timeout_seconds: float = 60.0
    openai_max_tokens: int = 2000
    gemini_max_output_tokens: int = 4096
    openai_base_url: str = "https://api.openai.com/v1"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # ── Auth (tokens are issued by the CMS) ──
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_issuer: Optional[str] = None
    jwt_audience: Optional[str] = None

    # ── App ──
    log_level: str = "INFO"
    currency: str = "USD"
    report_brand: str = "Agate CMS"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def effective_database_url(self) -> str:
        return self.database_url or SQLITE_FALLBACK_URL

    @property
    def mock_mode(self) -> bool:
        return not self.ai_api_key


settings = Settings()
