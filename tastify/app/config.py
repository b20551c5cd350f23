from __future__ import annotations

from typing import Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    SCRAPER_TIMEOUT_SECONDS: float = 10.0
    SCRAPER_MAX_REDIRECTS: int = 5
    EXTRACTION_TIMEOUT_SECONDS: float = 55.0
    SHARE_MAX_AGE_SECONDS: int = 300

    def missing_storage_settings(self) -> list[str]:
        missing = []
        if not self.SUPABASE_URL:
            missing.append("SUPABASE_URL")
        if not self.SUPABASE_SERVICE_ROLE_KEY:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


settings = Settings()
