"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

JoinMode = Literal["strict", "settle"]
ResolutionStrategyName = Literal["first_result", "exact_name"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # RootData Open API
    rootdata_api_key: str = ""  # https://www.rootdata.com/Api
    rootdata_base_url: str = "https://api.rootdata.com/open"
    rootdata_language: Literal["en", "cn"] = "en"
    request_timeout: float = 30.0

    # Paging limits enforced before a request leaves the process
    default_page_size: int = 10
    max_page_size: int = 100
    max_funding_page_size: int = 200

    # Analysis engine
    # "strict" fails the whole analysis when any sub-query fails,
    # "settle" keeps successful branches and reports the failed ones
    join_mode: JoinMode = "strict"
    resolution_strategy: ResolutionStrategyName = "first_result"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Path | None = None

    @property
    def has_api_key(self) -> bool:
        """Check if the RootData credential is configured."""
        return bool(self.rootdata_api_key)

    @property
    def api_base_url(self) -> str:
        """Base URL without a trailing slash."""
        return self.rootdata_base_url.rstrip("/")


# Global settings instance
settings = Settings()
