"""Configuration management for idres.

Uses pydantic-settings to load configuration from environment variables
(prefixed with IDRES_) and an optional .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Path | None:
    """Search for .env file in the working directory and its parents."""
    check_dir = Path.cwd()
    for _ in range(5):
        if (check_dir / ".env").exists():
            return check_dir / ".env"
        parent = check_dir.parent
        if parent == check_dir:
            break
        check_dir = parent

    return None


_env_file = _find_env_file()


def _split_csv(value: str) -> list[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IDRES_",
        env_file=str(_env_file) if _env_file else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================
    # Environment
    # =========================
    environment: Literal["development", "staging", "production"] = "development"

    # =========================
    # Logging
    # =========================
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    # =========================
    # Matching thresholds
    # =========================
    min_confidence: int = Field(default=50, ge=0, le=100)
    conflict_min_confidence: int = Field(default=85, ge=0, le=100)
    similarity_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    length_window: int = Field(default=3, ge=0)
    similarity_metric: Literal["dice", "indel"] = "dice"
    enable_name_variants: bool = False

    # =========================
    # Vocabulary extensions
    # =========================
    # Comma-separated, e.g. "maria garcia,jose rodriguez"
    extra_common_names: str = ""
    # Comma-separated, e.g. "amherst,lowell"
    extra_campus_tokens: str = ""

    @property
    def extra_common_names_list(self) -> list[str]:
        """Parse extra common names as a list."""
        return _split_csv(self.extra_common_names)

    @property
    def extra_campus_tokens_list(self) -> list[str]:
        """Parse extra campus tokens as a list."""
        return _split_csv(self.extra_campus_tokens)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
