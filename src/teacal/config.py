"""Configuration management with pydantic-settings."""

from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"


class Settings(BaseSettings):
    """Settings loaded from TEACAL_* environment variables or a .env file."""

    # Hosted store (optional; the local store is used without them)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    remote_timeout: float = 10.0

    data_dir: Path = DATA_DIR
    default_weekly_budget: int = 2000
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="TEACAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("supabase_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("default_weekly_budget")
    @classmethod
    def check_budget_positive(cls, v):
        if v <= 0:
            raise ValueError("default_weekly_budget must be positive")
        return v

    @property
    def remote_configured(self) -> bool:
        """The hosted store is used only when both URL and key are set."""
        return bool(self.supabase_url and self.supabase_anon_key.strip())


def get_settings() -> Settings:
    """Load and validate settings from environment.

    Raises:
        ConfigurationError: If a variable is present but invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
