from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, Literal
from loguru import logger
import sys


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )

    # Generative model (Gemini generateContent)
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API key")
    gemini_model: str = Field(
        default="gemini-3-flash-preview", min_length=1, description="Model identifier"
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative API base URL",
    )
    prospect_count: int = Field(
        default=5, ge=1, le=20, description="Businesses requested per probe"
    )
    summary_sample_size: int = Field(
        default=8, ge=1, le=50, description="Leads sent to the model for the market insight"
    )

    # Remote store (PostgREST). These are the defaults the local settings
    # file is healed with; they are never hardcoded.
    store_url: Optional[str] = Field(default=None, description="Store base URL")
    store_key: Optional[str] = Field(default=None, description="Store publishable API key")
    local_settings_path: str = Field(
        default="~/.nexus/settings.json", description="Durable local key-value settings file"
    )
    http_timeout: Optional[float] = Field(
        default=None, gt=0, description="HTTP timeout in seconds (None = wait indefinitely)"
    )

    fallback_source: str = Field(
        default="Global Prospector",
        min_length=1,
        description="Source label for discovered leads that carry none",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {extra[probe_id]} | {name}:{line} - {message}",
        description="Log format string; extra[probe_id] is '-' outside a probe cycle",
    )
    log_rotation: str = Field(default="100 MB", description="Log file rotation size")
    log_retention: str = Field(default="10 days", description="Log retention period")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    app_name: str = Field(default="Nexus Leads", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: list[str] = Field(default=["*"], description="CORS allowed origins")

    @field_validator("store_key")
    @classmethod
    def reject_secret_key(cls, v: Optional[str]) -> Optional[str]:
        if v and v.startswith("sb_secret_"):
            raise ValueError("store_key must be a publishable key, not a secret key")
        return v

    @field_validator("store_url")
    @classmethod
    def validate_store_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("store_url must start with http:// or https://")
        return v.rstrip("/")

    def configure_logging(self) -> None:
        """Route loguru to stderr, plus a rotating file when LOG_FILE is set"""
        logger.remove()
        logger.configure(extra={"probe_id": "-"})

        level = "DEBUG" if self.debug else self.log_level
        logger.add(sys.stderr, format=self.log_format, level=level, colorize=True)
        if self.log_file:
            logger.add(
                self.log_file,
                format=self.log_format,
                level=level,
                rotation=self.log_rotation,
                retention=self.log_retention,
                compression="zip",
            )

        logger.debug(f"{self.app_name} logging ready ({self.environment})")


def get_settings() -> Settings:
    """Load settings from the environment and set up logging"""
    settings = Settings()
    settings.configure_logging()
    return settings


settings = get_settings()
