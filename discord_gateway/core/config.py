"""Application configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

STATE_STORE_KINDS = ("cookie", "memory")


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord bot
    discord_bot_token: str = Field(default="", description="Discord bot token")
    default_channel_id: str = Field(
        default="1440630516389904467", description="Fallback channel for /send"
    )

    # Discord OAuth
    client_id: str = Field(default="", description="Discord OAuth Client ID")
    client_secret: str = Field(default="", description="Discord OAuth Client Secret")
    redirect: str = Field(default="", description="Discord OAuth redirect URI")

    # OAuth state binding
    oauth_state_store: str = Field(default="cookie", description="cookie or memory")
    oauth_state_ttl: int = Field(default=600, description="Memory state lifetime in seconds")
    oauth_state_max_pending: int = Field(
        default=10_000, gt=0, description="Memory store capacity; the oldest pending state is evicted when full"
    )

    # Outbound HTTP
    http_timeout: float = Field(default=10.0, description="Discord request timeout in seconds")

    # CORS (comma-separated)
    cors_origins_raw: str = Field(default="", alias="cors_origins")

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @field_validator("oauth_state_store")
    @classmethod
    def validate_state_store(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in STATE_STORE_KINDS:
            raise ValueError(f"oauth_state_store must be one of {STATE_STORE_KINDS}")
        return v_lower

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS allowed origins"""
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def bot_configured(self) -> bool:
        return bool(self.discord_bot_token)

    @property
    def oauth_configured(self) -> bool:
        """Check if every OAuth credential needed for the code exchange is set"""
        return bool(self.client_id and self.client_secret and self.redirect)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
