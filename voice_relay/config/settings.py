"""
Runtime settings for the relay.

Settings are resolved once, when the application is built, and handed to every
handler through the request context. Nothing below the application factory
reads the process environment.
"""

from pathlib import Path
from typing import Annotated, List, Optional

import dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from voice_relay.config.constants import (
    DEFAULT_AGENT_GREETING,
    DEFAULT_AGENT_INSTRUCTIONS,
    DEFAULT_API_BASE,
    DEFAULT_PROVIDER_TIMEOUT,
    DEFAULT_REALTIME_MODEL,
    DEFAULT_REALTIME_URL,
    SIP_DOMAIN,
)


def load_env_file(path: Path = Path(".") / ".env") -> bool:
    """Load variables from a .env file into the process environment if one exists."""
    if path.exists():
        return dotenv.load_dotenv(path)
    return False


class RelaySettings(BaseSettings):
    """Configuration for the token, webhook and call-control endpoints.

    Values are loaded from environment variables and a local `.env` file;
    keyword arguments take precedence, which is how tests build settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider credentials
    openai_api_key: str = Field("", description="Long-lived provider API key")
    openai_project_id: Optional[str] = Field(
        None, description="Project id, used only to render setup instructions"
    )
    public_base_url: Optional[str] = Field(
        None, description="Public URL the provider delivers webhooks to"
    )

    # Provider endpoints
    api_base: str = Field(
        DEFAULT_API_BASE, validation_alias=AliasChoices("OPENAI_API_BASE", "api_base")
    )
    realtime_url: str = Field(
        DEFAULT_REALTIME_URL,
        validation_alias=AliasChoices("OPENAI_REALTIME_URL", "realtime_url"),
    )
    realtime_model: str = Field(
        DEFAULT_REALTIME_MODEL,
        validation_alias=AliasChoices("OPENAI_REALTIME_MODEL", "realtime_model"),
    )

    # Agent behaviour
    agent_instructions: str = DEFAULT_AGENT_INSTRUCTIONS
    agent_greeting: str = DEFAULT_AGENT_GREETING
    fallback_target_uri: Optional[str] = Field(
        None,
        description="Where to refer a call whose acceptance failed",
        validation_alias=AliasChoices("SIP_FALLBACK_TARGET_URI", "fallback_target_uri"),
    )

    # Server
    provider_timeout: Optional[float] = Field(DEFAULT_PROVIDER_TIMEOUT, gt=0)
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = Field(3001, ge=1, le=65535)
    log_level: str = "INFO"

    @field_validator("openai_project_id", "public_base_url", "fallback_target_uri", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def api_key_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def webhook_url(self) -> Optional[str]:
        """URL to paste into the provider's webhook configuration."""
        if not self.public_base_url:
            return None
        return f"{self.public_base_url.rstrip('/')}/api/sip/webhook"

    @property
    def sip_uri(self) -> Optional[str]:
        """SIP URI a trunk should route calls to."""
        if not self.openai_project_id:
            return None
        return f"sip:{self.openai_project_id}@{SIP_DOMAIN};transport=tls"

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> "RelaySettings":
        """
        Build settings from environment variables.

        Args:
            load_dotenv: Whether to read a local .env file as well

        Returns:
            RelaySettings populated from the environment
        """
        if load_dotenv:
            return cls()
        return cls(_env_file=None)
