"""
Configuration management for the mixcord REST client.
"""

from typing import Any, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from mixcord import __version__


DEFAULT_API_BASE_URL = "https://discordapp.com/api"
DEFAULT_USER_AGENT = f"DiscordBot (https://github.com/mixcord/mixcord, {__version__})"


class MixcordConfig(BaseSettings):
    """Client configuration, read from MIXCORD_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="MIXCORD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Credentials
    token: Optional[SecretStr] = Field(default=None, description="Bot token")

    # Transport
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    request_timeout: float = Field(default=10.0, gt=0)

    # Rate limiting
    ratelimit_max_wait: Optional[float] = Field(
        default=None,
        ge=0,
        description=(
            "Upper bound in seconds for a single rate-limit wait. When set, a call "
            "may be sent before its bucket resets; leave unset to always wait for the reset"
        )
    )

    # Observability
    log_level: str = Field(default="info")
    enable_metrics: bool = Field(default=True)

    def get_token(self) -> Optional[str]:
        """Return the bot token, or None if it is not configured."""
        if self.token is None:
            return None
        return self.token.get_secret_value()


def get_config(**overrides: Any) -> MixcordConfig:
    """Build a configuration, letting keyword overrides win over the environment."""
    return MixcordConfig(**overrides)
