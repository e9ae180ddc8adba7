"""Runtime settings for tunnel-bot.

Uses Pydantic Settings so the config file location and the API token can
be supplied through environment variables (TUNNEL_BOT_ prefix) instead of
being written into the config file.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tunnel_bot.constants import DEFAULT_CONFIG_FILE, SETTINGS_ENV_PREFIX


class BotSettings(BaseSettings):
    """Environment-level settings.

    Can be overridden via environment variables with TUNNEL_BOT_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix=SETTINGS_ENV_PREFIX)

    config_file: Path = Field(
        default=Path(DEFAULT_CONFIG_FILE),
        description="Path to the YAML/JSON config file",
    )
    api_token: str | None = Field(
        default=None,
        description="Telegram bot token (overrides api_token in the config file)",
    )
