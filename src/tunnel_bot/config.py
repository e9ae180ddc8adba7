"""Configuration for tunnel-bot.

Configuration is read once at startup from a YAML file (JSON files work
too, YAML being a superset) and is immutable afterwards. The resulting
BotConfig is passed explicitly to every component that needs it.

Configuration sources (in order of precedence):
1. Environment variables (TUNNEL_BOT_API_TOKEN, see settings.py)
2. Config file (config.yaml by default)
3. Built-in defaults (constants.py)
"""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tunnel_bot.constants import (
    CALLBACK_TOKEN_CANCEL,
    CONFIG_ERROR_EMPTY_BINARY,
    CONFIG_ERROR_EMPTY_PROFILE_ARGS,
    CONFIG_ERROR_EMPTY_PROFILE_LABEL,
    CONFIG_ERROR_INVALID_ALLOWED_IDS,
    CONFIG_ERROR_INVALID_NUMBER,
    CONFIG_ERROR_INVALID_PROFILE_ARGS,
    CONFIG_ERROR_INVALID_PROFILES,
    CONFIG_ERROR_MISSING_TOKEN,
    CONFIG_ERROR_MONITOR_INTERVAL,
    CONFIG_ERROR_NEGATIVE_SETTLE_DELAY,
    CONFIG_ERROR_NOT_FOUND,
    CONFIG_ERROR_NOT_MAPPING,
    CONFIG_ERROR_PARSE,
    CONFIG_ERROR_READ,
    CONFIG_ERROR_RESERVED_PROFILE_LABEL,
    CONFIG_KEY_AGENT_BINARY,
    CONFIG_KEY_ALLOWED_IDS,
    CONFIG_KEY_API_TOKEN,
    CONFIG_KEY_LOG_FILE,
    CONFIG_KEY_MONITOR_INTERVAL,
    CONFIG_KEY_PROFILES,
    CONFIG_KEY_SETTLE_DELAY,
    CONFIG_KEY_STATUS_API_URL,
    CONFIG_KEY_VERBOSE,
    DEFAULT_AGENT_BINARY,
    DEFAULT_MONITOR_INTERVAL_SECONDS,
    DEFAULT_SETTLE_DELAY_SECONDS,
    DEFAULT_STATUS_API_URL,
)
from tunnel_bot.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TunnelProfile:
    """A named, pre-configured set of launch arguments for the tunneling agent.

    Attributes:
        label: Display label, also used as the callback token of its button.
        arguments: Ordered launch argument tokens (e.g. ("http", "8080")).
    """

    label: str
    arguments: tuple[str, ...]

    @classmethod
    def parse(cls, label: str, argument_string: str) -> "TunnelProfile":
        """Create a profile from a label and a shell-like argument string.

        Raises:
            ValidationError: If the label is empty or reserved, or the
                arguments are empty or cannot be tokenized.
        """
        if not label:
            raise ValidationError(
                CONFIG_ERROR_EMPTY_PROFILE_LABEL,
                field=CONFIG_KEY_PROFILES,
                expected="non-empty label",
            )
        if label == CALLBACK_TOKEN_CANCEL:
            raise ValidationError(
                CONFIG_ERROR_RESERVED_PROFILE_LABEL.format(label=label),
                field=CONFIG_KEY_PROFILES,
                value=label,
            )
        try:
            arguments = tuple(shlex.split(str(argument_string)))
        except ValueError as e:
            raise ValidationError(
                CONFIG_ERROR_INVALID_PROFILE_ARGS.format(label=label, error=e),
                field=CONFIG_KEY_PROFILES,
                value=argument_string,
            ) from e
        if not arguments:
            raise ValidationError(
                CONFIG_ERROR_EMPTY_PROFILE_ARGS.format(label=label),
                field=CONFIG_KEY_PROFILES,
                value=label,
                expected="e.g. 'http 8080'",
            )
        return cls(label=label, arguments=arguments)


@dataclass(frozen=True)
class BotConfig:
    """Immutable bot configuration.

    Attributes:
        api_token: Telegram Bot API token.
        agent_binary: Path (or PATH name) of the tunneling agent binary.
        allowed_ids: Operator usernames allowed to control the bot.
        profiles: Tunnel profiles in display order.
        settle_delay: Seconds to wait after spawning the agent before
            querying its status.
        monitor_interval: Seconds between update polls.
        verbose: Whether verbose (debug) logging is enabled.
        status_api_url: URL of the agent's local tunnels status API.
        log_file: Optional path of a rotating log file.
    """

    api_token: str
    agent_binary: str = DEFAULT_AGENT_BINARY
    allowed_ids: frozenset[str] = field(default_factory=frozenset)
    profiles: tuple[TunnelProfile, ...] = ()
    settle_delay: float = DEFAULT_SETTLE_DELAY_SECONDS
    monitor_interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS
    verbose: bool = False
    status_api_url: str = DEFAULT_STATUS_API_URL
    log_file: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValidationError: If any configuration value is invalid.
        """
        if not self.api_token:
            raise ValidationError(
                CONFIG_ERROR_MISSING_TOKEN,
                field=CONFIG_KEY_API_TOKEN,
                expected="Telegram bot token",
            )
        if not self.agent_binary:
            raise ValidationError(
                CONFIG_ERROR_EMPTY_BINARY,
                field=CONFIG_KEY_AGENT_BINARY,
                expected="path to the ngrok binary",
            )
        if self.settle_delay < 0:
            raise ValidationError(
                CONFIG_ERROR_NEGATIVE_SETTLE_DELAY,
                field=CONFIG_KEY_SETTLE_DELAY,
                value=self.settle_delay,
                expected=">= 0",
            )
        if self.monitor_interval <= 0:
            raise ValidationError(
                CONFIG_ERROR_MONITOR_INTERVAL,
                field=CONFIG_KEY_MONITOR_INTERVAL,
                value=self.monitor_interval,
                expected="> 0",
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BotConfig":
        """Create config from a dictionary (parsed config file).

        Raises:
            ValidationError: If a value has the wrong type or is out of range.
        """
        return cls(
            api_token=str(data.get(CONFIG_KEY_API_TOKEN) or ""),
            agent_binary=str(data.get(CONFIG_KEY_AGENT_BINARY) or DEFAULT_AGENT_BINARY),
            allowed_ids=_parse_allowed_ids(data.get(CONFIG_KEY_ALLOWED_IDS)),
            profiles=_parse_profiles(data.get(CONFIG_KEY_PROFILES)),
            settle_delay=_parse_number(
                data, CONFIG_KEY_SETTLE_DELAY, DEFAULT_SETTLE_DELAY_SECONDS
            ),
            monitor_interval=_parse_number(
                data, CONFIG_KEY_MONITOR_INTERVAL, DEFAULT_MONITOR_INTERVAL_SECONDS
            ),
            verbose=bool(data.get(CONFIG_KEY_VERBOSE, False)),
            status_api_url=str(data.get(CONFIG_KEY_STATUS_API_URL) or DEFAULT_STATUS_API_URL),
            log_file=Path(data[CONFIG_KEY_LOG_FILE]) if data.get(CONFIG_KEY_LOG_FILE) else None,
        )


def _parse_allowed_ids(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if not isinstance(value, list) or not all(isinstance(v, str | int) for v in value):
        raise ValidationError(
            CONFIG_ERROR_INVALID_ALLOWED_IDS,
            field=CONFIG_KEY_ALLOWED_IDS,
            value=value,
            expected="list of usernames",
        )
    # Usernames are stored without the leading '@'
    return frozenset(str(v).lstrip("@") for v in value if str(v).strip())


def _parse_profiles(value: Any) -> tuple[TunnelProfile, ...]:
    if value is None:
        return ()
    if not isinstance(value, dict):
        raise ValidationError(
            CONFIG_ERROR_INVALID_PROFILES,
            field=CONFIG_KEY_PROFILES,
            value=value,
            expected="mapping of label to argument string",
        )
    # Mapping order from the file is the display order
    return tuple(TunnelProfile.parse(str(label), args) for label, args in value.items())


def _parse_number(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValidationError(CONFIG_ERROR_INVALID_NUMBER.format(key=key), field=key, value=value)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            CONFIG_ERROR_INVALID_NUMBER.format(key=key), field=key, value=value
        ) from e


def load_config(config_file: Path, api_token: str | None = None) -> BotConfig:
    """Load bot configuration from a YAML or JSON file.

    Unlike runtime failures, configuration problems are fatal: the bot
    cannot run without a token and a well-formed profile set.

    Args:
        config_file: Path to the config file.
        api_token: Optional token that overrides the file's api_token.

    Returns:
        The validated, immutable BotConfig.

    Raises:
        ConfigurationError: If the file is missing, unreadable, malformed,
            or contains invalid values.
    """
    if not config_file.is_file():
        raise ConfigurationError(
            CONFIG_ERROR_NOT_FOUND.format(path=config_file), config_file=config_file
        )

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            CONFIG_ERROR_PARSE.format(error=e), config_file=config_file
        ) from e
    except OSError as e:
        raise ConfigurationError(CONFIG_ERROR_READ.format(error=e), config_file=config_file) from e

    if not isinstance(data, dict):
        raise ConfigurationError(CONFIG_ERROR_NOT_MAPPING, config_file=config_file)

    if api_token:
        data = {**data, CONFIG_KEY_API_TOKEN: api_token}

    config = BotConfig.from_dict(data)
    logger.debug(
        f"Loaded config from {config_file}: {len(config.profiles)} profile(s), "
        f"{len(config.allowed_ids)} allowed id(s)"
    )
    return config
