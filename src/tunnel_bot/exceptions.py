"""Custom exceptions for tunnel-bot.

All exceptions inherit from TunnelBotError, allowing callers to catch every
bot-related error with a single except clause if desired.

Exception hierarchy:
    TunnelBotError (base)
    ├── ConfigurationError
    │   └── ValidationError
    ├── UnauthorizedError
    ├── ProcessControlError
    │   ├── SpawnError
    │   └── NoProcessRunningError
    ├── StatusFetchError
    │   ├── StatusConnectionError
    │   ├── StatusResponseError
    │   └── StatusPayloadError
    ├── UnrecognizedSelectionError
    └── TransportError
"""

from pathlib import Path
from typing import Any


class TunnelBotError(Exception):
    """Base exception for all tunnel-bot errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TunnelBotError):
    """Raised when configuration is invalid or cannot be loaded.

    Configuration errors are fatal at startup.

    Examples:
        - Missing config file
        - Invalid YAML/JSON syntax
        - Missing API token
    """

    def __init__(
        self,
        message: str,
        config_file: Path | None = None,
        key: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Error description.
            config_file: Path to the problematic config file.
            key: The configuration key that caused the error.
        """
        details = {}
        if config_file:
            details["config_file"] = str(config_file)
        if key:
            details["key"] = key
        super().__init__(message, details)
        self.config_file = config_file
        self.key = key


class ValidationError(ConfigurationError):
    """Raised when configuration values fail validation.

    Examples:
        - Negative launch delay
        - Non-positive monitor interval
        - Profile without launch arguments
    """

    def __init__(
        self,
        message: str,
        field: str,
        value: Any = None,
        expected: str | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Error description.
            field: The field that failed validation.
            value: The invalid value (truncated if too long).
            expected: Description of expected value format.
        """
        super().__init__(message)
        self.details["field"] = field
        if value is not None:
            value_str = str(value)
            self.details["value"] = value_str[:100] + "..." if len(value_str) > 100 else value_str
        if expected:
            self.details["expected"] = expected
        self.field = field
        self.value = value
        self.expected = expected


# =============================================================================
# Authorization Errors
# =============================================================================


class UnauthorizedError(TunnelBotError):
    """Raised when an inbound event comes from an identity outside the allow-list.

    Never surfaced to the sender; the event is dropped and logged.
    """

    def __init__(self, message: str, operator_id: str | None = None):
        super().__init__(message)
        self.operator_id = operator_id


# =============================================================================
# Process Control Errors
# =============================================================================


class ProcessControlError(TunnelBotError):
    """Base class for tunneling agent lifecycle errors."""


class SpawnError(ProcessControlError):
    """Raised when the tunneling agent process cannot be started."""

    def __init__(self, message: str, command: list[str] | None = None):
        super().__init__(message)
        self.command = command


class NoProcessRunningError(ProcessControlError):
    """Raised when a shutdown is requested while no agent is running."""


# =============================================================================
# Status Fetch Errors
# =============================================================================


class StatusFetchError(TunnelBotError):
    """Raised when the agent's local status API cannot be queried.

    Subclasses distinguish the cause; callers usually treat all of them
    as "status unknown".
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class StatusConnectionError(StatusFetchError):
    """Raised when the status API is unreachable (connection refused, timeout)."""


class StatusResponseError(StatusFetchError):
    """Raised when the status API answers with a non-2xx status code."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message, url=url)
        self.status_code = status_code


class StatusPayloadError(StatusFetchError):
    """Raised when the status API response is not the expected JSON document."""


# =============================================================================
# Routing and Transport Errors
# =============================================================================


class UnrecognizedSelectionError(TunnelBotError):
    """Raised when a callback token is not among the currently offered options."""

    def __init__(self, message: str, token: str | None = None):
        super().__init__(message)
        self.token = token


class TransportError(TunnelBotError):
    """Raised when a chat transport (Telegram Bot API) call fails."""

    def __init__(self, message: str, method: str | None = None):
        super().__init__(message)
        self.method = method
