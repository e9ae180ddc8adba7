"""Tests for the exception hierarchy."""

from pathlib import Path

import pytest

from tunnel_bot.exceptions import (
    ConfigurationError,
    NoProcessRunningError,
    ProcessControlError,
    SpawnError,
    StatusConnectionError,
    StatusFetchError,
    StatusPayloadError,
    StatusResponseError,
    TransportError,
    TunnelBotError,
    UnauthorizedError,
    UnrecognizedSelectionError,
    ValidationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("x"),
            ValidationError("x", field="f"),
            UnauthorizedError("x"),
            SpawnError("x"),
            NoProcessRunningError("x"),
            StatusConnectionError("x"),
            StatusResponseError("x"),
            StatusPayloadError("x"),
            UnrecognizedSelectionError("x"),
            TransportError("x"),
        ],
    )
    def test_all_inherit_from_base(self, error: TunnelBotError) -> None:
        assert isinstance(error, TunnelBotError)

    def test_process_errors(self) -> None:
        assert issubclass(SpawnError, ProcessControlError)
        assert issubclass(NoProcessRunningError, ProcessControlError)

    def test_status_errors(self) -> None:
        for cls in (StatusConnectionError, StatusResponseError, StatusPayloadError):
            assert issubclass(cls, StatusFetchError)

    def test_validation_is_configuration_error(self) -> None:
        assert issubclass(ValidationError, ConfigurationError)


class TestMessages:
    def test_plain_message(self) -> None:
        assert str(TunnelBotError("boom")) == "boom"

    def test_details_appended(self) -> None:
        error = ConfigurationError("bad config", config_file=Path("config.yaml"), key="api_token")

        assert str(error) == "bad config (config_file=config.yaml, key=api_token)"

    def test_validation_details(self) -> None:
        error = ValidationError("bad value", field="monitor_interval", value=0, expected="> 0")

        assert error.details == {"field": "monitor_interval", "value": "0", "expected": "> 0"}

    def test_long_value_truncated(self) -> None:
        error = ValidationError("bad value", field="tunnel_params", value="x" * 500)

        assert len(error.details["value"]) == 103

    def test_response_error_keeps_status_code(self) -> None:
        error = StatusResponseError("HTTP 502", url="http://localhost:4040", status_code=502)

        assert error.status_code == 502
        assert str(error) == "HTTP 502"
