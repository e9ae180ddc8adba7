"""Thin httpx client for the Telegram Bot API."""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from tunnel_bot.constants import (
    TELEGRAM_ALLOWED_UPDATES,
    TELEGRAM_API_BASE_URL,
    TELEGRAM_API_URL_TEMPLATE,
    TELEGRAM_CHAT_ACTION_TYPING,
    TELEGRAM_ERROR_INVALID_RESPONSE,
    TELEGRAM_ERROR_NO_DESCRIPTION,
    TELEGRAM_ERROR_NOT_OK,
    TELEGRAM_ERROR_REQUEST,
    TELEGRAM_HTTP_TIMEOUT_SECONDS,
    TELEGRAM_METHOD_ANSWER_CALLBACK_QUERY,
    TELEGRAM_METHOD_DELETE_WEBHOOK,
    TELEGRAM_METHOD_EDIT_MESSAGE_TEXT,
    TELEGRAM_METHOD_GET_ME,
    TELEGRAM_METHOD_GET_UPDATES,
    TELEGRAM_METHOD_SEND_CHAT_ACTION,
    TELEGRAM_METHOD_SEND_MESSAGE,
)
from tunnel_bot.exceptions import TransportError
from tunnel_bot.models import Keyboard
from tunnel_bot.telegram.protocol import Update, User, render_keyboard

logger = logging.getLogger(__name__)

_UPDATES_ADAPTER = TypeAdapter(list[Update])


class TelegramClient:
    """Synchronous Telegram Bot API client.

    Every method raises TransportError when the request fails or the API
    answers with ``ok: false``. Thread-safe: httpx.Client may be shared
    between the polling thread and update handler threads.

    Args:
        token: Bot API token.
        base_url: API base URL (overridable for tests or a local Bot API server).
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        token: str,
        base_url: str = TELEGRAM_API_BASE_URL,
        timeout: float = TELEGRAM_HTTP_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TelegramClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _call(self, method: str, payload: dict[str, Any] | None = None) -> Any:
        url = TELEGRAM_API_URL_TEMPLATE.format(
            base_url=self._base_url, token=self._token, method=method
        )
        try:
            response = self._client.post(url, json=payload or {})
            data = response.json()
        except httpx.HTTPError as e:
            raise TransportError(
                TELEGRAM_ERROR_REQUEST.format(method=method, error=e), method=method
            ) from e
        except ValueError as e:
            raise TransportError(
                TELEGRAM_ERROR_INVALID_RESPONSE.format(method=method, error=e), method=method
            ) from e

        if not isinstance(data, dict) or not data.get("ok"):
            description = (
                data.get("description") if isinstance(data, dict) else None
            ) or TELEGRAM_ERROR_NO_DESCRIPTION
            raise TransportError(
                TELEGRAM_ERROR_NOT_OK.format(method=method, description=description),
                method=method,
            )
        return data.get("result")

    def get_me(self) -> User:
        """Return the bot's own account (used to verify the token at startup)."""
        result = self._call(TELEGRAM_METHOD_GET_ME)
        try:
            return User.model_validate(result)
        except PydanticValidationError as e:
            raise TransportError(
                TELEGRAM_ERROR_INVALID_RESPONSE.format(method=TELEGRAM_METHOD_GET_ME, error=e),
                method=TELEGRAM_METHOD_GET_ME,
            ) from e

    def delete_webhook(self) -> None:
        """Remove any webhook; getUpdates does not work while one is set."""
        self._call(TELEGRAM_METHOD_DELETE_WEBHOOK)

    def get_updates(self, offset: int | None = None, timeout: int = 0) -> list[Update]:
        """Fetch pending updates.

        Args:
            offset: Identifier of the first update to return; earlier updates
                are confirmed and dropped by the server.
            timeout: Long-polling timeout in seconds (0 = short polling).
        """
        payload: dict[str, Any] = {
            "timeout": timeout,
            "allowed_updates": list(TELEGRAM_ALLOWED_UPDATES),
        }
        if offset is not None:
            payload["offset"] = offset
        result = self._call(TELEGRAM_METHOD_GET_UPDATES, payload)
        try:
            return _UPDATES_ADAPTER.validate_python(result or [])
        except PydanticValidationError as e:
            raise TransportError(
                TELEGRAM_ERROR_INVALID_RESPONSE.format(
                    method=TELEGRAM_METHOD_GET_UPDATES, error=e
                ),
                method=TELEGRAM_METHOD_GET_UPDATES,
            ) from e

    def send_message(self, chat_id: int, text: str, keyboard: Keyboard | None = None) -> None:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if keyboard is not None:
            payload["reply_markup"] = render_keyboard(keyboard)
        self._call(TELEGRAM_METHOD_SEND_MESSAGE, payload)

    def send_chat_action(self, chat_id: int, action: str = TELEGRAM_CHAT_ACTION_TYPING) -> None:
        self._call(TELEGRAM_METHOD_SEND_CHAT_ACTION, {"chat_id": chat_id, "action": action})

    def answer_callback_query(self, callback_id: str, text: str | None = None) -> None:
        payload: dict[str, Any] = {"callback_query_id": callback_id}
        if text:
            payload["text"] = text
        self._call(TELEGRAM_METHOD_ANSWER_CALLBACK_QUERY, payload)

    def edit_message_text(self, chat_id: int, message_id: int, text: str) -> None:
        """Replace a message's text; its inline keyboard is removed."""
        self._call(
            TELEGRAM_METHOD_EDIT_MESSAGE_TEXT,
            {"chat_id": chat_id, "message_id": message_id, "text": text},
        )
