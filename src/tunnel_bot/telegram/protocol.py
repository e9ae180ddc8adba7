"""Pydantic models for the subset of the Telegram Bot API the bot uses.

See https://core.telegram.org/bots/api#update. Unknown fields are ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tunnel_bot.models import (
    CallbackSelection,
    InboundEvent,
    InlineKeyboard,
    Keyboard,
    ReplyKeyboard,
    TextCommand,
)


class _TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class User(_TelegramModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    username: str | None = None


class Chat(_TelegramModel):
    id: int


class Message(_TelegramModel):
    message_id: int
    chat: Chat
    from_user: User | None = Field(default=None, alias="from")
    text: str | None = None


class CallbackQuery(_TelegramModel):
    id: str
    from_user: User = Field(alias="from")
    message: Message | None = None
    data: str | None = None


class Update(_TelegramModel):
    update_id: int
    message: Message | None = None
    callback_query: CallbackQuery | None = None

    def to_event(self) -> InboundEvent | None:
        """Convert to a transport-independent event.

        Returns:
            The event, or None for update kinds the bot does not handle
            (edited messages, channel posts, callbacks without data or
            without an originating message, ...).
        """
        if self.message is not None:
            sender = self.message.from_user
            return TextCommand(
                operator_id=sender.username if sender else None,
                display_name=sender.first_name if sender else "",
                chat_id=self.message.chat.id,
                text=self.message.text or "",
            )
        query = self.callback_query
        if query is not None and query.message is not None and query.data is not None:
            return CallbackSelection(
                operator_id=query.from_user.username,
                display_name=query.from_user.first_name,
                callback_id=query.id,
                chat_id=query.message.chat.id,
                message_id=query.message.message_id,
                token=query.data,
            )
        return None


def render_keyboard(keyboard: Keyboard) -> dict[str, Any]:
    """Render a keyboard descriptor as a Telegram reply_markup object."""
    if isinstance(keyboard, InlineKeyboard):
        return {
            "inline_keyboard": [
                [{"text": button.text, "callback_data": button.callback_token}]
                for button in keyboard.buttons
            ]
        }
    if isinstance(keyboard, ReplyKeyboard):
        return {
            "keyboard": [[{"text": label} for label in row] for row in keyboard.rows],
            "resize_keyboard": keyboard.resize,
        }
    raise TypeError(f"Unsupported keyboard: {type(keyboard).__name__}")
