"""Transport-independent chat events and outbound descriptors.

Inbound events are produced by the transport adapter; outbound
descriptors are produced by the conversation router and rendered by the
transport. Neither side depends on Telegram wire details.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TextCommand:
    """A text message sent by an operator.

    Attributes:
        operator_id: Sender identity (username), None if the sender has none.
        display_name: Human-readable sender name, for logging.
        chat_id: Chat to reply into.
        text: Message text ("" for non-text messages).
    """

    operator_id: str | None
    display_name: str
    chat_id: int
    text: str = ""


@dataclass(frozen=True)
class CallbackSelection:
    """A button press on an inline keyboard.

    Attributes:
        operator_id: Sender identity (username), None if the sender has none.
        display_name: Human-readable sender name, for logging.
        callback_id: Transport id used to acknowledge the press.
        chat_id: Chat of the message carrying the keyboard.
        message_id: Message carrying the keyboard (edited in reply).
        token: Callback token of the pressed button.
    """

    operator_id: str | None
    display_name: str
    callback_id: str
    chat_id: int
    message_id: int
    token: str


InboundEvent = TextCommand | CallbackSelection


@dataclass(frozen=True)
class InlineButton:
    """A button that sends a callback token when pressed."""

    text: str
    callback_token: str


@dataclass(frozen=True)
class InlineKeyboard:
    """Buttons attached to a single message, one button per row."""

    buttons: tuple[InlineButton, ...]


@dataclass(frozen=True)
class ReplyKeyboard:
    """Persistent keyboard of command buttons shown under the input field."""

    rows: tuple[tuple[str, ...], ...]
    resize: bool = True


Keyboard = InlineKeyboard | ReplyKeyboard


@dataclass(frozen=True)
class OutboundMessage:
    """A new message to send in reply to a text command."""

    text: str
    keyboard: Keyboard | None = field(default=None)


@dataclass(frozen=True)
class CallbackReply:
    """Reply to a button press.

    Attributes:
        text: Replacement text of the message carrying the keyboard. The
            inline keyboard is removed by the edit.
        toast: Optional short notice shown when acknowledging the press.
    """

    text: str
    toast: str | None = None
