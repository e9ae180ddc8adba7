"""Conversation router.

Maps inbound chat events to actions and outbound descriptors:

    /start      -> greeting + persistent keyboard
    /launch     -> one button per tunnel profile + Cancel
    /shutdown   -> stop the agent, report the outcome
    <button>    -> launch the selected profile, or cancel
    anything else -> "unknown command"

The router holds no conversation state. The valid callback tokens are
always the configured profile labels plus the cancel token, so a press on
an outdated keyboard is rejected if its label no longer exists.
"""

import logging

from tunnel_bot.config import TunnelProfile
from tunnel_bot.constants import (
    CALLBACK_TOKEN_CANCEL,
    COMMAND_LAUNCH,
    COMMAND_SHUTDOWN,
    COMMAND_START,
    MESSAGE_CANCEL,
    MESSAGE_CANCELED,
    MESSAGE_DEFAULT,
    MESSAGE_LAUNCH_FAILED,
    MESSAGE_LAUNCHED_FORMAT,
    MESSAGE_NO_PROFILES,
    MESSAGE_UNKNOWN_COMMAND,
    MESSAGE_UNKNOWN_COMMAND_FORMAT,
    MESSAGE_WHAT_TO_LAUNCH,
)
from tunnel_bot.exceptions import UnrecognizedSelectionError
from tunnel_bot.models import (
    CallbackReply,
    CallbackSelection,
    InlineButton,
    InlineKeyboard,
    OutboundMessage,
    ReplyKeyboard,
    TextCommand,
)
from tunnel_bot.tunnel.controller import ProcessController

logger = logging.getLogger(__name__)

MAIN_KEYBOARD = ReplyKeyboard(rows=((COMMAND_LAUNCH, COMMAND_SHUTDOWN),))


class ConversationRouter:
    """Turns authorized chat events into controller calls and replies.

    Args:
        profiles: Configured tunnel profiles, in display order.
        controller: Process controller that runs the agent.
    """

    def __init__(self, profiles: tuple[TunnelProfile, ...], controller: ProcessController) -> None:
        self._profiles = {profile.label: profile for profile in profiles}
        self._controller = controller

    def handle_text(self, event: TextCommand) -> OutboundMessage:
        """Route a text command.

        Commands match by prefix, so "/launch@my_bot" is "/launch".
        """
        text = event.text
        if text.startswith(COMMAND_START):
            return OutboundMessage(text=MESSAGE_DEFAULT, keyboard=MAIN_KEYBOARD)
        if text.startswith(COMMAND_LAUNCH):
            return self._selection_prompt()
        if text.startswith(COMMAND_SHUTDOWN):
            result = self._controller.shutdown()
            return OutboundMessage(text=result.message, keyboard=MAIN_KEYBOARD)

        if text:
            message = MESSAGE_UNKNOWN_COMMAND_FORMAT.format(text=text)
        else:
            message = MESSAGE_UNKNOWN_COMMAND
        return OutboundMessage(text=message, keyboard=MAIN_KEYBOARD)

    def is_offered(self, token: str) -> bool:
        """Whether a callback token is among the currently offered options."""
        return token == CALLBACK_TOKEN_CANCEL or token in self._profiles

    def handle_callback(self, event: CallbackSelection) -> CallbackReply | None:
        """Route a button press.

        Returns:
            The reply to send, or None when the token is not a currently
            offered option (stale or duplicate press), in which case nothing
            should be sent.
        """
        try:
            return self._select(event.token)
        except UnrecognizedSelectionError as e:
            logger.warning(f"Unprocessable callback query: {e.token!r}")
            return None

    def _select(self, token: str) -> CallbackReply:
        if not self.is_offered(token):
            raise UnrecognizedSelectionError(f"Unknown selection: {token}", token=token)
        if token == CALLBACK_TOKEN_CANCEL:
            return CallbackReply(text=MESSAGE_CANCELED)

        profile = self._profiles[token]
        result = self._controller.launch(profile)
        if result.success:
            toast = MESSAGE_LAUNCHED_FORMAT.format(label=profile.label)
        else:
            toast = MESSAGE_LAUNCH_FAILED
        return CallbackReply(text=result.message, toast=toast)

    def _selection_prompt(self) -> OutboundMessage:
        if not self._profiles:
            return OutboundMessage(text=MESSAGE_NO_PROFILES)

        buttons = [InlineButton(text=label, callback_token=label) for label in self._profiles]
        buttons.append(InlineButton(text=MESSAGE_CANCEL, callback_token=CALLBACK_TOKEN_CANCEL))
        return OutboundMessage(
            text=MESSAGE_WHAT_TO_LAUNCH, keyboard=InlineKeyboard(buttons=tuple(buttons))
        )
