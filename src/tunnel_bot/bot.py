"""Event loop adapter between the Telegram transport and the router.

Polls Telegram for updates, drops events from unauthorized senders, and
hands the rest to the conversation router on short-lived worker threads.
Worker threads let a cancel press or a greeting be answered while a
launch is still waiting for the agent; lifecycle operations themselves
are serialized by the process controller's lock.
"""

import logging
import threading

from tunnel_bot.auth import IdentityGate
from tunnel_bot.constants import (
    BOT_THREAD_NAME_FORMAT,
    DEFAULT_MONITOR_INTERVAL_SECONDS,
)
from tunnel_bot.exceptions import TransportError, UnauthorizedError
from tunnel_bot.models import CallbackSelection, InboundEvent, TextCommand
from tunnel_bot.router import ConversationRouter
from tunnel_bot.telegram.client import TelegramClient
from tunnel_bot.telegram.protocol import Update, User

logger = logging.getLogger(__name__)


class TunnelBot:
    """Long-polling Telegram bot driving the conversation router.

    Args:
        client: Telegram Bot API client.
        gate: Identity gate applied to every inbound event.
        router: Conversation router.
        monitor_interval: Seconds between update polls.
        threaded: Handle each update on its own daemon thread. Disable to
            handle updates inline on the polling thread.
    """

    def __init__(
        self,
        client: TelegramClient,
        gate: IdentityGate,
        router: ConversationRouter,
        monitor_interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS,
        threaded: bool = True,
    ) -> None:
        self._client = client
        self._gate = gate
        self._router = router
        self._monitor_interval = monitor_interval
        self._threaded = threaded
        self._offset: int | None = None
        self._stop_event = threading.Event()

    def start(self) -> User:
        """Verify the bot's registration and prepare for polling.

        Returns:
            The bot's own Telegram account.

        Raises:
            TransportError: If the bot cannot retrieve its own account or
                remove the webhook.
        """
        me = self._client.get_me()
        logger.info(f"Launching bot: @{me.username} ({me.first_name})")
        self._client.delete_webhook()
        return me

    def run_forever(self) -> None:
        """Poll for updates until stop() is called."""
        while not self._stop_event.is_set():
            self.poll_once()
            self._stop_event.wait(self._monitor_interval)

    def stop(self) -> None:
        self._stop_event.set()

    def poll_once(self) -> int:
        """Fetch and dispatch one batch of updates.

        Returns:
            Number of updates received.
        """
        try:
            updates = self._client.get_updates(offset=self._offset)
        except TransportError as e:
            logger.error(f"Error while receiving updates: {e}")
            return 0

        for update in updates:
            self._offset = update.update_id + 1
            self.dispatch(update)
        return len(updates)

    def dispatch(self, update: Update) -> None:
        event = update.to_event()
        if event is None:
            logger.debug(f"Ignoring unsupported update {update.update_id}")
            return

        if not self._threaded:
            self.handle_event(event)
            return
        threading.Thread(
            target=self.handle_event,
            args=(event,),
            daemon=True,
            name=BOT_THREAD_NAME_FORMAT.format(update_id=update.update_id),
        ).start()

    def handle_event(self, event: InboundEvent) -> bool:
        """Authorize and handle a single event.

        Returns:
            True if a reply was delivered, False if the event was dropped or
            the transport failed.
        """
        try:
            self._gate.require(event.operator_id, event.display_name)
        except UnauthorizedError as e:
            # Never answered: unauthorized parties learn nothing about the bot
            logger.warning(e.message)
            return False

        # Last handler on worker threads
        try:
            if isinstance(event, TextCommand):
                return self._handle_text(event)
            return self._handle_callback(event)
        except Exception as e:
            logger.exception(f"Failed to handle event from {event.operator_id}: {e}")
            return False

    def _send_typing(self, chat_id: int) -> None:
        try:
            self._client.send_chat_action(chat_id)
        except TransportError as e:
            logger.debug(f"Failed to send typing indicator: {e}")

    def _handle_text(self, event: TextCommand) -> bool:
        self._send_typing(event.chat_id)
        reply = self._router.handle_text(event)
        try:
            self._client.send_message(event.chat_id, reply.text, reply.keyboard)
        except TransportError as e:
            logger.error(f"Failed to send message: {e}")
            return False
        return True

    def _handle_callback(self, event: CallbackSelection) -> bool:
        if self._router.is_offered(event.token):
            self._send_typing(event.chat_id)

        reply = self._router.handle_callback(event)
        if reply is None:
            return False

        try:
            self._client.answer_callback_query(event.callback_id, reply.toast)
        except TransportError as e:
            logger.error(f"Failed to answer callback query: {e}")
            return False

        try:
            self._client.edit_message_text(event.chat_id, event.message_id, reply.text)
        except TransportError as e:
            logger.error(f"Failed to edit message text: {e}")
            return False
        return True
