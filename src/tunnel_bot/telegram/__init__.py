"""Telegram Bot API transport."""

from tunnel_bot.telegram.client import TelegramClient
from tunnel_bot.telegram.protocol import Update, User, render_keyboard

__all__ = [
    "TelegramClient",
    "Update",
    "User",
    "render_keyboard",
]
