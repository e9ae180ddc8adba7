"""Utility helpers for tunnel-bot."""

from tunnel_bot.utils.console import (
    console,
    print_error,
    print_info,
    print_panel,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "print_error",
    "print_info",
    "print_panel",
    "print_success",
    "print_warning",
]
