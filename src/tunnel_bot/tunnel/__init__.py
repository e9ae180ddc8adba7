"""Tunneling agent lifecycle and status.

Provides the exclusive process controller for the agent (ngrok by default)
and the client for the agent's local status API.
"""

from tunnel_bot.tunnel.base import ControllerResult, TunnelEndpoint, format_endpoints
from tunnel_bot.tunnel.controller import ProcessController
from tunnel_bot.tunnel.status_client import TunnelStatusClient

__all__ = [
    "ControllerResult",
    "ProcessController",
    "TunnelEndpoint",
    "TunnelStatusClient",
    "format_endpoints",
]
