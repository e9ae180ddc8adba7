"""Shared data structures for the tunnel lifecycle."""

from dataclasses import dataclass

from tunnel_bot.constants import MESSAGE_ENDPOINT_LINE_FORMAT, MESSAGE_NO_TUNNELS


@dataclass(frozen=True)
class TunnelEndpoint:
    """An active tunnel endpoint reported by the agent.

    Derived fresh from each status poll; never cached.

    Attributes:
        name: Tunnel name as configured in the agent.
        public_url: Public URL of the tunnel.
        protocol: Tunnel protocol (e.g. "https", "tcp"); may be empty.
    """

    name: str
    public_url: str
    protocol: str = ""


@dataclass(frozen=True)
class ControllerResult:
    """Outcome of a process lifecycle operation.

    Attributes:
        success: Whether the operation achieved its goal.
        message: Human-readable report, shown to the operator verbatim.
    """

    success: bool
    message: str


def format_endpoints(endpoints: list[TunnelEndpoint]) -> str:
    """Render endpoints as one line per tunnel.

    An empty list is a valid result and renders as "No tunnels available".
    """
    if not endpoints:
        return MESSAGE_NO_TUNNELS
    return "\n".join(
        MESSAGE_ENDPOINT_LINE_FORMAT.format(name=endpoint.name, public_url=endpoint.public_url)
        for endpoint in endpoints
    )
