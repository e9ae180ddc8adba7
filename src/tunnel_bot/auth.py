"""Operator identity gate."""

import logging

from tunnel_bot.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class IdentityGate:
    """Checks inbound operator identities against a static allow-list.

    The allow-list is fixed at construction. Unknown, empty and missing
    identities are all simply unauthorized.

    Args:
        allowed_ids: Operator usernames allowed to control the bot.
    """

    def __init__(self, allowed_ids: frozenset[str]) -> None:
        self._allowed_ids = frozenset(allowed_ids)

    def authorize(self, operator_id: str | None) -> bool:
        """Return True if the identity is on the allow-list."""
        if not operator_id:
            return False
        return operator_id in self._allowed_ids

    def require(self, operator_id: str | None, display_name: str | None = None) -> None:
        """Raise UnauthorizedError unless the identity is on the allow-list.

        Args:
            operator_id: Identity extracted from the inbound event.
            display_name: Optional human name, used only in the error message.

        Raises:
            UnauthorizedError: If the identity is unknown or missing.
        """
        if self.authorize(operator_id):
            return
        if not operator_id:
            raise UnauthorizedError(f"Not allowed (no user name): {display_name or '?'}")
        raise UnauthorizedError(f"Id not allowed: {operator_id}", operator_id=operator_id)
