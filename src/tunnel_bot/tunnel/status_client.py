"""Client for the tunneling agent's local status API."""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from tunnel_bot.constants import (
    DEFAULT_STATUS_API_URL,
    STATUS_API_TIMEOUT_SECONDS,
    STATUS_ERROR_CONNECT,
    STATUS_ERROR_PAYLOAD,
    STATUS_ERROR_RESPONSE,
    STATUS_LOG_PAYLOAD_BODY,
)
from tunnel_bot.exceptions import (
    StatusConnectionError,
    StatusPayloadError,
    StatusResponseError,
)
from tunnel_bot.tunnel.base import TunnelEndpoint
from tunnel_bot.tunnel.protocol import AgentTunnelsResponse

logger = logging.getLogger(__name__)


class TunnelStatusClient:
    """Fetches active tunnel endpoints from the agent's status endpoint.

    Each call issues exactly one request. There is no internal retry;
    retry policy belongs to the caller.

    Args:
        api_url: URL of the agent's tunnels endpoint.
        timeout: Request timeout in seconds.
        verbose: Log the raw response body when it cannot be parsed.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        api_url: str = DEFAULT_STATUS_API_URL,
        timeout: float = STATUS_API_TIMEOUT_SECONDS,
        verbose: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._timeout = timeout
        self._verbose = verbose
        self._transport = transport

    def fetch_status(self) -> list[TunnelEndpoint]:
        """Query the agent and return its active endpoints.

        Returns:
            Endpoints in the order the agent reports them (possibly empty).

        Raises:
            StatusConnectionError: If the endpoint cannot be reached.
            StatusResponseError: If the endpoint answers with a non-2xx status.
            StatusPayloadError: If the response is not a valid tunnels document.
        """
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(self._api_url)
        except httpx.HTTPError as e:
            logger.warning(STATUS_ERROR_CONNECT.format(error=e))
            raise StatusConnectionError(
                STATUS_ERROR_CONNECT.format(error=e), url=self._api_url
            ) from e

        if not response.is_success:
            message = STATUS_ERROR_RESPONSE.format(status_code=response.status_code)
            logger.warning(message)
            raise StatusResponseError(
                message, url=self._api_url, status_code=response.status_code
            )

        try:
            payload = AgentTunnelsResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            if self._verbose:
                logger.warning(STATUS_LOG_PAYLOAD_BODY.format(body=response.text))
            else:
                logger.warning(STATUS_ERROR_PAYLOAD.format(error=e))
            raise StatusPayloadError(
                STATUS_ERROR_PAYLOAD.format(error=_first_line(e)), url=self._api_url
            ) from e

        endpoints = [
            TunnelEndpoint(name=tunnel.name, public_url=tunnel.public_url, protocol=tunnel.proto)
            for tunnel in payload.tunnels
        ]
        logger.debug(f"Fetched {len(endpoints)} tunnel(s) from {self._api_url}")
        return endpoints


def _first_line(error: Exception) -> str:
    # Pydantic errors span several lines; chat messages only need the summary
    return str(error).splitlines()[0] if str(error) else type(error).__name__
