"""Push gateway HTTP client.

Provides an async HTTP client for the Expo push API:
- POST /--/api/v2/push/send — Send up to 100 messages, one ticket per message
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from push_dispatch.errors.push_errors import GatewayError
from push_dispatch.gateway.models import PushTicket

if TYPE_CHECKING:
    from collections.abc import Sequence

    from push_dispatch.config.settings import GatewayConfig
    from push_dispatch.gateway.models import PushMessage

logger = logging.getLogger(__name__)


class PushGatewayClient:
    """Async HTTP client for the push gateway.

    Usage::

        gateway = PushGatewayClient(config)
        await gateway.connect()
        try:
            tickets = await gateway.send(messages)
        finally:
            await gateway.close()
    """

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._config.access_token:
            headers["Authorization"] = f"Bearer {self._config.access_token}"

        self._client = httpx.AsyncClient(headers=headers, timeout=self._config.timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    @property
    def url(self) -> str:
        """Return the push endpoint URL."""
        return self._config.url

    async def send(
        self, messages: Sequence[PushMessage], log: logging.Logger = logger
    ) -> list[PushTicket]:
        """Send one batch of messages in a single request.

        The gateway answers with one ticket per message, in request order.

        Raises:
            GatewayError: On network errors, unparseable bodies, or error
                responses that carry no per-message data.
        """
        client = self._ensure_connected()
        payload = [m.to_dict() for m in messages]

        try:
            response = await client.post(self._config.url, json=payload)
        except httpx.HTTPError as exc:
            raise GatewayError(f"push request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise GatewayError(
                f"push gateway returned non-JSON body ({response.status_code})",
                status_code=response.status_code,
            ) from exc

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            detail = body.get("errors", response.text) if isinstance(body, dict) else response.text
            raise GatewayError(
                f"push gateway returned no ticket data ({response.status_code}): {detail}",
                status_code=response.status_code,
            )

        log.debug("Gateway returned %d tickets for %d messages", len(data), len(payload))
        return [PushTicket.from_dict(item) for item in data]

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Push gateway not connected. Call connect() first."
            raise GatewayError(msg, status_code=500)
        return self._client
