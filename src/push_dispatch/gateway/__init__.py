"""Push gateway — HTTP client and wire models."""

from __future__ import annotations

from push_dispatch.gateway.client import PushGatewayClient
from push_dispatch.gateway.models import PushMessage, PushTicket

__all__ = ["PushGatewayClient", "PushMessage", "PushTicket"]
