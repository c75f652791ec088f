"""Error types raised by the push dispatch service."""

from __future__ import annotations

from push_dispatch.errors.push_errors import GatewayError, HookNotFoundError, PushDispatchError

__all__ = ["GatewayError", "HookNotFoundError", "PushDispatchError"]
