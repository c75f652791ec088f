"""Hook registry — named events with filter and action handlers.

Filters run first, synchronously, and may replace the payload. Actions run
afterwards, awaited one at a time in registration order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from push_dispatch.errors.push_errors import HookNotFoundError
from push_dispatch.notifications.events import ITEM_CREATED

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from push_dispatch.notifications.service import PushNotificationService

    Payload = dict[str, Any]
    FilterHandler = Callable[[Payload], Payload | None]
    ActionHandler = Callable[[Payload], Awaitable[Any]]

logger = logging.getLogger(__name__)


class HookRegistry:
    """Registry of filter and action handlers keyed by event name.

    Usage::

        hooks = HookRegistry()
        hooks.action("notifications.items.create", handler)
        results = await hooks.emit("notifications.items.create", {"title": "Hi"})
    """

    def __init__(self) -> None:
        self._filters: dict[str, list[FilterHandler]] = defaultdict(list)
        self._actions: dict[str, list[ActionHandler]] = defaultdict(list)

    def filter(self, event: str, handler: FilterHandler) -> None:
        """Register a payload filter for *event*."""
        self._filters[event].append(handler)

    def action(self, event: str, handler: ActionHandler) -> None:
        """Register an async action for *event*."""
        self._actions[event].append(handler)

    def has(self, event: str) -> bool:
        """Whether any handler is registered for *event*."""
        return bool(self._filters.get(event) or self._actions.get(event))

    @property
    def events(self) -> list[str]:
        """Names of all events with at least one handler."""
        return sorted(e for e in {*self._filters, *self._actions} if self.has(e))

    async def emit(self, event: str, payload: Payload | None = None) -> list[Any]:
        """Run the filters, then the actions, registered for *event*.

        Returns:
            The action results, in registration order. Empty when nothing
            is registered for *event*.
        """
        payload = dict(payload or {})
        for handler in self._filters.get(event, []):
            replaced = handler(payload)
            if replaced is not None:
                payload = replaced

        results = []
        for handler in self._actions.get(event, []):
            results.append(await handler(payload))
        return results

    async def emit_strict(self, event: str, payload: Payload | None = None) -> list[Any]:
        """Like :meth:`emit`, but raise for events nobody listens to.

        Raises:
            HookNotFoundError: If no handler is registered for *event*.
        """
        if not self.has(event):
            raise HookNotFoundError(event)
        return await self.emit(event, payload)


def register_push_hooks(registry: HookRegistry, service: PushNotificationService) -> None:
    """Wire the item-created event to the push notification service."""

    def _log_received(payload: Payload) -> None:
        logger.info("New notification item received: %s", payload.get("title", ""))

    registry.filter(ITEM_CREATED, _log_received)
    registry.action(ITEM_CREATED, service.handle_item_created)
