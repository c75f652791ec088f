"""Message builder — one push message per device token."""

from __future__ import annotations

from typing import TYPE_CHECKING

from push_dispatch.gateway.models import PushMessage

if TYPE_CHECKING:
    from collections.abc import Iterable

    from push_dispatch.notifications.events import NotificationItem


def build_messages(
    tokens: Iterable[str],
    item: NotificationItem,
    *,
    sound: str = "default",
) -> list[PushMessage]:
    """Map each token to a message carrying the item's title, body and event data."""
    data = {"type": item.type, "event": item.event}
    return [
        PushMessage(to=token, title=item.title, body=item.body, data=dict(data), sound=sound)
        for token in tokens
    ]
