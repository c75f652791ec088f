"""Event types for the notification pipeline.

- ``NotificationItem`` — payload of the ``notifications.items.create`` event
- ``RunReport`` — outcome summary of one dispatch run
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

ITEM_CREATED = "notifications.items.create"


@dataclass(frozen=True)
class NotificationItem:
    """A newly created notification item to broadcast.

    ``type`` and ``event`` are forwarded to devices exactly as received.
    """

    title: str = ""
    body: str = ""
    type: Any = None
    event: Any = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> NotificationItem:
        """Build an item from a hook payload, ignoring unknown keys.

        Raises:
            TypeError: If *payload* is not a mapping.
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            msg = f"notification payload must be a mapping, got {type(payload).__name__}"
            raise TypeError(msg)
        return cls(
            title=str(payload.get("title") or ""),
            body=str(payload.get("body") or ""),
            type=payload.get("type"),
            event=payload.get("event"),
        )


@dataclass(frozen=True)
class RunReport:
    """Counts for a single dispatch run."""

    selected: int = 0
    sent: int = 0
    invalid: int = 0
    dropped: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)
