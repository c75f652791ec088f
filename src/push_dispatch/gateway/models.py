"""Push gateway data models — outgoing messages and per-message tickets.

Matches the Expo push API contract:
- request: JSON array of ``{to, title, body, data, sound}``
- response: ``{"data": [{status, message?, details?: {error?}}, ...]}``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TICKET_OK = "ok"
UNKNOWN_ERROR = "unknown error"


@dataclass(frozen=True)
class PushMessage:
    """A single notification addressed to one device token."""

    to: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    sound: str = "default"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the gateway JSON shape."""
        return {
            "to": self.to,
            "title": self.title,
            "body": self.body,
            "data": dict(self.data),
            "sound": self.sound,
        }


@dataclass
class PushTicket:
    """Per-message result returned by the gateway.

    Attributes:
        status: ``"ok"`` when the gateway accepted the message.
        message: Human-readable error text, if any.
        details: Extra error information, e.g. ``{"error": "DeviceNotRegistered"}``.
    """

    status: str = ""
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_ok(self) -> bool:
        """Whether the message was accepted."""
        return self.status == TICKET_OK

    @property
    def error_reason(self) -> str:
        """Best available error description: details.error, message, or a generic fallback."""
        return self.details.get("error") or self.message or UNKNOWN_ERROR

    @classmethod
    def from_dict(cls, data: Any) -> PushTicket:
        """Create a ticket from one entry of the gateway's ``data`` array."""
        if not isinstance(data, dict):
            return cls()
        details = data.get("details")
        return cls(
            status=str(data.get("status", "")),
            message=str(data.get("message") or ""),
            details=details if isinstance(details, dict) else {},
        )
