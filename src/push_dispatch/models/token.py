"""Notification token model — one row per registered device push token."""

from __future__ import annotations

import enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from push_dispatch.models.base import Base

TOKENS_TABLE = "notifications_tokens"


class TokenStatus(enum.StrEnum):
    """Publication state of a device token.

    Lifecycle: PUBLISHED --(delivery fails)--> DRAFT. Moving a token back
    to PUBLISHED happens outside this service.
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class NotificationToken(Base):
    """A device push token tracked for notification delivery.

    Rows are created by the device registration flow; this service only
    flips ``notified`` and demotes failing tokens to ``draft``.
    """

    __tablename__ = TOKENS_TABLE

    push_token: Mapped[str] = mapped_column(
        "expoPushToken", String(255), primary_key=True, comment="Provider push token"
    )
    notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_for_test: Mapped[bool] = mapped_column(
        "isForTest", Boolean, nullable=False, default=False
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TokenStatus.DRAFT.value, index=True
    )

    def __repr__(self) -> str:
        return f"<NotificationToken token={self.push_token[:30]} status={self.status}>"
