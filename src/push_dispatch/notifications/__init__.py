"""Notifications — token selection, batched push delivery and reconciliation.

Provides:
- ``PushNotificationService`` — runs the full pipeline for one item
- ``send_batches`` — chunked, sequential delivery with per-token outcomes
- ``reconcile`` — writes outcomes back to the token table
"""

from __future__ import annotations

from push_dispatch.notifications.dispatcher import BatchResult, chunked, send_batches
from push_dispatch.notifications.events import ITEM_CREATED, NotificationItem, RunReport
from push_dispatch.notifications.messages import build_messages
from push_dispatch.notifications.reconciler import reconcile
from push_dispatch.notifications.service import PushNotificationService

__all__ = [
    "ITEM_CREATED",
    "BatchResult",
    "NotificationItem",
    "PushNotificationService",
    "RunReport",
    "build_messages",
    "chunked",
    "reconcile",
    "send_batches",
]
