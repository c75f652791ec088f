"""Push notification service — the reset → select → build → send → reconcile pipeline."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

from push_dispatch.notifications.dispatcher import send_batches
from push_dispatch.notifications.events import NotificationItem, RunReport
from push_dispatch.notifications.messages import build_messages
from push_dispatch.notifications.reconciler import reconcile
from push_dispatch.notifications.tokens import reset_tokens, select_valid_tokens

if TYPE_CHECKING:
    from push_dispatch.config.settings import GatewayConfig
    from push_dispatch.datastore.client import Datastore
    from push_dispatch.gateway.client import PushGatewayClient
    from push_dispatch.metrics.collector import DispatchMetrics

logger = logging.getLogger(__name__)


class PushNotificationService:
    """Broadcasts a notification item to every eligible device token.

    Usage::

        svc = PushNotificationService(datastore, gateway, config.gateway)
        report = await svc.run(NotificationItem(title="Hi", body="..."))
    """

    def __init__(
        self,
        datastore: Datastore,
        gateway: PushGatewayClient,
        config: GatewayConfig,
        *,
        metrics: DispatchMetrics | None = None,
    ) -> None:
        self._datastore = datastore
        self._gateway = gateway
        self._config = config
        self._metrics = metrics

    async def run(self, item: NotificationItem, log: logging.Logger | None = None) -> RunReport:
        """Run the full pipeline for one item.

        Storage errors are not caught here; callers decide what to do with them.
        """
        log = log or logger
        tracker = self._metrics.track_run() if self._metrics else contextlib.nullcontext()
        with tracker:
            await reset_tokens(self._datastore, log)

            tokens = await select_valid_tokens(
                self._datastore, log, prefixes=self._config.token_prefixes
            )
            if not tokens:
                return RunReport()

            messages = build_messages(tokens, item, sound=self._config.default_sound)
            result = await send_batches(
                messages,
                self._gateway,
                log,
                batch_size=self._config.batch_size,
                metrics=self._metrics,
            )
            await reconcile(self._datastore, result, log)

        report = RunReport(
            selected=len(tokens),
            sent=len(result.sent_tokens),
            invalid=len(result.invalid_tokens),
            dropped=len(result.dropped_tokens),
        )
        if self._metrics is not None:
            self._metrics.record_outcomes(
                sent=report.sent, invalid=report.invalid, dropped=report.dropped
            )
        log.info("Notification sent to %d devices", report.selected)
        return report

    async def handle_item_created(
        self, payload: Any, log: logging.Logger | None = None
    ) -> RunReport | None:
        """Hook entry point: parse and run the pipeline, logging and swallowing any failure."""
        log = log or logger
        try:
            item = NotificationItem.from_payload(payload)
            return await self.run(item, log)
        except Exception:
            log.exception("Error sending notifications")
            return None
