"""State reconciler — persist a batch result back onto the token table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from push_dispatch.notifications.tokens import mark_tokens_invalid, mark_tokens_notified

if TYPE_CHECKING:
    from push_dispatch.datastore.client import Datastore
    from push_dispatch.notifications.dispatcher import BatchResult

logger = logging.getLogger(__name__)


async def reconcile(datastore: Datastore, result: BatchResult, log: logging.Logger = logger) -> None:
    """Mark sent tokens notified and demote invalid tokens to draft.

    The two updates commit separately. If the second one fails, the first
    stays applied and the storage error propagates.
    """
    if result.sent_tokens:
        await mark_tokens_notified(datastore, result.sent_tokens, log)
        log.info("Marked %d tokens as notified", len(result.sent_tokens))

    if result.invalid_tokens:
        await mark_tokens_invalid(datastore, result.invalid_tokens, log)
        log.info('%d failing tokens moved to status "draft"', len(result.invalid_tokens))

    if result.dropped_tokens:
        log.warning(
            "%d tokens left unreconciled after transport failures", len(result.dropped_tokens)
        )
