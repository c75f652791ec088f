"""Batch dispatcher — chunked delivery to the push gateway.

Chunks are sent one after another, never concurrently, with a single
attempt each. Ticket *i* of a response belongs to message *i* of the chunk
that produced it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from push_dispatch.errors.push_errors import GatewayError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from push_dispatch.gateway.client import PushGatewayClient
    from push_dispatch.gateway.models import PushMessage
    from push_dispatch.metrics.collector import DispatchMetrics

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100

T = TypeVar("T")


@dataclass
class BatchResult:
    """Per-token outcome of a dispatch run.

    ``dropped_tokens`` holds tokens whose outcome is unknown (transport
    failure or no matching ticket). They are reported but never reconciled.
    """

    sent_tokens: list[str] = field(default_factory=list)
    invalid_tokens: list[str] = field(default_factory=list)
    dropped_tokens: list[str] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def _record(self, bucket: list[str], token: str) -> None:
        # First outcome wins; a token never lands in two buckets.
        if token not in self._seen:
            self._seen.add(token)
            bucket.append(token)

    def add_sent(self, token: str) -> None:
        self._record(self.sent_tokens, token)

    def add_invalid(self, token: str) -> None:
        self._record(self.invalid_tokens, token)

    def add_dropped(self, token: str) -> None:
        self._record(self.dropped_tokens, token)


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most *size* items."""
    if size < 1:
        msg = f"chunk size must be positive, got {size}"
        raise ValueError(msg)
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def send_batches(
    messages: Sequence[PushMessage],
    gateway: PushGatewayClient,
    log: logging.Logger = logger,
    *,
    batch_size: int = MAX_BATCH_SIZE,
    metrics: DispatchMetrics | None = None,
) -> BatchResult:
    """Send *messages* in chunks and classify every token by its ticket.

    A ``GatewayError`` on one chunk is logged and the chunk's tokens are
    dropped; the remaining chunks are still sent.
    """
    result = BatchResult()

    for index, chunk in enumerate(chunked(messages, batch_size), start=1):
        try:
            tickets = await gateway.send(chunk, log)
        except GatewayError as exc:
            log.error("Push request failed for chunk %d (%d messages): %s", index, len(chunk), exc)
            if metrics is not None:
                metrics.gateway_request(ok=False)
            for message in chunk:
                result.add_dropped(message.to)
            continue

        if metrics is not None:
            metrics.gateway_request(ok=True)

        if len(tickets) != len(chunk):
            log.warning(
                "Gateway returned %d tickets for %d messages in chunk %d",
                len(tickets),
                len(chunk),
                index,
            )

        for message, ticket in zip(chunk, tickets, strict=False):
            if ticket.is_ok:
                result.add_sent(message.to)
            else:
                log.warning("Token rejected (%s): %s", ticket.error_reason, message.to)
                result.add_invalid(message.to)

        for message in chunk[len(tickets) :]:
            result.add_dropped(message.to)

    return result
