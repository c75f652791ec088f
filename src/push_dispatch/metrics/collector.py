"""Metrics collector — Prometheus counters and histograms for dispatch runs.

- ``push_tokens_total`` counter-vec (outcome: sent, invalid, dropped)
- ``push_gateway_requests_total`` counter-vec (result: ok, error)
- ``push_run_duration_seconds`` histogram
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator

_PREFIX = "push"


class DispatchMetrics:
    """Dispatch metrics bound to their own registry."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._tokens = Counter(
            f"{_PREFIX}_tokens_total",
            "Device tokens processed, by delivery outcome",
            ("outcome",),
            registry=self._registry,
        )
        self._requests = Counter(
            f"{_PREFIX}_gateway_requests_total",
            "Requests sent to the push gateway, by result",
            ("result",),
            registry=self._registry,
        )
        self._run_duration = Histogram(
            f"{_PREFIX}_run_duration_seconds",
            "Duration of a full dispatch run",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def record_outcomes(self, *, sent: int, invalid: int, dropped: int) -> None:
        """Add a run's per-token outcome counts."""
        self._tokens.labels(outcome="sent").inc(sent)
        self._tokens.labels(outcome="invalid").inc(invalid)
        self._tokens.labels(outcome="dropped").inc(dropped)

    def gateway_request(self, *, ok: bool) -> None:
        """Count one gateway request."""
        self._requests.labels(result="ok" if ok else "error").inc()

    @contextmanager
    def track_run(self) -> Iterator[None]:
        """Track the duration of a dispatch run."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._run_duration.observe(time.monotonic() - start)
