"""Metrics — Prometheus metrics for dispatch runs."""

from __future__ import annotations

from push_dispatch.metrics.collector import DispatchMetrics

__all__ = ["DispatchMetrics"]
