"""Tests for dispatch metrics."""

from __future__ import annotations

from prometheus_client import CollectorRegistry

from push_dispatch.metrics.collector import DispatchMetrics


class TestDispatchMetrics:
    def test_own_registry_by_default(self) -> None:
        a, b = DispatchMetrics(), DispatchMetrics()
        assert a.registry is not b.registry

    def test_uses_given_registry(self) -> None:
        registry = CollectorRegistry()
        assert DispatchMetrics(registry).registry is registry

    def test_record_outcomes(self) -> None:
        metrics = DispatchMetrics()
        metrics.record_outcomes(sent=3, invalid=1, dropped=0)
        metrics.record_outcomes(sent=2, invalid=0, dropped=4)

        reg = metrics.registry
        assert reg.get_sample_value("push_tokens_total", {"outcome": "sent"}) == 5
        assert reg.get_sample_value("push_tokens_total", {"outcome": "invalid"}) == 1
        assert reg.get_sample_value("push_tokens_total", {"outcome": "dropped"}) == 4

    def test_track_run(self) -> None:
        metrics = DispatchMetrics()
        with metrics.track_run():
            pass
        assert metrics.registry.get_sample_value("push_run_duration_seconds_count") == 1

    def test_track_run_records_on_error(self) -> None:
        metrics = DispatchMetrics()
        try:
            with metrics.track_run():
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert metrics.registry.get_sample_value("push_run_duration_seconds_count") == 1
