"""
Defines the Prometheus metrics recorded by Crux.

Metrics are registered on the default registry; exposing them is left to the
embedding application.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple interpreters sharing the
# default registry) must not raise duplicate registration errors.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing

        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            # Registration lost the race, reuse the collector that won.
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)
Histogram = _duplicate_safe_factory(_OrigHistogram)


def _create_metrics() -> Dict[str, Any]:
    return {
        "plugin_runs": Counter(
            "crux_plugin_runs_total",
            "Plugin invocations by outcome",
            ["plugin", "outcome"],
        ),
        "fetch_responses": Counter(
            "crux_fetch_responses_total",
            "HTTP responses received while fetching documents",
            ["status_class"],
        ),
        "fetch_latency": Histogram(
            "crux_fetch_latency_seconds",
            "Latency of successful document fetches",
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
        ),
        "articles": Counter(
            "crux_articles_total",
            "Article extraction attempts by outcome",
            ["outcome"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()

_enabled = True


def set_enabled(enabled: bool) -> None:
    """Turn metric recording on or off process-wide."""
    global _enabled
    _enabled = enabled


def increment(name: str, value: float = 1.0, **labels: str) -> None:
    """Increment a counter metric, ignoring unknown names."""
    if not _enabled or name not in METRICS:
        return
    metric = METRICS[name]
    if labels:
        metric.labels(**labels).inc(value)
    else:
        metric.inc(value)


def observe(name: str, value: float, **labels: str) -> None:
    """Observe a histogram metric, ignoring unknown names."""
    if not _enabled or name not in METRICS:
        return
    metric = METRICS[name]
    if labels:
        metric.labels(**labels).observe(value)
    else:
        metric.observe(value)
