"""
Prometheus metrics for the mixcord REST client.
"""

import threading
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, Info

from mixcord import __version__


class RestMetrics:
    """Metrics collector for REST calls and rate-limit waits.

    Each collector owns its registry unless one is passed in, so several
    clients can live in one process without clashing on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up client metrics."""

        self._metrics["client_info"] = Info(
            "mixcord_client",
            "REST client information",
            registry=self.registry
        )
        self._metrics["client_info"].info({"version": __version__})

        self._metrics["requests_total"] = Counter(
            "mixcord_requests_total",
            "Total REST calls by outcome",
            ["method", "route", "outcome"],
            registry=self.registry
        )

        self._metrics["request_duration_seconds"] = Histogram(
            "mixcord_request_duration_seconds",
            "REST call duration in seconds, rate-limit waits excluded",
            ["method"],
            registry=self.registry
        )

        self._metrics["ratelimit_waits_total"] = Counter(
            "mixcord_ratelimit_waits_total",
            "Total calls held back by an exhausted rate-limit bucket",
            ["route"],
            registry=self.registry
        )

        self._metrics["ratelimit_wait_seconds"] = Histogram(
            "mixcord_ratelimit_wait_seconds",
            "Time spent waiting for a rate-limit window to reset",
            registry=self.registry
        )

    def record_request(self, method: str, route: str, outcome: str, duration: float):
        """Record a completed REST call."""
        with self._lock:
            self._metrics["requests_total"].labels(
                method=method,
                route=route,
                outcome=outcome
            ).inc()
            self._metrics["request_duration_seconds"].labels(method=method).observe(duration)

    def record_ratelimit_wait(self, route: str, seconds: float):
        """Record a wait imposed by the local rate limiter."""
        with self._lock:
            self._metrics["ratelimit_waits_total"].labels(route=route).inc()
            self._metrics["ratelimit_wait_seconds"].observe(seconds)

    def get_metric(self, name: str) -> Optional[Any]:
        """Get a metric by name."""
        return self._metrics.get(name)
