"""Prometheus metrics definitions and helpers"""
import logging
import time
from contextlib import contextmanager
from prometheus_client import Counter, Histogram
from src.config import ENABLE_PROMETHEUS

logger = logging.getLogger(__name__)


class PrometheusMetrics:
    """Container for all Prometheus metrics"""

    def __init__(self, enabled: bool = ENABLE_PROMETHEUS):
        self._enabled = enabled
        if not enabled:
            logger.info("Prometheus metrics disabled")
            return

        # Place-search API metrics
        self.place_search_calls_total = Counter(
            'place_search_calls_total',
            'Total place-search API calls',
            ['status']
        )

        self.place_search_duration_seconds = Histogram(
            'place_search_duration_seconds',
            'Place-search API latency',
            buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
        )

        # Discovery metrics
        self.discovery_requests_total = Counter(
            'discovery_requests_total',
            'Total discovery requests',
            ['outcome']
        )

        self.discovery_results_total = Counter(
            'discovery_results_total',
            'Pizzerias returned by discovery',
            ['source']
        )

        self.discovery_cache_writes_total = Counter(
            'discovery_cache_writes_total',
            'Attempts to cache newly discovered pizzerias',
            ['status']
        )

        # Gamification metrics
        self.achievements_awarded_total = Counter(
            'achievements_awarded_total',
            'Achievements awarded',
            ['achievement_type']
        )

        logger.info("Prometheus metrics initialized")

    @property
    def enabled(self) -> bool:
        """Check if metrics are enabled"""
        return self._enabled


# Global metrics instance
metrics = PrometheusMetrics()


@contextmanager
def track_place_search():
    """Track a place-search API call"""
    if not metrics.enabled:
        yield
        return

    start_time = time.time()
    status = "failure"

    try:
        yield
        status = "success"
    finally:
        metrics.place_search_duration_seconds.observe(time.time() - start_time)
        metrics.place_search_calls_total.labels(status=status).inc()


def track_discovery(outcome: str, from_cache: int = 0, from_api: int = 0) -> None:
    """Record a finished discovery request and where its results came from"""
    if not metrics.enabled:
        return

    metrics.discovery_requests_total.labels(outcome=outcome).inc()
    if from_cache:
        metrics.discovery_results_total.labels(source="cache").inc(from_cache)
    if from_api:
        metrics.discovery_results_total.labels(source="api").inc(from_api)


def track_cache_write(success: bool) -> None:
    if not metrics.enabled:
        return
    metrics.discovery_cache_writes_total.labels(status="success" if success else "failure").inc()


def track_achievement_awarded(achievement_type: str) -> None:
    if not metrics.enabled:
        return
    metrics.achievements_awarded_total.labels(achievement_type=achievement_type).inc()
