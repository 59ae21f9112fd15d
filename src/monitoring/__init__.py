"""Monitoring infrastructure for the pizza finder backend"""
from src.monitoring.prometheus_metrics import (
    metrics,
    track_place_search,
    track_discovery,
    track_cache_write,
    track_achievement_awarded,
)

__all__ = [
    "metrics",
    "track_place_search",
    "track_discovery",
    "track_cache_write",
    "track_achievement_awarded",
]
