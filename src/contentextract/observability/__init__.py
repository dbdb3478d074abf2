"""Structured logging and Prometheus metrics."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .logging import configure_logging
from .metrics import METRICS

__all__ = ["configure_logging", "METRICS", "increment", "histogram"]


def _collector(name: str, labels: Optional[Dict[str, Any]]) -> Any:
    metric = METRICS.get(name)
    if metric is None or labels is None:
        return metric
    return metric.labels(**labels)


def increment(name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
    """Add ``value`` to a counter. Unknown names are ignored."""
    counter = _collector(name, labels)
    if counter is not None:
        counter.inc(value)


def histogram(name: str, value: float, labels: Optional[Dict[str, Any]] = None) -> None:
    """Record one observation. Unknown names are ignored."""
    observer = _collector(name, labels)
    if observer is not None:
        observer.observe(value)
