"""
Defines Prometheus metrics for content extraction.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple workers sharing a registry)
# must reuse the already registered collectors instead of raising.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        # Counters register under their name without the "_total" suffix.
        for key in (name, name.removesuffix("_total")):
            existing = _PROM_REGISTRY._names_to_collectors.get(key)
            if existing is not None:
                return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "extractions_total": Counter(
            "contentextract_extractions_total",
            "Extraction calls by URL kind and outcome",
            ["url_kind", "outcome"],
        ),
        "extraction_duration_seconds": Histogram(
            "contentextract_extraction_duration_seconds",
            "Wall-clock time of one extraction call",
            ["url_kind"],
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 60.0),
        ),
        "url_rejections_total": Counter(
            "contentextract_url_rejections_total",
            "URLs rejected by validation before any fetch",
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
