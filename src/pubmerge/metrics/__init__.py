"""Bibliometric indicators over canonical publications."""

from pubmerge.metrics.calculator import (
    DEFAULT_I10_THRESHOLD,
    citation_source_count,
    compute_aggregate_metrics,
    compute_publication_metrics,
    h_index,
    i10_index,
    total_citations,
)
from pubmerge.metrics.models import AggregateMetrics

__all__ = [
    "AggregateMetrics",
    "DEFAULT_I10_THRESHOLD",
    "citation_source_count",
    "compute_aggregate_metrics",
    "compute_publication_metrics",
    "h_index",
    "i10_index",
    "total_citations",
]
