"""Data models for bibliometric indicators."""

from dataclasses import asdict, dataclass, field
from typing import Any

__all__ = ["AggregateMetrics"]


@dataclass
class AggregateMetrics:
    """Indicators computed over the whole publication list.

    Attributes
    ----------
    total_publications : int
        Number of canonical publications.
    total_citations : int
        Sum of per-publication citation totals.
    h_index : int
        Largest h such that h publications have at least h citations.
    i10_index : int
        Publications with at least ``i10_threshold`` citations.
    coverage : dict[str, int]
        Publications each source contributed to.
    citation_coverage : dict[str, int]
        Publications with a non-null citation count, per source.
    """

    total_publications: int = 0
    total_citations: int = 0
    h_index: int = 0
    i10_index: int = 0
    coverage: dict[str, int] = field(default_factory=dict)
    citation_coverage: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
