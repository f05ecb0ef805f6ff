"""Citation metrics over canonical publications.

Sources disagree on citation counts and none of them sees every citing
work, so a publication's total is the maximum reported by any source,
never the sum.
"""

from collections.abc import Iterable, Sequence

from pubmerge.models import CanonicalPublication, PublicationMetrics

from .models import AggregateMetrics

__all__ = [
    "DEFAULT_I10_THRESHOLD",
    "citation_source_count",
    "compute_aggregate_metrics",
    "compute_publication_metrics",
    "h_index",
    "i10_index",
    "total_citations",
]

DEFAULT_I10_THRESHOLD = 10


def total_citations(publication: CanonicalPublication) -> int:
    """Return the best citation estimate for a publication.

    Parameters
    ----------
    publication : CanonicalPublication
        Publication with per-source citation slots.

    Returns
    -------
    int
        Maximum non-null count across sources, or 0 if none reported.
    """
    counts = [c for c in publication.citations.values() if c is not None]
    return max(counts, default=0)


def citation_source_count(publication: CanonicalPublication) -> int:
    """Count the sources that reported a citation count (zero included)."""
    return sum(1 for c in publication.citations.values() if c is not None)


def h_index(counts: Iterable[int]) -> int:
    """Calculate the h-index of a list of citation counts.

    Parameters
    ----------
    counts : Iterable[int]
        Citation count per publication.

    Returns
    -------
    int
        Largest h such that h counts are each at least h.

    Examples
    --------
    >>> h_index([402, 163, 280, 12, 3])
    4
    """
    h = 0
    for rank, count in enumerate(sorted(counts, reverse=True), start=1):
        if count < rank:
            break
        h = rank
    return h


def i10_index(counts: Iterable[int], threshold: int = DEFAULT_I10_THRESHOLD) -> int:
    """Count publications with at least ``threshold`` citations."""
    return sum(1 for count in counts if count >= threshold)


def compute_publication_metrics(publication: CanonicalPublication) -> PublicationMetrics:
    """Recompute and store a publication's derived metrics.

    Parameters
    ----------
    publication : CanonicalPublication
        Publication to update in place.

    Returns
    -------
    PublicationMetrics
        The stored metrics.
    """
    publication.metrics = PublicationMetrics(
        total_citations=total_citations(publication),
        citation_sources=citation_source_count(publication),
    )
    return publication.metrics


def compute_aggregate_metrics(
    publications: Sequence[CanonicalPublication],
    sources: Iterable[str],
    i10_threshold: int = DEFAULT_I10_THRESHOLD,
) -> AggregateMetrics:
    """Compute per-publication and aggregate metrics.

    Per-publication metrics are refreshed in place first.

    Parameters
    ----------
    publications : Sequence[CanonicalPublication]
        Canonical publications.
    sources : Iterable[str]
        Sources to report coverage for.
    i10_threshold : int, optional
        Citation threshold of the i10-index.

    Returns
    -------
    AggregateMetrics
        Aggregate indicators.
    """
    totals = [compute_publication_metrics(pub).total_citations for pub in publications]

    coverage: dict[str, int] = {}
    citation_coverage: dict[str, int] = {}
    for source in sources:
        coverage[source] = sum(1 for pub in publications if source in pub.sources)
        citation_coverage[source] = sum(
            1 for pub in publications if pub.citations.get(source) is not None
        )

    return AggregateMetrics(
        total_publications=len(publications),
        total_citations=sum(totals),
        h_index=h_index(totals),
        i10_index=i10_index(totals, i10_threshold),
        coverage=coverage,
        citation_coverage=citation_coverage,
    )
