"""Tests for citation metrics."""

import pytest

from pubmerge.metrics import (
    compute_aggregate_metrics,
    h_index,
    i10_index,
    total_citations,
)
from pubmerge.metrics.calculator import citation_source_count
from pubmerge.models import CanonicalPublication


def _pub(title: str, citations: dict[str, int | None]) -> CanonicalPublication:
    """Build a publication with the given citation slots."""
    return CanonicalPublication(title=title, citations=citations, sources=list(citations))


# ---------------------------------------------------------------------------
# Per-publication
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("citations", "expected_total", "expected_sources"),
    [
        pytest.param({"scholar": 280, "scopus": 150}, 280, 2, id="max_not_sum"),
        pytest.param({"scholar": 0, "crossref": None}, 0, 1, id="zero_counts_as_report"),
        pytest.param({"orcid": None}, 0, 0, id="no_reports"),
        pytest.param({}, 0, 0, id="no_slots"),
    ],
)
def test_publication_totals(
    citations: dict[str, int | None],
    expected_total: int,
    expected_sources: int,
) -> None:
    """Total is the max non-null count; sources count non-null slots."""
    pub = _pub("T", citations)

    assert total_citations(pub) == expected_total
    assert citation_source_count(pub) == expected_sources


# ---------------------------------------------------------------------------
# Indices
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("counts", "expected"),
    [
        pytest.param([402, 163, 280, 12, 3], 4, id="reference_example"),
        pytest.param([], 0, id="empty"),
        pytest.param([0, 0], 0, id="all_zero"),
        pytest.param([1], 1, id="single_cited"),
        pytest.param([10, 10, 10, 10, 10], 5, id="all_equal"),
        pytest.param([100], 1, id="single_highly_cited"),
    ],
)
def test_h_index(counts: list[int], expected: int) -> None:
    """h-index is the largest h with h papers cited at least h times."""
    assert h_index(counts) == expected


@pytest.mark.unit
def test_i10_index() -> None:
    """i10 counts publications at or above the threshold."""
    counts = [402, 163, 280, 12, 10, 9, 3]

    assert i10_index(counts) == 5
    assert i10_index(counts, threshold=100) == 3


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_compute_aggregate_metrics() -> None:
    """Aggregate metrics combine totals, indices and coverage."""
    pubs = [
        _pub("A", {"scholar": 402, "crossref": None}),
        _pub("B", {"scholar": 280, "scopus": 150}),
        _pub("C", {"orcid": None, "scholar": 3}),
    ]

    metrics = compute_aggregate_metrics(pubs, ["orcid", "scholar", "scopus", "crossref"])

    assert metrics.total_publications == 3
    assert metrics.total_citations == 685
    assert metrics.h_index == 3
    assert metrics.i10_index == 2
    assert metrics.coverage == {"orcid": 1, "scholar": 3, "scopus": 1, "crossref": 1}
    assert metrics.citation_coverage == {"orcid": 0, "scholar": 3, "scopus": 1, "crossref": 0}
    assert pubs[1].metrics.total_citations == 280
    assert pubs[1].metrics.citation_sources == 2


@pytest.mark.unit
def test_aggregate_metrics_empty() -> None:
    """No publications yield all-zero metrics."""
    metrics = compute_aggregate_metrics([], ["scholar"])

    assert metrics.to_dict() == {
        "total_publications": 0,
        "total_citations": 0,
        "h_index": 0,
        "i10_index": 0,
        "coverage": {"scholar": 0},
        "citation_coverage": {"scholar": 0},
    }
