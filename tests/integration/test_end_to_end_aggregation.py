"""Integration tests for end-to-end aggregation.

Runs raw collector output for one researcher through loading,
normalization, matching, merging and metrics.
"""

import json
from pathlib import Path

import pytest

from pubmerge import (
    AggregationResult,
    aggregate,
    aggregate_files,
    load_source_file,
    normalize_source,
    write_json,
)
from pubmerge.audit import AuditLogger

SOURCES_DIR = Path(__file__).parent.parent / "fixtures" / "sources"

PATHS = {
    "orcid": SOURCES_DIR / "orcid.json",
    "scholar": SOURCES_DIR / "scholar.json",
    "scopus": SOURCES_DIR / "scopus.json",
    "crossref": SOURCES_DIR / "crossref.json",
    "semantic_scholar": SOURCES_DIR / "semantic_scholar.json",
}

SECOND_SCREEN_DOI = "10.1111/jcom.12085"
FAKE_NEWS_DOI = "10.1177/0011392119837536"
OPEN_LAB_DOI = "10.1080/15228835.2012.743797"
VILLAGE_DOI = "10.1080/1369118x.2020.1739732"


@pytest.fixture(scope="module")
def result() -> AggregationResult:
    """Aggregate every fixture source in the default order."""
    return aggregate_files(PATHS)


def _by_doi(result: AggregationResult) -> dict:
    return {pub.doi: pub for pub in result.publications}


@pytest.mark.integration
def test_publications_and_metrics(result: AggregationResult) -> None:
    """Five works survive, sorted by citations, with the expected indices."""
    pubs = result.publications

    assert [pub.metrics.total_citations for pub in pubs] == [402, 280, 163, 12, 3]
    assert pubs[0].doi == SECOND_SCREEN_DOI
    assert pubs[-1].doi is None
    assert pubs[-1].title.startswith("Mapping Italian news media")

    metrics = result.metrics
    assert metrics.total_publications == 5
    assert metrics.total_citations == 860
    assert metrics.h_index == 4
    assert metrics.i10_index == 4
    assert metrics.coverage == {
        "orcid": 3,
        "scholar": 5,
        "scopus": 1,
        "crossref": 2,
        "semantic_scholar": 1,
    }
    assert metrics.citation_coverage == {
        "orcid": 0,
        "scholar": 5,
        "scopus": 1,
        "crossref": 0,
        "semantic_scholar": 1,
    }


@pytest.mark.integration
def test_summary_counters(result: AggregationResult) -> None:
    """Run summary reflects drops, duplicates, merges and re-keys."""
    summary = result.summary

    assert summary.sources_processed == list(PATHS)
    assert summary.failed_sources == []
    assert summary.skipped_sources == []
    assert summary.records_in_total == 13
    assert summary.records_dropped == 1
    assert summary.duplicates_removed == 1
    assert summary.publications_inserted == 5
    assert summary.records_merged == 7
    assert summary.rekeyed == 2
    assert summary.per_source["orcid"].duplicates_removed == 1
    assert summary.per_source["scholar"].dropped == 1
    assert summary.per_source["crossref"].rekeyed == 1
    assert summary.per_source["semantic_scholar"].rekeyed == 1


@pytest.mark.integration
def test_substring_title_merge(result: AggregationResult) -> None:
    """The shortened title merges into the full title's publication."""
    pub = _by_doi(result)[SECOND_SCREEN_DOI]

    assert pub.title == (
        "Second Screen and Participation: A Content Analysis on a Full Season Dataset of Tweets"
    )
    assert pub.citations["scholar"] == 402
    assert pub.sources == ["orcid", "scholar", "crossref"]


@pytest.mark.integration
def test_authority_overwrites_authors(result: AggregationResult) -> None:
    """The DOI authority's author string replaces the earlier one."""
    pub = _by_doi(result)[SECOND_SCREEN_DOI]

    assert pub.authors == "Giglietto, Fabio; Selva, Donatella"


@pytest.mark.integration
def test_longer_venue_and_gap_filled_month(result: AggregationResult) -> None:
    """Venue keeps the longer string; month is filled by a later source."""
    pub = _by_doi(result)[SECOND_SCREEN_DOI]

    assert pub.venue == "Journal of Communication 64 (6), 1076-1091"
    assert (pub.year, pub.month) == (2014, 12)
    assert pub.extra["abstract"] == "The paper analyzes tweets about political talk shows."


@pytest.mark.integration
def test_year_gap_filled_by_first_supplier(result: AggregationResult) -> None:
    """A year missing at insert comes from the first source that has one."""
    pub = _by_doi(result)[OPEN_LAB_DOI]

    assert pub.year == 2012
    assert pub.source_ids["crossref"] == OPEN_LAB_DOI


@pytest.mark.integration
def test_doi_match_across_title_variants(result: AggregationResult) -> None:
    """Scopus merges by DOI into the de-duplicated identity record."""
    pub = _by_doi(result)[FAKE_NEWS_DOI]

    assert pub.citations == {"orcid": None, "scholar": 280, "scopus": 150}
    assert pub.metrics.total_citations == 280
    assert pub.metrics.citation_sources == 2


@pytest.mark.integration
def test_unrelated_works_stay_apart(result: AggregationResult) -> None:
    """Different works never share a canonical publication."""
    titles = [pub.title.lower() for pub in result.publications]

    assert sum(t.startswith("fake news is the invention of a liar") for t in titles) == 1
    assert sum(t.startswith("the open laboratory") for t in titles) == 1


@pytest.mark.integration
def test_rekeyed_publication_found_by_doi_alone(result: AggregationResult) -> None:
    """A DOI-only record from a later source finds a re-keyed publication."""
    records = {
        source: normalize_source(source, load_source_file(path)) for source, path in PATHS.items()
    }
    records["wos"] = normalize_source(
        "wos",
        [{"title": "Coordinated link sharing (abridged)", "doi": VILLAGE_DOI, "citations": 9}],
    )

    extended = aggregate(records, [*PATHS, "wos"])

    pub = _by_doi(extended)[VILLAGE_DOI]
    assert len(extended.publications) == 5
    assert pub.citations == {"scholar": 12, "semantic_scholar": 10, "wos": 9}
    assert pub.extra["is_open_access"] is True
    assert pub.extra["fields_of_study"] == ["Computer Science", "Political Science"]


@pytest.mark.integration
def test_aggregation_is_idempotent(tmp_path: Path, result: AggregationResult) -> None:
    """Re-running on identical inputs yields identical output."""
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"

    write_json(result, first)
    write_json(aggregate_files(PATHS), second)

    first_data = json.loads(first.read_text(encoding="utf-8"))
    second_data = json.loads(second.read_text(encoding="utf-8"))
    first_data["summary"].pop("timestamp")
    second_data["summary"].pop("timestamp")
    assert first_data == second_data


@pytest.mark.integration
def test_audit_log_records_run(tmp_path: Path) -> None:
    """The audit log carries one event per drop and re-key."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="integration", log_path=log_path) as logger:
        aggregate_files(PATHS, logger=logger)

    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    names = [e["event"] for e in events]

    assert names.count("record_dropped") == 1
    assert names.count("record_rekeyed") == 2
    assert names.count("source_started") == len(PATHS)
    assert names[-1] == "metrics_computed"
    rekeyed = [e["data"]["new_key"] for e in events if e["event"] == "record_rekeyed"]
    assert rekeyed == [f"doi:{OPEN_LAB_DOI}", f"doi:{VILLAGE_DOI}"]
