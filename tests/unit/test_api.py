"""Tests for the public API module."""

import json
from pathlib import Path

import pytest

from pubmerge import (
    AggregationConfig,
    LoadError,
    SourceRecord,
    aggregate_files,
    load_source_file,
    normalize_source,
    write_json,
    write_jsonl,
)


@pytest.fixture
def sources_dir(fixtures_dir: Path) -> Path:
    """Path to raw collector output fixtures."""
    return fixtures_dir / "sources"


# ---------------------------------------------------------------------------
# load_source_file
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("filename", "expected_count"),
    [
        pytest.param("orcid.json", 4, id="orcid_group"),
        pytest.param("scholar.json", 6, id="publications_key"),
        pytest.param("scopus.json", 1, id="search_results_entry"),
        pytest.param("crossref.json", 2, id="message_items"),
        pytest.param("semantic_scholar.json", 1, id="data_key"),
    ],
)
def test_load_source_file_envelopes(sources_dir: Path, filename: str, expected_count: int) -> None:
    """Test every collector envelope yields its record list."""
    raws = load_source_file(sources_dir / filename)

    assert len(raws) == expected_count
    assert all(isinstance(raw, dict) for raw in raws)


@pytest.mark.unit
def test_load_source_file_bare_list(tmp_path: Path) -> None:
    """Test a bare JSON list is returned as-is."""
    path = tmp_path / "bare.json"
    path.write_text(json.dumps([{"title": "A"}, {"title": "B"}]), encoding="utf-8")

    assert load_source_file(path) == [{"title": "A"}, {"title": "B"}]


@pytest.mark.unit
def test_load_source_file_nonexistent_raises_error() -> None:
    """Test load_source_file raises FileNotFoundError for nonexistent file."""
    with pytest.raises(FileNotFoundError):
        load_source_file("/nonexistent/file.json")


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        pytest.param("{not json", id="invalid_json"),
        pytest.param('{"status": "ok"}', id="no_list"),
        pytest.param('"just a string"', id="scalar"),
    ],
)
def test_load_source_file_bad_content_raises_load_error(tmp_path: Path, content: str) -> None:
    """Test unreadable or list-less files raise LoadError."""
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(LoadError) as exc_info:
        load_source_file(path)

    assert exc_info.value.file == str(path)


# ---------------------------------------------------------------------------
# normalize_source
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_normalize_source_drops_blank_titles(sources_dir: Path) -> None:
    """Test normalize_source returns SourceRecords and skips malformed raws."""
    records = normalize_source("scholar", load_source_file(sources_dir / "scholar.json"))

    assert len(records) == 5
    assert all(isinstance(rec, SourceRecord) for rec in records)
    assert records[2].citation_count == 163


# ---------------------------------------------------------------------------
# aggregate_files
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_aggregate_files_counts_normalization_drops(sources_dir: Path) -> None:
    """Test drops during normalization reach the per-source counters."""
    result = aggregate_files(
        {"scholar": sources_dir / "scholar.json", "crossref": sources_dir / "crossref.json"}
    )

    assert result.summary.per_source["scholar"].dropped == 1
    assert result.summary.records_dropped == 1
    assert result.summary.sources_processed == ["scholar", "crossref"]


@pytest.mark.unit
def test_aggregate_files_explicit_order(sources_dir: Path) -> None:
    """Test an explicit order decides which title is kept."""
    paths = {"scholar": sources_dir / "scholar.json", "crossref": sources_dir / "crossref.json"}

    result = aggregate_files(paths, source_order=["crossref", "scholar"])

    titles = {pub.doi: pub.title for pub in result.publications}
    assert titles["10.1111/jcom.12085"] == (
        "Second Screen and Participation: A Content Analysis on a Full Season Dataset of Tweets"
    )
    assert result.summary.sources_processed == ["crossref", "scholar"]


@pytest.mark.unit
def test_aggregate_files_with_config(sources_dir: Path) -> None:
    """Test a config without explicit order uses the config's order."""
    config = AggregationConfig(source_order=["scholar"])

    result = aggregate_files(
        {"scholar": sources_dir / "scholar.json", "crossref": sources_dir / "crossref.json"},
        config=config,
    )

    assert result.summary.sources_processed == ["scholar"]
    assert result.summary.skipped_sources == ["crossref"]


@pytest.mark.unit
def test_aggregate_files_nonexistent_raises_error(tmp_path: Path) -> None:
    """Test aggregate_files raises for a missing source file."""
    with pytest.raises(FileNotFoundError):
        aggregate_files({"scholar": tmp_path / "missing.json"})


# ---------------------------------------------------------------------------
# write_json / write_jsonl
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_write_json_creates_file(sources_dir: Path, tmp_path: Path) -> None:
    """Test write_json writes the result with its schema version."""
    result = aggregate_files({"scholar": sources_dir / "scholar.json"})
    output = tmp_path / "nested" / "result.json"

    write_json(result, output)

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["schema_version"] == "1.0.0"
    assert len(data["publications"]) == 5
    assert data["metrics"]["total_citations"] == 860


@pytest.mark.unit
def test_write_jsonl_creates_file(sources_dir: Path, tmp_path: Path) -> None:
    """Test write_jsonl writes one sorted-key object per record."""
    records = normalize_source("crossref", load_source_file(sources_dir / "crossref.json"))
    output = tmp_path / "crossref.jsonl"

    count = write_jsonl(records, output)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert count == len(lines) == 2
    first = json.loads(lines[0])
    assert list(first) == sorted(first)
    assert first["doi"] == "10.1111/jcom.12085"
    assert SourceRecord.from_dict(first) == records[0]
