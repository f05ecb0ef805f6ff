"""Tests for schema validation of audit events and aggregation results."""

import json
from collections.abc import Callable
from pathlib import Path

import jsonschema
import pytest

from pubmerge import write_json
from pubmerge.audit import AuditLogger
from pubmerge.engine import aggregate
from pubmerge.models import SourceRecord

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


@pytest.fixture(scope="module")
def result_schema() -> dict:
    """Load aggregation result JSON schema."""
    with (_SCHEMAS_DIR / "aggregation_result.schema.json").open() as f:
        return json.load(f)


@pytest.fixture
def records_by_source(
    make_record: Callable[..., SourceRecord],
) -> dict[str, list[SourceRecord]]:
    """Records that exercise insert, merge, rekey and skip paths."""
    return {
        "scholar": [
            make_record("It takes a village", citation_count=10, source_id="S:1"),
            make_record(""),
        ],
        "crossref": [
            make_record(
                "It Takes a Village",
                source="crossref",
                doi="10.1080/v",
                month=3,
                abstract="An abstract.",
            ),
        ],
        "dblp": [make_record("Outside the order", source="dblp")],
    }


@pytest.mark.unit
def test_generated_events_validate(
    tmp_path: Path,
    event_schema: dict,
    records_by_source: dict,
) -> None:
    """Test programmatically generated events validate against schema."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="test-run", log_path=log_path) as logger:
        logger.run_started(command=["pubmerge", "aggregate"], parameters={})
        aggregate(records_by_source, ["scholar", "crossref"], logger=logger)
        logger.error("RuntimeError", "boom", stage="scholar")
        logger.run_finished(status="success", duration_seconds=0.01, publications=1)

    with log_path.open() as f:
        events = [json.loads(line) for line in f if line.strip()]

    for event in events:
        jsonschema.validate(instance=event, schema=event_schema)

    names = {e["event"] for e in events}
    assert {"source_skipped", "record_dropped", "record_rekeyed", "metrics_computed"} <= names


@pytest.mark.unit
def test_written_result_validates(
    tmp_path: Path,
    result_schema: dict,
    records_by_source: dict,
) -> None:
    """Test write_json output validates against the result schema."""
    result = aggregate(records_by_source, ["scholar", "crossref"])
    output = tmp_path / "out" / "result.json"

    write_json(result, output)

    with output.open() as f:
        data = json.load(f)
    jsonschema.validate(instance=data, schema=result_schema)
    assert data["publications"][0]["doi"] == "10.1080/v"
    assert data["publications"][0]["extra"] == {"abstract": "An abstract."}


@pytest.mark.unit
def test_invalid_data_rejected_by_schema(event_schema: dict, result_schema: dict) -> None:
    """Test schemas reject invalid levels, keys and missing fields."""
    envelope = {"ts": "2026-01-01T00:00:00Z", "run_id": "x", "stage": None}

    # Missing required event fields
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance={"ts": "x", "run_id": "x"}, schema=event_schema)

    # Unknown level
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={**envelope, "level": "TRACE", "event": "x", "data": {}},
            schema=event_schema,
        )

    # Re-keying must land on a DOI key
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={
                **envelope,
                "level": "INFO",
                "event": "record_rekeyed",
                "data": {"source": "crossref", "old_key": "title:a", "new_key": "title:b"},
            },
            schema=event_schema,
        )

    # Negative citation count
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={
                "schema_version": "1.0.0",
                "publications": [
                    {
                        "title": "T",
                        "authors": None,
                        "venue": None,
                        "year": None,
                        "month": None,
                        "day": None,
                        "doi": None,
                        "citations": {"scholar": -1},
                        "source_urls": {},
                        "source_ids": {},
                        "extra": {},
                        "sources": ["scholar"],
                        "metrics": {"total_citations": 0, "citation_sources": 0},
                    }
                ],
                "metrics": {
                    "total_publications": 1,
                    "total_citations": 0,
                    "h_index": 0,
                    "i10_index": 0,
                    "coverage": {},
                    "citation_coverage": {},
                },
                "summary": {
                    "sources_processed": [],
                    "failed_sources": [],
                    "skipped_sources": [],
                    "records_in_total": 0,
                    "records_dropped": 0,
                    "duplicates_removed": 0,
                    "records_merged": 0,
                    "publications_inserted": 0,
                    "rekeyed": 0,
                    "per_source": {},
                    "timestamp": "",
                },
            },
            schema=result_schema,
        )
