"""Public API for aggregating publication lists.

This module provides the main public API for pubmerge, enabling:
- Loading collector output files into raw record lists
- Normalizing raw records into SourceRecord objects
- Running the aggregation over files
- Exporting results to JSON / JSONL
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pubmerge.engine.aggregator import aggregate
from pubmerge.engine.config import AggregationConfig, AggregationResult
from pubmerge.errors import PubmergeError
from pubmerge.models import SourceRecord
from pubmerge.normalize import normalize_records

if TYPE_CHECKING:
    from pubmerge.audit.logger import AuditLogger

__all__ = [
    "LoadError",
    "aggregate_files",
    "load_source_file",
    "normalize_source",
    "write_json",
    "write_jsonl",
]

# Envelope keys under which collectors store their record list
_LIST_KEYS = ("publications", "works", "data", "entry", "group")


class LoadError(PubmergeError):
    """Raised when a source file cannot be read as a record list."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        """Initialize load error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        """
        super().__init__(message)
        self.file = file


def _extract_list(data: Any) -> list[Any] | None:
    if isinstance(data, list):
        return data
    if not isinstance(data, Mapping):
        return None

    for key in _LIST_KEYS:
        if isinstance(data.get(key), list):
            return data[key]

    # Scopus search envelope, Crossref list envelope
    nested = data.get("search-results") or data.get("message")
    if isinstance(nested, Mapping):
        return _extract_list(nested) or (
            nested.get("items") if isinstance(nested.get("items"), list) else None
        )
    return None


def load_source_file(path: str | Path) -> list[dict[str, Any]]:
    """Load a collector output file as a list of raw records.

    The file is JSON: either a bare list, or an object holding the list
    under ``publications``, ``works``, ``data``, ``entry``, ``group``,
    ``search-results.entry`` or ``message.items``.

    Parameters
    ----------
    path : str | Path
        Path to JSON file.

    Returns
    -------
    list[dict[str, Any]]
        Raw records.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    LoadError
        If the file is not valid JSON or holds no record list.

    Examples
    --------
        >>> from pubmerge import load_source_file
        >>> raws = load_source_file("data/scholar.json")
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in {file_path.name}: {e}", file=str(file_path)) from e

    records = _extract_list(data)
    if records is None:
        raise LoadError(f"No record list found in {file_path.name}", file=str(file_path))

    return records


def normalize_source(
    source: str,
    raws: Iterable[Mapping[str, Any]],
    logger: AuditLogger | None = None,
) -> list[SourceRecord]:
    """Normalize raw records from one source, dropping malformed ones.

    Parameters
    ----------
    source : str
        Source name.
    raws : Iterable[Mapping[str, Any]]
        Raw records.
    logger : AuditLogger | None, optional
        Audit logger; receives one ``record_dropped`` event per drop.

    Returns
    -------
    list[SourceRecord]
        Normalized records.
    """
    records, _ = normalize_records(source, raws, logger)
    return records


def aggregate_files(
    paths_by_source: Mapping[str, str | Path],
    source_order: Iterable[str] | None = None,
    config: AggregationConfig | None = None,
    logger: AuditLogger | None = None,
) -> AggregationResult:
    """Load, normalize and aggregate one file per source.

    Parameters
    ----------
    paths_by_source : Mapping[str, str | Path]
        Source name to collector output file.
    source_order : Iterable[str] | None, optional
        Processing order. Defaults to ``config.source_order``.
    config : AggregationConfig | None, optional
        Aggregation configuration. Uses defaults if None.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    AggregationResult
        Aggregation result; ``summary.records_dropped`` includes records
        dropped during normalization.

    Raises
    ------
    FileNotFoundError
        If a file does not exist.
    LoadError
        If a file holds no record list.

    Examples
    --------
        >>> from pubmerge import aggregate_files
        >>> result = aggregate_files({"orcid": "orcid.json", "crossref": "crossref.json"})
        >>> print(result.metrics.h_index)
    """
    if source_order is not None:
        source_order = list(source_order)
    if config is None:
        config = AggregationConfig()
        if source_order is not None:
            config = AggregationConfig(source_order=source_order)
    order = source_order if source_order is not None else config.source_order

    records_by_source: dict[str, list[SourceRecord]] = {}
    dropped_by_source: dict[str, int] = {}
    for source, path in paths_by_source.items():
        records, dropped = normalize_records(source, load_source_file(path), logger)
        records_by_source[source] = records
        dropped_by_source[source] = dropped

    result = aggregate(records_by_source, order, config=config, logger=logger)

    for source, dropped in dropped_by_source.items():
        stats = result.summary.per_source.get(source)
        if stats is not None:
            stats.dropped += dropped
            result.summary.records_dropped += dropped

    return result


def write_json(
    result: AggregationResult,
    path: str | Path,
    *,
    indent: int | None = 2,
) -> None:
    """Write an aggregation result to a JSON file.

    Parameters
    ----------
    result : AggregationResult
        Result to write.
    path : str | Path
        Output file path.
    indent : int | None, optional
        JSON indentation, by default 2.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=indent)
        f.write("\n")


def write_jsonl(
    records: Iterable[SourceRecord],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> int:
    """Write records to JSONL file (one JSON object per line).

    Parameters
    ----------
    records : Iterable[SourceRecord]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.

    Returns
    -------
    int
        Number of records written.
    """
    file_path = Path(path)
    count = 0

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            json_str = json.dumps(
                record.to_dict(),
                ensure_ascii=False,
                sort_keys=sort_keys,
            )
            f.write(json_str + "\n")
            count += 1

    return count
