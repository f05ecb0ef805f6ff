"""Cross-source aggregation of scholarly publication lists.

This package provides:
- Data models (pubmerge.models): source records and canonical publications
- Normalization (pubmerge.normalize): per-source adapters, DOI/title keys
- Matching (pubmerge.matching): key index and title similarity
- Merge (pubmerge.merge): field policies and merge resolver
- Metrics (pubmerge.metrics): citation totals, h-index, i10-index
- Engine (pubmerge.engine): source processing and aggregation
- Audit (pubmerge.audit): structured JSONL event logging
- CLI (pubmerge.cli): command-line interface
- Public API (pubmerge.api): high-level convenience functions
"""

__version__ = "0.3.0"
__license__ = "MIT"

from pubmerge.api import (
    LoadError,
    aggregate_files,
    load_source_file,
    normalize_source,
    write_json,
    write_jsonl,
)
from pubmerge.engine import AggregationConfig, AggregationResult, aggregate
from pubmerge.errors import MalformedRecordError, PubmergeError
from pubmerge.models import CanonicalPublication, SourceRecord
from pubmerge.normalize import normalize

__all__ = [
    "__version__",
    "__license__",
    "AggregationConfig",
    "AggregationResult",
    "CanonicalPublication",
    "LoadError",
    "MalformedRecordError",
    "PubmergeError",
    "SourceRecord",
    "aggregate",
    "aggregate_files",
    "load_source_file",
    "normalize",
    "normalize_source",
    "write_json",
    "write_jsonl",
]
