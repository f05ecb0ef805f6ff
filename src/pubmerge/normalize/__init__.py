"""Normalization of raw source records.

Main Components
---------------
- normalize / normalize_records: raw record -> SourceRecord
- ADAPTERS: per-source raw-shape adapters
- normalize_doi / normalize_title: matching-key normalizers
- dedupe_source_records: within-source duplicate removal
"""

from .adapters import ADAPTERS, get_adapter
from .dedupe import dedupe_source_records
from .doi import find_doi, normalize_doi
from .normalizer import normalize, normalize_records
from .title import normalize_title

__all__ = [
    "ADAPTERS",
    "get_adapter",
    "dedupe_source_records",
    "find_doi",
    "normalize_doi",
    "normalize",
    "normalize_records",
    "normalize_title",
]
