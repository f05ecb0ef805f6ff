"""Shared data types for pubmerge.

This package contains the record dataclasses and source identifiers
consumed across the engine.

Domain-specific types live closer to their consumers:
- Merge policy types → pubmerge.merge.policy
- Metrics types → pubmerge.metrics.models
- Run summary types → pubmerge.engine.models
"""

from pubmerge.models.records import (
    EXTRA_FIELDS,
    SCHEMA_VERSION,
    CanonicalPublication,
    PublicationMetrics,
    SourceRecord,
)
from pubmerge.models.sources import AUTHORITATIVE_SOURCE, DEFAULT_SOURCE_ORDER, Source

__all__ = [
    # Schema version
    "SCHEMA_VERSION",
    # Record models
    "SourceRecord",
    "CanonicalPublication",
    "PublicationMetrics",
    "EXTRA_FIELDS",
    # Sources
    "Source",
    "DEFAULT_SOURCE_ORDER",
    "AUTHORITATIVE_SOURCE",
]
