"""Record data models for pubmerge.

This module defines the two record shapes the engine works with:
``SourceRecord`` (one normalized record per source per work) and
``CanonicalPublication`` (the merged representation of one work across
all sources).
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any

# Schema version constant
SCHEMA_VERSION = "1.0.0"


@dataclass(frozen=True)
class SourceRecord:
    """Normalized bibliographic record produced by a source adapter.

    All fields except ``source`` and ``title`` may be None when the source
    does not expose them.

    Attributes
    ----------
    source : str
        Source name (e.g., 'orcid', 'crossref').
    title : str
        Original title as supplied by the source.
    authors : str | None
        Author string in the source's own formatting.
    venue : str | None
        Journal, book or conference name.
    year : int | None
        Publication year.
    month : int | None
        Publication month (1-12).
    day : int | None
        Publication day of month.
    doi : str | None
        Normalized DOI.
    citation_count : int | None
        Citation count reported by the source.
    source_id : str | None
        Source-specific record identifier.
    source_url : str | None
        Source-specific landing page.
    influential_citations : int | None
        Influential citation count (semantic graph sources).
    is_open_access : bool | None
        Open access flag.
    open_access_url : str | None
        Open access PDF URL.
    fields_of_study : list[str] | None
        Field-of-study tags.
    abstract : str | None
        Abstract text.
    handle : str | None
        Institutional repository handle.
    publisher : str | None
        Publisher name.
    publication_type : str | None
        Publication type as reported by the source.
    language : str | None
        Publication language.
    """

    source: str
    title: str
    authors: str | None = None
    venue: str | None = None
    year: int | None = None
    month: int | None = None
    day: int | None = None
    doi: str | None = None
    citation_count: int | None = None
    source_id: str | None = None
    source_url: str | None = None
    influential_citations: int | None = None
    is_open_access: bool | None = None
    open_access_url: str | None = None
    fields_of_study: list[str] | None = None
    abstract: str | None = None
    handle: str | None = None
    publisher: str | None = None
    publication_type: str | None = None
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceRecord":
        """Create SourceRecord from dictionary, ignoring unknown keys.

        Parameters
        ----------
        data : dict[str, Any]
            Dictionary representation.

        Returns
        -------
        SourceRecord
            Reconstructed record.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# Fields copied from a SourceRecord into CanonicalPublication.extra
EXTRA_FIELDS: tuple[str, ...] = (
    "abstract",
    "is_open_access",
    "open_access_url",
    "fields_of_study",
    "influential_citations",
    "handle",
    "publication_type",
    "publisher",
    "language",
)


@dataclass
class PublicationMetrics:
    """Derived per-publication citation metrics.

    Attributes
    ----------
    total_citations : int
        Best citation estimate (max across sources).
    citation_sources : int
        Number of sources reporting a citation count.
    """

    total_citations: int = 0
    citation_sources: int = 0


@dataclass
class CanonicalPublication:
    """Merged representation of one scholarly work.

    Instances are owned by the key index and mutated in place by the
    merge resolver for the remainder of a run.

    Attributes
    ----------
    title : str
        Title from the first source that saw the work.
    authors : str | None
        Author string.
    venue : str | None
        Venue name.
    year : int | None
        Publication year.
    month : int | None
        Publication month.
    day : int | None
        Publication day.
    doi : str | None
        Normalized DOI.
    citations : dict[str, int | None]
        Citation count per source.
    source_urls : dict[str, str | None]
        Landing page per source.
    source_ids : dict[str, str | None]
        Record identifier per source.
    extra : dict[str, Any]
        Source-specific extra fields (abstract, open access, ...).
    sources : list[str]
        Contributing sources in processing order.
    metrics : PublicationMetrics
        Derived metrics, filled by the metrics calculator.
    """

    title: str
    authors: str | None = None
    venue: str | None = None
    year: int | None = None
    month: int | None = None
    day: int | None = None
    doi: str | None = None
    citations: dict[str, int | None] = field(default_factory=dict)
    source_urls: dict[str, str | None] = field(default_factory=dict)
    source_ids: dict[str, str | None] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    sources: list[str] = field(default_factory=list)
    metrics: PublicationMetrics = field(default_factory=PublicationMetrics)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Dictionary representation.
        """
        return asdict(self)
