"""Run summary models for aggregation."""

from dataclasses import asdict, dataclass, field
from typing import Any

__all__ = ["AggregationSummary", "SourceStats"]


@dataclass
class SourceStats:
    """Counters for one source pass.

    Attributes
    ----------
    received : int
        Records handed to the processor.
    dropped : int
        Records dropped as malformed (during normalization or for lacking
        any matching key).
    duplicates_removed : int
        Within-source duplicates collapsed before matching.
    merged : int
        Records merged into an existing publication.
    inserted : int
        Records that created a new publication.
    rekeyed : int
        Publications moved from a title key to a DOI key.
    """

    received: int = 0
    dropped: int = 0
    duplicates_removed: int = 0
    merged: int = 0
    inserted: int = 0
    rekeyed: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class AggregationSummary:
    """Summary statistics for an aggregation run.

    Attributes
    ----------
    sources_processed : list[str]
        Sources processed to completion, in processing order.
    failed_sources : list[str]
        Sources whose pass raised; their contribution is partial at most.
    skipped_sources : list[str]
        Sources with records but absent from the processing order.
    records_in_total : int
        Records received across processed sources.
    records_dropped : int
        Malformed records dropped.
    duplicates_removed : int
        Within-source duplicates collapsed.
    records_merged : int
        Records merged into existing publications.
    publications_inserted : int
        Publications created.
    rekeyed : int
        Title-keyed publications re-keyed to a DOI.
    per_source : dict[str, SourceStats]
        Counters per source.
    timestamp : str
        ISO-8601 timestamp of the run.
    """

    sources_processed: list[str] = field(default_factory=list)
    failed_sources: list[str] = field(default_factory=list)
    skipped_sources: list[str] = field(default_factory=list)
    records_in_total: int = 0
    records_dropped: int = 0
    duplicates_removed: int = 0
    records_merged: int = 0
    publications_inserted: int = 0
    rekeyed: int = 0
    per_source: dict[str, SourceStats] = field(default_factory=dict)
    timestamp: str = ""

    def add(self, source: str, stats: SourceStats) -> None:
        """Fold one source's counters into the totals."""
        self.per_source[source] = stats
        self.records_in_total += stats.received
        self.records_dropped += stats.dropped
        self.duplicates_removed += stats.duplicates_removed
        self.records_merged += stats.merged
        self.publications_inserted += stats.inserted
        self.rekeyed += stats.rekeyed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Dictionary representation.
        """
        return asdict(self)
