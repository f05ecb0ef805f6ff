"""Source processor: fold one source's records into the key index."""

from collections.abc import Sequence

from pubmerge.audit.logger import AuditLogger
from pubmerge.matching.key_index import DOI_PREFIX, KeyIndex
from pubmerge.merge.resolver import merge_into, new_publication
from pubmerge.models import SourceRecord
from pubmerge.normalize.dedupe import dedupe_source_records
from pubmerge.normalize.doi import normalize_doi
from pubmerge.normalize.title import normalize_title

from .config import AggregationConfig
from .models import SourceStats

__all__ = ["process_source"]


def process_source(
    index: KeyIndex,
    source: str,
    records: Sequence[SourceRecord],
    config: AggregationConfig | None = None,
    logger: AuditLogger | None = None,
    stats: SourceStats | None = None,
) -> SourceStats:
    """Match and merge one source's records into the index.

    Records are first deduplicated within the source. Each survivor is
    then merged into its matching publication, or inserted as a new one.
    A title-keyed publication that gains a DOI is re-keyed so that later
    DOI-bearing sources find it by DOI.

    Parameters
    ----------
    index : KeyIndex
        Index of canonical publications, mutated in place.
    source : str
        Source name; selects the per-source slots written.
    records : Sequence[SourceRecord]
        Normalized records from the source.
    config : AggregationConfig | None, optional
        Aggregation configuration. Uses defaults if None.
    logger : AuditLogger | None, optional
        Audit logger.
    stats : SourceStats | None, optional
        Counters to update. Counters stay valid if processing raises
        part-way through.

    Returns
    -------
    SourceStats
        Counters for this pass.
    """
    if config is None:
        config = AggregationConfig()
    if stats is None:
        stats = SourceStats()

    policies = config.policies
    stats.received = len(records)

    keyed: list[SourceRecord] = []
    for position, record in enumerate(records):
        if normalize_doi(record.doi) or normalize_title(record.title):
            keyed.append(record)
            continue
        stats.dropped += 1
        if logger:
            logger.record_dropped(source=source, index=position, reason="record has no title")

    unique, stats.duplicates_removed = dedupe_source_records(keyed)

    for record in unique:
        match = index.find_match(record)

        if match is None:
            key = index.key_for(record)
            index.insert(key, new_publication(record, source))
            stats.inserted += 1
            if logger:
                logger.record_inserted(source=source, key=key, title=record.title)
            continue

        key, publication = match
        changed = merge_into(
            publication,
            record,
            source,
            policies=policies,
            authoritative_source=config.authoritative_source,
        )
        stats.merged += 1
        if logger:
            logger.record_matched(source=source, key=key, title=record.title, changed_fields=changed)

        new_key = index.key_for(publication)
        if new_key != key and new_key.startswith(DOI_PREFIX):
            index.rekey(key, new_key)
            stats.rekeyed += 1
            if logger:
                logger.record_rekeyed(source=source, old_key=key, new_key=new_key)

    return stats
