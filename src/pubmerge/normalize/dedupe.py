"""Within-source duplicate removal.

Some sources list the same work more than once (an identity registry may
hold one entry per claiming organization, for example). Duplicates are
collapsed here, before any cross-source matching, so that a source never
merges into its own slot twice.
"""

from collections.abc import Iterable

from pubmerge.models import SourceRecord

from .doi import normalize_doi
from .title import normalize_title

__all__ = ["dedupe_source_records"]


def dedupe_source_records(
    records: Iterable[SourceRecord],
) -> tuple[list[SourceRecord], int]:
    """Collapse duplicate records within one source.

    Two records are duplicates when they share a DOI, or when their
    normalized titles are equal and at most one of them carries a DOI.
    Of a duplicate pair the version with a DOI is kept; otherwise the
    first one wins. Survivors keep the position of the first occurrence.

    Parameters
    ----------
    records : Iterable[SourceRecord]
        Records from a single source, in input order.

    Returns
    -------
    tuple[list[SourceRecord], int]
        (deduplicated records, number of duplicates removed).
    """
    kept: list[SourceRecord] = []
    by_doi: dict[str, int] = {}
    by_title: dict[str, int] = {}
    removed = 0

    for record in records:
        title_key = normalize_title(record.title)
        doi = normalize_doi(record.doi)

        if doi and doi in by_doi:
            removed += 1
            continue

        position = by_title.get(title_key) if title_key else None
        if position is not None:
            existing = kept[position]
            if not normalize_doi(existing.doi):
                if doi:
                    kept[position] = record
                    by_doi[doi] = position
                removed += 1
                continue
            if not doi:
                removed += 1
                continue
            # Same title, different DOIs: distinct works

        kept.append(record)
        if doi:
            by_doi[doi] = len(kept) - 1
        if title_key and title_key not in by_title:
            by_title[title_key] = len(kept) - 1

    return kept, removed
