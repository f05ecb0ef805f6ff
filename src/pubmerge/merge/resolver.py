"""Merge resolver: fold a SourceRecord into a CanonicalPublication."""

from collections.abc import Mapping
from typing import Any

from pubmerge.models import (
    AUTHORITATIVE_SOURCE,
    EXTRA_FIELDS,
    CanonicalPublication,
    SourceRecord,
)

from .policy import CORE_FIELDS, DEFAULT_FIELD_POLICIES, FieldPolicy

__all__ = ["merge_into", "new_publication"]

# Canonical slot -> SourceRecord attribute
_SLOT_SOURCES = {
    "citations": "citation_count",
    "source_urls": "source_url",
    "source_ids": "source_id",
}


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def _get(publication: CanonicalPublication, name: str) -> Any:
    if name in EXTRA_FIELDS:
        return publication.extra.get(name)
    return getattr(publication, name)


def _set(publication: CanonicalPublication, name: str, value: Any) -> None:
    if name in EXTRA_FIELDS:
        publication.extra[name] = value
    else:
        setattr(publication, name, value)


def _should_take(
    policy: FieldPolicy,
    current: Any,
    incoming: Any,
    is_authoritative: bool,
) -> bool:
    if _is_empty(incoming) or current == incoming:
        return False
    if policy is FieldPolicy.ALWAYS_OVERWRITE:
        return True
    if policy is FieldPolicy.LONGER_WINS:
        return _is_empty(current) or len(str(incoming)) > len(str(current))
    if policy is FieldPolicy.AUTHORITATIVE_OVERWRITE and is_authoritative:
        return True
    return _is_empty(current)


def new_publication(record: SourceRecord, source: str) -> CanonicalPublication:
    """Create a canonical publication from its first source record.

    Parameters
    ----------
    record : SourceRecord
        First record seen for the work.
    source : str
        Source name; the only per-source slot populated.

    Returns
    -------
    CanonicalPublication
        New canonical publication.
    """
    extra = {
        name: getattr(record, name)
        for name in EXTRA_FIELDS
        if not _is_empty(getattr(record, name))
    }
    if "fields_of_study" in extra:
        extra["fields_of_study"] = list(extra["fields_of_study"])

    return CanonicalPublication(
        title=record.title,
        authors=record.authors,
        venue=record.venue,
        year=record.year,
        month=record.month,
        day=record.day,
        doi=record.doi,
        citations={source: record.citation_count},
        source_urls={source: record.source_url},
        source_ids={source: record.source_id},
        extra=extra,
        sources=[source],
    )


def merge_into(
    publication: CanonicalPublication,
    record: SourceRecord,
    source: str,
    policies: Mapping[str, FieldPolicy] = DEFAULT_FIELD_POLICIES,
    authoritative_source: str = AUTHORITATIVE_SOURCE,
) -> list[str]:
    """Merge a source record into a canonical publication in place.

    The source's citation, URL and id slots are always written. Every
    other field follows its policy from ``policies``; fields missing from
    the table fall back to FIRST_WINS.

    Parameters
    ----------
    publication : CanonicalPublication
        Publication to update.
    record : SourceRecord
        Incoming record.
    source : str
        Source name of the record.
    policies : Mapping[str, FieldPolicy], optional
        Field policy table.
    authoritative_source : str, optional
        Source allowed to overwrite AUTHORITATIVE_OVERWRITE fields.

    Returns
    -------
    list[str]
        Names of the fields that changed (slots excluded).
    """
    for slot, attribute in _SLOT_SOURCES.items():
        getattr(publication, slot)[source] = getattr(record, attribute)
    if source not in publication.sources:
        publication.sources.append(source)

    is_authoritative = source == authoritative_source
    changed: list[str] = []

    for name in CORE_FIELDS + EXTRA_FIELDS:
        policy = policies.get(name, FieldPolicy.FIRST_WINS)
        current = _get(publication, name)
        incoming = getattr(record, name)
        if _should_take(policy, current, incoming, is_authoritative):
            _set(publication, name, list(incoming) if isinstance(incoming, list) else incoming)
            changed.append(name)

    return changed

