"""Source record normalization entry points."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pubmerge.errors import MalformedRecordError
from pubmerge.models import SourceRecord

from .adapters import get_adapter

if TYPE_CHECKING:
    from pubmerge.audit.logger import AuditLogger

__all__ = ["normalize", "normalize_records"]


def normalize(source: str, raw: Mapping[str, Any]) -> SourceRecord:
    """Normalize one raw record from a named source.

    Parameters
    ----------
    source : str
        Source name. Unknown names use the generic adapter.
    raw : Mapping[str, Any]
        Raw record in the source's native shape.

    Returns
    -------
    SourceRecord
        Normalized record.

    Raises
    ------
    MalformedRecordError
        If the raw record is not a mapping or has no title.
    """
    if not isinstance(raw, Mapping):
        raise MalformedRecordError(
            f"{source} record is {type(raw).__name__}, expected an object",
            source=source,
        )
    return get_adapter(source)(raw)


def normalize_records(
    source: str,
    raws: Iterable[Mapping[str, Any]],
    logger: "AuditLogger | None" = None,
) -> tuple[list[SourceRecord], int]:
    """Normalize a batch of raw records, dropping malformed ones.

    Each dropped record is reported as a ``record_dropped`` WARN event.

    Parameters
    ----------
    source : str
        Source name.
    raws : Iterable[Mapping[str, Any]]
        Raw records.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    tuple[list[SourceRecord], int]
        (normalized records in input order, number dropped).
    """
    records: list[SourceRecord] = []
    dropped = 0

    for index, raw in enumerate(raws):
        try:
            records.append(normalize(source, raw))
        except MalformedRecordError as e:
            dropped += 1
            if logger:
                logger.record_dropped(source=source, index=index, reason=e.message)

    return records, dropped
