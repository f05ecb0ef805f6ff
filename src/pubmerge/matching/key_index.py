"""Key index of canonical publications.

Every canonical publication is stored under exactly one key: ``doi:<doi>``
once its DOI is known, ``title:<normalized title>`` before that. DOIs are
normalized on the way in, so case and URL variants share one key. Lookup
tries the DOI key first and falls back to a linear scan with the title
matcher, in insertion order, so results are deterministic.
"""

from collections.abc import Iterator
from typing import Protocol

from pubmerge.models import CanonicalPublication
from pubmerge.normalize.doi import normalize_doi
from pubmerge.normalize.title import normalize_title

from .similarity import DEFAULT_THRESHOLDS, TitleMatchThresholds, is_similar_title

__all__ = ["DOI_PREFIX", "TITLE_PREFIX", "KeyIndex", "Keyable", "key_for"]

DOI_PREFIX = "doi:"
TITLE_PREFIX = "title:"


class Keyable(Protocol):
    """Anything with a title and an optional DOI."""

    title: str
    doi: str | None


def key_for(record: Keyable) -> str:
    """Compute the index key of a record or publication.

    Parameters
    ----------
    record : Keyable
        SourceRecord or CanonicalPublication.

    Returns
    -------
    str
        ``doi:<normalized doi>`` if a valid DOI is present, else
        ``title:<normalized title>``.
    """
    doi = normalize_doi(record.doi)
    if doi:
        return f"{DOI_PREFIX}{doi}"
    return f"{TITLE_PREFIX}{normalize_title(record.title)}"


class KeyIndex:
    """Insertion-ordered mapping of keys to canonical publications.

    Not thread-safe; one index belongs to one aggregation run.

    Parameters
    ----------
    thresholds : TitleMatchThresholds, optional
        Title matcher thresholds used by ``find_match``.
    """

    def __init__(self, thresholds: TitleMatchThresholds = DEFAULT_THRESHOLDS) -> None:
        self.thresholds = thresholds
        self._entries: dict[str, CanonicalPublication] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CanonicalPublication]:
        return iter(self._entries.values())

    def items(self) -> Iterator[tuple[str, CanonicalPublication]]:
        """Iterate (key, publication) pairs in insertion order."""
        return iter(self._entries.items())

    def get(self, key: str) -> CanonicalPublication | None:
        """Return the publication stored under key, if any."""
        return self._entries.get(key)

    key_for = staticmethod(key_for)

    def find_match(self, record: Keyable) -> tuple[str, CanonicalPublication] | None:
        """Find the canonical publication a record belongs to.

        Parameters
        ----------
        record : Keyable
            Incoming record.

        Returns
        -------
        tuple[str, CanonicalPublication] | None
            (key, publication) of the first match, or None.
        """
        doi = normalize_doi(record.doi)
        if doi:
            key = f"{DOI_PREFIX}{doi}"
            existing = self._entries.get(key)
            if existing is not None:
                return key, existing

        for key, publication in self._entries.items():
            if is_similar_title(record.title, publication.title, self.thresholds):
                return key, publication

        return None

    def insert(self, key: str, publication: CanonicalPublication) -> None:
        """Store a new publication.

        Raises
        ------
        ValueError
            If the key is already taken.
        """
        if key in self._entries:
            raise ValueError(f"Key already indexed: {key}")
        self._entries[key] = publication

    def rekey(self, old_key: str, new_key: str) -> None:
        """Move a publication to a new key, keeping its position.

        Raises
        ------
        KeyError
            If ``old_key`` is not indexed.
        ValueError
            If ``new_key`` is already taken by another publication.
        """
        if old_key not in self._entries:
            raise KeyError(old_key)
        if old_key == new_key:
            return
        if new_key in self._entries:
            raise ValueError(f"Key already indexed: {new_key}")

        self._entries = {
            (new_key if key == old_key else key): publication
            for key, publication in self._entries.items()
        }
