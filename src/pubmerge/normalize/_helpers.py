"""Helper functions and compiled regex patterns for normalization.

This module provides reusable utilities shared by the source adapters
and the title/DOI normalizers.
"""

import re
import unicodedata
from collections.abc import Mapping
from typing import Any

# Pre-compiled regex patterns
DOI_URL_RE = re.compile(r"(?:doi\.org|dx\.doi\.org)/([^\s?#]+)", re.IGNORECASE)
DOI_BARE_RE = re.compile(r"^10\.\d+/")
YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
DIGITS_RE = re.compile(r"\d+")
NON_WORD_RE = re.compile(r"[\W_]+")


# ---------------------------------------------------------------------------
# Text normalization functions
# ---------------------------------------------------------------------------


def strip_accents(text: str) -> str:
    """Remove diacritical marks for cross-locale matching.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def normalize_text_for_matching(text: str) -> str:
    """Full text normalization for record matching.

    Applies NFKC, casefold, accent stripping, punctuation removal,
    and whitespace collapsing.

    Parameters
    ----------
    text : str
        Raw text to normalize.

    Returns
    -------
    str
        Normalized text ready for matching.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.casefold()
    text = strip_accents(text)
    text = NON_WORD_RE.sub(" ", text)
    return " ".join(text.split())


def clean_text(value: Any) -> str | None:
    """Collapse whitespace in a scalar value; blank becomes None."""
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def to_int(value: Any) -> int | None:
    """Coerce a loosely typed count or date part to int.

    Strings keep only their first run of digits, so scraped values such
    as "402*" parse as 402. Booleans are rejected.

    Parameters
    ----------
    value : Any
        Raw value.

    Returns
    -------
    int | None
        Parsed integer or None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = DIGITS_RE.search(str(value))
    return int(match.group(0)) if match else None


def extract_year(value: Any) -> int | None:
    """Extract a four-digit year from an int or date-like string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    match = YEAR_RE.search(str(value))
    return int(match.group(0)) if match else None


def to_bool(value: Any) -> bool | None:
    """Coerce common truthy/falsy encodings to bool."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().casefold()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
        return None
    return bool(value)


# ---------------------------------------------------------------------------
# Nested lookup
# ---------------------------------------------------------------------------


def dig(data: Any, *path: str | int) -> Any:
    """Follow a path of keys/indices through nested dicts and lists.

    Parameters
    ----------
    data : Any
        Root object.
    *path : str | int
        Keys (for mappings) or indices (for lists).

    Returns
    -------
    Any
        Value at path, or None if any step is missing.
    """
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, Mapping):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def as_list(value: Any) -> list[Any]:
    """Wrap scalars in a list; None becomes an empty list."""
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def dc_text(value: Any) -> str | None:
    """Text of a Dublin Core element (plain string or ``{"_": text}``)."""
    if isinstance(value, Mapping):
        value = value.get("_")
    return clean_text(value)
