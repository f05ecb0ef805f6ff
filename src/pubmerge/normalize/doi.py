"""DOI normalization."""

from urllib.parse import unquote, urlparse

from ._helpers import DOI_BARE_RE, DOI_URL_RE, as_list, dc_text

_DOI_PREFIXES = ("doi:", "doi.org/", "dx.doi.org/")


def normalize_doi(doi: str | None) -> str | None:
    """Normalize a DOI string for use as a matching key.

    Strips URL and ``doi:`` prefixes, URL-decodes, trims trailing
    citation punctuation and casefolds.

    Parameters
    ----------
    doi : str | None
        Raw DOI, DOI URL, or None.

    Returns
    -------
    str | None
        Normalized DOI (always starting with "10."), or None if invalid.
    """
    if not doi or not isinstance(doi, str):
        return None

    doi = doi.strip()

    # Extract from URL
    if doi.startswith(("http://", "https://")):
        try:
            parsed = urlparse(doi)
        except ValueError:
            return None
        doi = parsed.path.lstrip("/")

    # Remove prefixes
    for prefix in _DOI_PREFIXES:
        if doi.casefold().startswith(prefix):
            doi = doi[len(prefix) :].strip()
            break

    # URL-decode encoded characters (%2F → /, %28 → (, etc.)
    doi = unquote(doi)

    # Parentheses/brackets are valid DOI characters, keep them
    doi = doi.rstrip(".,;").strip()

    doi = doi.casefold()

    if not doi.startswith("10."):
        return None

    return doi


def find_doi(identifiers: object) -> str | None:
    """Find the first DOI among free-form identifier values.

    Accepts DOI URLs and bare ``10.xxxx/`` identifiers, as found in
    Dublin Core ``dc:identifier`` lists.

    Parameters
    ----------
    identifiers : object
        A single identifier or a list of them.

    Returns
    -------
    str | None
        Normalized DOI or None.
    """
    for item in as_list(identifiers):
        text = dc_text(item)
        if not text:
            continue
        match = DOI_URL_RE.search(text)
        if match:
            return normalize_doi(match.group(1))
        if DOI_BARE_RE.match(text):
            return normalize_doi(text)
    return None
