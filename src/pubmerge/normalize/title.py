"""Title normalization."""

from ._helpers import normalize_text_for_matching


def normalize_title(title: str | None) -> str:
    """Normalize a title for matching.

    Lower-cases (casefold), strips accents and punctuation, and collapses
    whitespace. Missing titles normalize to the empty string.

    Parameters
    ----------
    title : str | None
        Raw title.

    Returns
    -------
    str
        Normalized title.
    """
    if not title:
        return ""
    return normalize_text_for_matching(title)
