"""Known bibliographic sources and their default precedence."""

from enum import StrEnum


class Source(StrEnum):
    """Bibliographic sources with a dedicated adapter.

    Attributes
    ----------
    ORCID : str
        Researcher identity registry.
    SCHOLAR : str
        Search-engine profile scrape.
    ORA : str
        Institutional repository (OAI-PMH Dublin Core).
    WOS : str
        Web of Science citation index.
    SCOPUS : str
        Scopus citation index.
    CROSSREF : str
        DOI registration authority.
    SEMANTIC_SCHOLAR : str
        Semantic graph API.
    """

    ORCID = "orcid"
    SCHOLAR = "scholar"
    ORA = "ora"
    WOS = "wos"
    SCOPUS = "scopus"
    CROSSREF = "crossref"
    SEMANTIC_SCHOLAR = "semantic_scholar"


# Identity registry first, DOI authority as overlay, semantic graph last
DEFAULT_SOURCE_ORDER: tuple[str, ...] = (
    Source.ORCID.value,
    Source.SCHOLAR.value,
    Source.ORA.value,
    Source.WOS.value,
    Source.SCOPUS.value,
    Source.CROSSREF.value,
    Source.SEMANTIC_SCHOLAR.value,
)

AUTHORITATIVE_SOURCE = Source.CROSSREF.value
