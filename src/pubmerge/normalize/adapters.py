"""Per-source adapters from raw record shapes to SourceRecord.

Each adapter accepts the record shape its upstream API or scraper emits
(and, where the collector layer flattens it, the flattened shape too).
Adapters are pure and tolerate missing optional fields; the only hard
failure is a record without a derivable title.
"""

import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pubmerge.errors import MalformedRecordError
from pubmerge.models import Source, SourceRecord

from ._helpers import (
    as_list,
    clean_text,
    dc_text,
    dig,
    extract_year,
    to_bool,
    to_int,
)
from .doi import find_doi, normalize_doi
from .title import normalize_title

__all__ = [
    "ADAPTERS",
    "Adapter",
    "adapt_crossref",
    "adapt_generic",
    "adapt_ora",
    "adapt_orcid",
    "adapt_scholar",
    "adapt_scopus",
    "adapt_semantic_scholar",
    "adapt_wos",
]

Adapter = Callable[[Mapping[str, Any]], SourceRecord]

SCHOLAR_CITATION_URL = (
    "https://scholar.google.com/citations?view_op=view_citation&citation_for_view={id}"
)
ORA_HANDLE_URL = "https://ora.uniurb.it/handle/{handle}"
WOS_RECORD_URL = "https://www.webofscience.com/wos/woscc/full-record/{id}"
SEMANTIC_SCHOLAR_PAPER_URL = "https://www.semanticscholar.org/paper/{id}"

OAI_HANDLE_RE = re.compile(r"^oai:[^:]+:(\d+/\d+)$")
MARKUP_TAG_RE = re.compile(r"<[^>]+>")

# Crossref date fields in order of preference
CROSSREF_DATE_FIELDS = (
    "published-print",
    "published-online",
    "created",
    "deposited",
    "indexed",
)


def _require_title(source: str, title: Any) -> str:
    text = clean_text(title)
    if not text or not normalize_title(text):
        raise MalformedRecordError(f"{source} record has no title", source=source)
    return text


def _str_id(value: Any) -> str | None:
    text = clean_text(value)
    return text


def _valid_month(value: Any) -> int | None:
    month = to_int(value)
    return month if month is not None and 1 <= month <= 12 else None


def _valid_day(value: Any) -> int | None:
    day = to_int(value)
    return day if day is not None and 1 <= day <= 31 else None


def _split_iso_date(value: Any) -> tuple[int | None, int | None, int | None]:
    """Split 'YYYY[-MM[-DD]]' into parts."""
    text = clean_text(value)
    if not text:
        return None, None, None
    parts = text.split("T", 1)[0].split("-")
    year = extract_year(parts[0])
    month = _valid_month(parts[1]) if len(parts) > 1 else None
    day = _valid_day(parts[2]) if len(parts) > 2 and month else None
    return year, month, day


# ---------------------------------------------------------------------------
# Identity registry
# ---------------------------------------------------------------------------


def adapt_orcid(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt an ORCID works group or work summary.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Either a works group (``{"work-summary": [...]}``) or a single
        work summary. Only the first summary of a group is used.

    Returns
    -------
    SourceRecord
        Normalized record. ORCID summaries carry no authors or citations.

    Raises
    ------
    MalformedRecordError
        If no title can be found.
    """
    work = raw
    if "work-summary" in raw:
        work = dig(raw, "work-summary", 0) or {}

    title = _require_title(Source.ORCID, dig(work, "title", "title", "value"))

    doi = None
    for ext_id in as_list(dig(work, "external-ids", "external-id")):
        if isinstance(ext_id, Mapping) and ext_id.get("external-id-type") == "doi":
            doi = normalize_doi(ext_id.get("external-id-value"))
            if doi:
                break

    year = extract_year(dig(work, "publication-date", "year", "value"))
    month = _valid_month(dig(work, "publication-date", "month", "value"))
    day = _valid_day(dig(work, "publication-date", "day", "value"))

    return SourceRecord(
        source=Source.ORCID,
        title=title,
        venue=clean_text(dig(work, "journal-title", "value")),
        year=year,
        month=month,
        day=day,
        doi=doi,
        source_id=_str_id(work.get("put-code")),
        source_url=clean_text(dig(work, "url", "value")),
        publication_type=clean_text(work.get("type")),
    )


# ---------------------------------------------------------------------------
# Search-engine profile
# ---------------------------------------------------------------------------


def adapt_scholar(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt a scraped Google Scholar profile row.

    Scraped citation cells may be blank (meaning zero) or carry a
    trailing marker, so only the digits are kept.
    """
    title = _require_title(Source.SCHOLAR, raw.get("title"))
    citations = to_int(raw.get("citations"))
    source_id = _str_id(raw.get("id"))

    url = clean_text(raw.get("url"))
    if url is None and source_id:
        url = SCHOLAR_CITATION_URL.format(id=source_id)

    return SourceRecord(
        source=Source.SCHOLAR,
        title=title,
        authors=clean_text(raw.get("authors")),
        venue=clean_text(raw.get("venue")),
        year=extract_year(raw.get("year")),
        doi=normalize_doi(raw.get("doi")),
        citation_count=citations if citations is not None else 0,
        source_id=source_id,
        source_url=url,
    )


# ---------------------------------------------------------------------------
# Institutional repository
# ---------------------------------------------------------------------------


def _classify_dc_type(types: list[Any]) -> str:
    publication_type = "other"
    for item in types:
        text = dc_text(item)
        if not text:
            continue
        if "article" in text:
            publication_type = "article"
        elif "book" in text and "Part" in text:
            publication_type = "chapter"
        elif "book" in text:
            publication_type = "book"
        elif "conference" in text:
            publication_type = "conference"
        elif "thesis" in text:
            publication_type = "thesis"
    return publication_type


def _adapt_dublin_core(raw: Mapping[str, Any]) -> SourceRecord:
    dc = dig(raw, "metadata", "dc") or {}

    titles = as_list(dc.get("title"))
    title = _require_title(Source.ORA, dc_text(titles[0]) if titles else None)

    identifier = clean_text(dig(raw, "header", "identifier")) or ""
    handle_match = OAI_HANDLE_RE.match(identifier)
    handle = handle_match.group(1) if handle_match else None

    year = None
    for date in as_list(dc.get("date")):
        year = extract_year(dc_text(date))
        if year:
            break

    creators = [c for c in (dc_text(item) for item in as_list(dc.get("creator"))) if c]
    descriptions = as_list(dc.get("description"))
    publishers = as_list(dc.get("publisher"))
    languages = as_list(dc.get("language"))

    venue = None
    for relation in as_list(dc.get("relation")):
        text = dc_text(relation)
        if text and text.startswith("journal:"):
            venue = clean_text(text[len("journal:") :])

    return SourceRecord(
        source=Source.ORA,
        title=title,
        authors="; ".join(creators) or None,
        venue=venue,
        year=year,
        doi=find_doi(dc.get("identifier")),
        source_id=handle or (identifier or None),
        source_url=ORA_HANDLE_URL.format(handle=handle) if handle else None,
        abstract=dc_text(descriptions[0]) if descriptions else None,
        handle=handle,
        publisher=dc_text(publishers[0]) if publishers else None,
        publication_type=_classify_dc_type(as_list(dc.get("type"))),
        language=dc_text(languages[0]) if languages else None,
    )


def adapt_ora(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt an institutional repository record.

    Accepts an OAI-PMH Dublin Core record (``header`` + ``metadata.dc``)
    or the flattened shape produced by the repository collector.
    """
    if "metadata" in raw:
        return _adapt_dublin_core(raw)

    title = _require_title(Source.ORA, raw.get("title"))
    handle = clean_text(raw.get("handle"))
    url = clean_text(raw.get("url"))
    if url is None and handle:
        url = ORA_HANDLE_URL.format(handle=handle)

    return SourceRecord(
        source=Source.ORA,
        title=title,
        authors=clean_text(raw.get("authors")),
        venue=clean_text(raw.get("journal") or raw.get("venue")),
        year=extract_year(raw.get("year")),
        doi=normalize_doi(raw.get("doi")),
        source_id=handle or _str_id(raw.get("oaiIdentifier")),
        source_url=url,
        abstract=clean_text(raw.get("abstract")),
        handle=handle,
        publisher=clean_text(raw.get("publisher")),
        publication_type=clean_text(raw.get("type")),
        language=clean_text(raw.get("language")),
    )


# ---------------------------------------------------------------------------
# Citation indices
# ---------------------------------------------------------------------------


def adapt_wos(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt a Web of Science record (API record or flattened shape)."""
    if "UID" in raw or "Title" in raw:
        title = dig(raw, "Title", "Title", 0, "value")
        authors = "; ".join(
            a["wos_standard"]
            for a in as_list(dig(raw, "Authors", "list"))
            if isinstance(a, Mapping) and a.get("wos_standard")
        )
        venue = dig(raw, "Source", "SourceTitle")
        year = dig(raw, "Source", "Published", "Year")
        doi = next(
            (
                i.get("value")
                for i in as_list(raw.get("Identifiers"))
                if isinstance(i, Mapping) and i.get("type") == "doi"
            ),
            None,
        )
        citations = dig(raw, "Citations", "count")
        source_id = raw.get("UID")
        url = None
    else:
        title = raw.get("title")
        authors = raw.get("authors")
        venue = raw.get("venue")
        year = raw.get("year")
        doi = raw.get("doi")
        citations = raw.get("citations")
        source_id = raw.get("wosId")
        url = raw.get("url")

    source_id = _str_id(source_id)
    url = clean_text(url)
    if url is None and source_id:
        url = WOS_RECORD_URL.format(id=source_id)

    return SourceRecord(
        source=Source.WOS,
        title=_require_title(Source.WOS, title),
        authors=clean_text(authors),
        venue=clean_text(venue),
        year=extract_year(year),
        doi=normalize_doi(doi),
        citation_count=to_int(citations),
        source_id=source_id,
        source_url=url,
    )


def adapt_scopus(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt a Scopus Search API entry (or flattened shape)."""
    if "dc:title" in raw:
        author_entries = [a for a in as_list(raw.get("author")) if isinstance(a, Mapping)]
        if author_entries:
            authors = "; ".join(
                f"{a.get('surname') or ''}, {a.get('given-name') or ''}".strip(", ")
                for a in author_entries
            )
        else:
            authors = raw.get("dc:creator")

        year, month, day = _split_iso_date(raw.get("prism:coverDate"))
        identifier = clean_text(raw.get("dc:identifier")) or ""
        source_id = identifier.split(":", 1)[1] if ":" in identifier else identifier or None
        url = next(
            (
                link.get("@href")
                for link in as_list(raw.get("link"))
                if isinstance(link, Mapping) and link.get("@ref") == "scopus"
            ),
            None,
        )
        return SourceRecord(
            source=Source.SCOPUS,
            title=_require_title(Source.SCOPUS, raw.get("dc:title")),
            authors=clean_text(authors),
            venue=clean_text(raw.get("prism:publicationName")),
            year=year,
            month=month,
            day=day,
            doi=normalize_doi(raw.get("prism:doi")),
            citation_count=to_int(raw.get("citedby-count")),
            source_id=source_id,
            source_url=clean_text(url),
        )

    return SourceRecord(
        source=Source.SCOPUS,
        title=_require_title(Source.SCOPUS, raw.get("title")),
        authors=clean_text(raw.get("authors")),
        venue=clean_text(raw.get("venue")),
        year=extract_year(raw.get("year")),
        doi=normalize_doi(raw.get("doi")),
        citation_count=to_int(raw.get("citations")),
        source_id=_str_id(raw.get("scopusId")),
        source_url=clean_text(raw.get("url")),
    )


# ---------------------------------------------------------------------------
# DOI registration authority
# ---------------------------------------------------------------------------


def _crossref_authors(authors: Any) -> str | None:
    names: list[str] = []
    for author in as_list(authors):
        if not isinstance(author, Mapping):
            continue
        family = clean_text(author.get("family"))
        given = clean_text(author.get("given"))
        if not family:
            # Organizations and mononyms
            names.append(clean_text(author.get("name")) or given or "Unknown Author")
        elif given:
            names.append(f"{family}, {given}")
        else:
            names.append(family)
    return "; ".join(names) or None


def _crossref_date(work: Mapping[str, Any]) -> tuple[int | None, int | None, int | None]:
    max_year = datetime.now(UTC).year + 1
    for date_field in CROSSREF_DATE_FIELDS:
        parts = dig(work, date_field, "date-parts", 0)
        if not isinstance(parts, list) or not parts:
            continue
        year = parts[0]
        if isinstance(year, int) and not isinstance(year, bool) and 1900 < year <= max_year:
            month = _valid_month(parts[1]) if len(parts) > 1 else None
            day = _valid_day(parts[2]) if len(parts) > 2 and month else None
            return year, month, day
    return None, None, None


def _crossref_venue(work: Mapping[str, Any]) -> str | None:
    return (
        clean_text(dig(work, "container-title", 0))
        or clean_text(dig(work, "event", "name"))
        or clean_text(work.get("publisher"))
    )


def adapt_crossref(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt a Crossref work.

    Accepts the ``message`` object of the Crossref works API (or the
    whole response) and the flattened collector shape.
    """
    work = raw.get("message", raw) if isinstance(raw.get("message"), Mapping) else raw

    if "DOI" in work:
        titles = as_list(work.get("title"))
        year, month, day = _crossref_date(work)
        abstract = clean_text(work.get("abstract"))
        if abstract:
            abstract = clean_text(MARKUP_TAG_RE.sub(" ", abstract))
        doi = normalize_doi(work.get("DOI"))
        return SourceRecord(
            source=Source.CROSSREF,
            title=_require_title(Source.CROSSREF, titles[0] if titles else None),
            authors=_crossref_authors(work.get("author")),
            venue=_crossref_venue(work),
            year=year,
            month=month,
            day=day,
            doi=doi,
            citation_count=None,
            source_id=doi,
            source_url=clean_text(work.get("URL")),
            abstract=abstract,
            publisher=clean_text(work.get("publisher")),
            publication_type=clean_text(work.get("type")),
        )

    doi = normalize_doi(work.get("doi"))
    return SourceRecord(
        source=Source.CROSSREF,
        title=_require_title(Source.CROSSREF, work.get("title")),
        authors=clean_text(work.get("authors")),
        venue=clean_text(work.get("venue")),
        year=extract_year(work.get("year")),
        doi=doi,
        source_id=doi,
        source_url=clean_text(work.get("url")),
        abstract=clean_text(work.get("abstract")),
        publisher=clean_text(work.get("publisher")),
        publication_type=clean_text(work.get("crossref_type") or work.get("type")),
    )


# ---------------------------------------------------------------------------
# Semantic graph
# ---------------------------------------------------------------------------


def adapt_semantic_scholar(raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt a Semantic Scholar Graph API paper (or flattened shape)."""
    authors = raw.get("authors")
    if isinstance(authors, list):
        authors = ", ".join(
            a["name"] for a in authors if isinstance(a, Mapping) and a.get("name")
        )

    doi = dig(raw, "externalIds", "DOI") or raw.get("doi")
    source_id = _str_id(raw.get("paperId") or raw.get("semanticScholarId"))

    pdf = raw.get("openAccessPdf")
    if isinstance(pdf, Mapping):
        pdf = pdf.get("url")

    citations = raw.get("citationCount", raw.get("citations"))
    influential = raw.get("influentialCitationCount", raw.get("influentialCitations"))

    fields = raw.get("fieldsOfStudy")
    fields_of_study = [f for f in (clean_text(x) for x in as_list(fields)) if f] or None

    return SourceRecord(
        source=Source.SEMANTIC_SCHOLAR,
        title=_require_title(Source.SEMANTIC_SCHOLAR, raw.get("title")),
        authors=clean_text(authors),
        venue=clean_text(raw.get("venue")),
        year=extract_year(raw.get("year")),
        doi=normalize_doi(doi),
        citation_count=to_int(citations),
        source_id=source_id,
        source_url=SEMANTIC_SCHOLAR_PAPER_URL.format(id=source_id) if source_id else None,
        influential_citations=to_int(influential),
        is_open_access=to_bool(raw.get("isOpenAccess")),
        open_access_url=clean_text(pdf),
        fields_of_study=fields_of_study,
        abstract=clean_text(raw.get("abstract")),
    )


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------


def _make_generic(source: str) -> Adapter:
    def _adapt(raw: Mapping[str, Any]) -> SourceRecord:
        return adapt_generic(source, raw)

    return _adapt


def adapt_generic(source: str, raw: Mapping[str, Any]) -> SourceRecord:
    """Adapt a record that already uses SourceRecord field names.

    ``citations`` is accepted as an alias of ``citation_count``.
    """
    fields = raw.get("fields_of_study")
    return SourceRecord(
        source=source,
        title=_require_title(source, raw.get("title")),
        authors=clean_text(raw.get("authors")),
        venue=clean_text(raw.get("venue")),
        year=extract_year(raw.get("year")),
        month=_valid_month(raw.get("month")),
        day=_valid_day(raw.get("day")),
        doi=normalize_doi(raw.get("doi")),
        citation_count=to_int(raw.get("citation_count", raw.get("citations"))),
        source_id=_str_id(raw.get("source_id")),
        source_url=clean_text(raw.get("source_url")),
        influential_citations=to_int(raw.get("influential_citations")),
        is_open_access=to_bool(raw.get("is_open_access")),
        open_access_url=clean_text(raw.get("open_access_url")),
        fields_of_study=[str(f) for f in as_list(fields)] or None,
        abstract=clean_text(raw.get("abstract")),
        handle=clean_text(raw.get("handle")),
        publisher=clean_text(raw.get("publisher")),
        publication_type=clean_text(raw.get("publication_type")),
        language=clean_text(raw.get("language")),
    )


ADAPTERS: dict[str, Adapter] = {
    Source.ORCID: adapt_orcid,
    Source.SCHOLAR: adapt_scholar,
    Source.ORA: adapt_ora,
    Source.WOS: adapt_wos,
    Source.SCOPUS: adapt_scopus,
    Source.CROSSREF: adapt_crossref,
    Source.SEMANTIC_SCHOLAR: adapt_semantic_scholar,
}


def get_adapter(source: str) -> Adapter:
    """Return the adapter for a source, falling back to the generic one."""
    return ADAPTERS.get(source) or _make_generic(source)
