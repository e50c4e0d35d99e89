"""Open Library edition lookup and search.

https://openlibrary.org/developers/api
"""

from __future__ import annotations

from functools import partial
from typing import Any

import structlog

from ..adaptors import (
    adapt_cover_ids,
    adapt_dates,
    adapt_identifier_list,
    adapt_language_keys,
    adapt_number,
    adapt_object_field,
    adapt_object_field_list,
    adapt_object_field_list_split,
    adapt_scalar_string,
    adapt_string_array,
    adapt_string_array_split,
)
from ..dates import EXTENDED_DATE_FORMATS
from ..decoding import (
    FieldRule,
    Shape,
    decode_record,
    expect_object,
    load_json,
    rule,
)
from ..errors import JSONParseError, MissingFieldError, ProviderConnectionError
from ..http import Fetch
from ..isbn import Isbn
from ..models import Record, merge
from .base import Provider, Source, candidate_isbns, quote_query

log = structlog.get_logger()

BOOKS_URL = "https://openlibrary.org/api/books?bibkeys=ISBN:{isbn}&jscmd=details&format=json"
SEARCH_URL = "https://openlibrary.org/search.json?q={query}"
WORK_URL = "https://openlibrary.org{key}.json"

_names = partial(adapt_object_field_list, key="name")
_text = partial(adapt_object_field, key="value")

# Descriptions come either as a plain string or as
# {"type": "/type/text", "value": "..."}.
_DESCRIPTION = FieldRule(
    "description",
    "descriptions",
    ((Shape.STRING, adapt_scalar_string), (Shape.OBJECT, _text)),
)

DETAILS_RULES = (
    rule("title", "titles", Shape.STRING, adapt_scalar_string, required=True),
    rule("authors", "authors", Shape.OBJECT_LIST, _names),
    rule("isbn_10", "identifiers", Shape.STRING_LIST, adapt_identifier_list),
    rule("isbn_13", "identifiers", Shape.STRING_LIST, adapt_identifier_list),
    rule("number_of_pages", "page_counts", Shape.NUMBER, adapt_number),
    FieldRule(
        "publishers",
        "publishers",
        ((Shape.STRING_LIST, adapt_string_array), (Shape.OBJECT_LIST, _names)),
    ),
    rule(
        "publish_date",
        "publication_dates",
        Shape.STRING,
        partial(adapt_dates, formats=EXTENDED_DATE_FORMATS),
    ),
    rule("languages", "languages", Shape.OBJECT_LIST, adapt_language_keys),
    FieldRule(
        "subjects",
        "tags",
        (
            (Shape.STRING_LIST, adapt_string_array_split),
            (Shape.OBJECT_LIST, partial(adapt_object_field_list_split, key="name")),
        ),
    ),
    rule("covers", "cover_image_urls", Shape.INTEGER_LIST, adapt_cover_ids),
    _DESCRIPTION,
)

ENTRY_RULES = (rule("thumbnail_url", "cover_image_urls", Shape.STRING, adapt_scalar_string),)

WORK_RULES = (_DESCRIPTION,)


def find_entry(response: Any, isbn: Isbn) -> dict | None:
    """The ``ISBN:<isbn>`` entry of a books API response, None when not found."""
    response = expect_object(response, "Open Library response")
    entry = response.get(f"ISBN:{isbn}")
    if entry is None:
        return None
    return expect_object(entry, "book entry")


def decode_entry(entry: dict) -> Record:
    details = entry.get("details")
    if details is None:
        raise MissingFieldError("details")
    return merge(
        decode_record(details, DETAILS_RULES, "details"),
        decode_record(entry, ENTRY_RULES, "book entry"),
    )


def decode_response(raw: bytes, isbn: Isbn) -> Record:
    entry = find_entry(load_json(raw), isbn)
    if entry is None:
        return Record.empty()
    return decode_entry(entry)


def work_keys(details: dict) -> list[str]:
    works = details.get("works")
    if not isinstance(works, list):
        return []
    return [
        w["key"]
        for w in works
        if isinstance(w, dict) and isinstance(w.get("key"), str) and w["key"].startswith("/works/")
    ]


def decode_search(raw: bytes) -> list[Isbn]:
    """Candidate ISBNs from a search response: the first ISBN of each doc."""
    response = expect_object(load_json(raw), "Open Library search response")
    docs = response.get("docs") or []
    if not isinstance(docs, list):
        raise JSONParseError("expected `docs` to be a list")
    identifiers = []
    for doc in docs:
        isbns = doc.get("isbn") if isinstance(doc, dict) else None
        if isinstance(isbns, list) and isbns and isinstance(isbns[0], str):
            identifiers.append(isbns[0])
    return candidate_isbns(identifiers)


class OpenLibrary(Source):
    provider = Provider.OPEN_LIBRARY

    def url(self, isbn: Isbn) -> str:
        return BOOKS_URL.format(isbn=isbn)

    async def work_description(self, fetch: Fetch, work_key: str) -> Record:
        """Description from the edition's work; empty if it cannot be had."""
        try:
            work = load_json(await fetch(WORK_URL.format(key=work_key)))
            return decode_record(work, WORK_RULES, "work")
        except (ProviderConnectionError, JSONParseError) as e:
            log.debug("works_description_error", work=work_key, error=str(e))
            return Record.empty()

    async def from_isbn(self, fetch: Fetch, isbn: Isbn) -> Record:
        entry = find_entry(load_json(await fetch(self.url(isbn))), isbn)
        if entry is None:
            return Record.empty()
        record = decode_entry(entry)

        # Editions rarely carry a description; the work usually does.
        works = work_keys(entry["details"])
        if works and not record.descriptions:
            record = record.merge(await self.work_description(fetch, works[0]))
        return record

    async def from_description(self, fetch: Fetch, description: str) -> list[Isbn]:
        return decode_search(await fetch(SEARCH_URL.format(query=quote_query(description))))
