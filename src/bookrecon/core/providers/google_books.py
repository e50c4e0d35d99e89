"""Google Books volume lookup and search.

https://developers.google.com/books/docs/v1/using
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from ..adaptors import (
    adapt_dates,
    adapt_identifier_list,
    adapt_map_values,
    adapt_number,
    adapt_object_field_list,
    adapt_scalar_string,
    adapt_string_array,
)
from ..decoding import Shape, decode_record, expect_object, load_json, rule
from ..errors import JSONParseError, MissingFieldError
from ..http import Fetch
from ..isbn import Isbn
from ..models import Record
from .base import Provider, Source, candidate_isbns, quote_query

VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"


def _identifiers(objects: list[Mapping[str, Any]]) -> frozenset:
    # [{"type": "ISBN_13", "identifier": "978..."}, ...]
    return adapt_identifier_list(adapt_object_field_list(objects, "identifier"))


def _image_links(links: Mapping[str, Any]) -> frozenset[str]:
    # Google serves covers over plain http; https works for every size.
    return frozenset(
        url.replace("http://", "https://", 1) for url in adapt_map_values(links)
    )


VOLUME_RULES = (
    rule("title", "titles", Shape.STRING, adapt_scalar_string, required=True),
    rule("industryIdentifiers", "identifiers", Shape.OBJECT_LIST, _identifiers, required=True),
    rule("authors", "authors", Shape.STRING_LIST, adapt_string_array),
    rule("description", "descriptions", Shape.STRING, adapt_scalar_string),
    rule("pageCount", "page_counts", Shape.NUMBER, adapt_number),
    rule("publisher", "publishers", Shape.STRING, adapt_scalar_string),
    rule("publishedDate", "publication_dates", Shape.STRING, adapt_dates),
    rule("categories", "tags", Shape.STRING_LIST, adapt_string_array),
    rule("language", "languages", Shape.STRING, adapt_scalar_string),
    rule("imageLinks", "cover_image_urls", Shape.OBJECT, _image_links),
)


def decode_volume(volume_info: Any) -> Record:
    return decode_record(volume_info, VOLUME_RULES, "volumeInfo")


def _items(raw: bytes) -> list:
    response = expect_object(load_json(raw), "Google Books response")
    items = response.get("items")
    if items is None:
        # totalItems == 0 responses carry no "items" key at all
        return []
    if not isinstance(items, list):
        raise JSONParseError("expected `items` to be a list")
    return items


def decode_response(raw: bytes) -> Record:
    """Record for the first volume of an ISBN query; empty when nothing matched."""
    items = _items(raw)
    if not items:
        return Record.empty()
    volume = expect_object(items[0], "volume")
    volume_info = volume.get("volumeInfo")
    if volume_info is None:
        raise MissingFieldError("volumeInfo")
    return decode_volume(volume_info)


def decode_search(raw: bytes) -> list[Isbn]:
    """Candidate ISBNs from a search response: the first identifier of each volume."""
    identifiers = []
    for item in _items(raw):
        volume_info = item.get("volumeInfo") if isinstance(item, dict) else None
        if not isinstance(volume_info, dict):
            continue
        found = volume_info.get("industryIdentifiers")
        if not isinstance(found, list) or not found or not isinstance(found[0], dict):
            continue
        identifier = found[0].get("identifier")
        if isinstance(identifier, str):
            identifiers.append(identifier)
    return candidate_isbns(identifiers)


class GoogleBooks(Source):
    provider = Provider.GOOGLE_BOOKS

    def __init__(self, api_key: str | None = None) -> None:
        if api_key is None:
            api_key = os.environ.get("GOOGLE_BOOKS_API_KEY", "")
        self.api_key = api_key

    def url(self, query: str) -> str:
        url = f"{VOLUMES_URL}?q={query}"
        if self.api_key:
            url += f"&key={quote_query(self.api_key)}"
        return url

    async def from_isbn(self, fetch: Fetch, isbn: Isbn) -> Record:
        return decode_response(await fetch(self.url(f"isbn:{isbn}")))

    async def from_description(self, fetch: Fetch, description: str) -> list[Isbn]:
        return decode_search(await fetch(self.url(quote_query(description))))
