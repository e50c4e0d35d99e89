"""Goodreads book pages, scraped.

Goodreads has no public API; the ISBN search redirects to the book page and
the fields below are read from its markup. Any selector that stops matching
simply leaves its field empty.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from ..adaptors import adapt_identifier_list, adapt_number, adapt_string_array
from ..http import Fetch
from ..isbn import Isbn
from ..models import Record
from .base import Provider, Source, quote_query

SEARCH_URL = (
    "https://www.goodreads.com/search?q={query}"
    "&search[source]=goodreads&search_type=books&tab=books"
)


def _texts(soup: BeautifulSoup, selector: str) -> list[str]:
    texts = []
    for element in soup.select(selector):
        text = element.get_text(strip=True)
        if text:
            texts.append(text)
    return texts


def _page_count(soup: BeautifulSoup) -> int | None:
    # "336 pages"
    for text in _texts(soup, 'span[itemprop="numberOfPages"]'):
        digits = "".join(ch for ch in text if ch.isdigit())
        if digits and int(digits) <= 65535:
            return int(digits)
    return None


def decode_page(html: bytes | str) -> Record:
    soup = BeautifulSoup(html, "html.parser")
    covers = [
        img["src"] for img in soup.select("img#coverImage") if img.get("src")
    ]
    return Record(
        identifiers=adapt_identifier_list(_texts(soup, 'span[itemprop="isbn"]')),
        titles=adapt_string_array(_texts(soup, "h1#bookTitle")),
        authors=adapt_string_array(_texts(soup, 'a.authorName span[itemprop="name"]')),
        descriptions=adapt_string_array(
            _texts(soup, 'div#description span[style="display:none"]')
        ),
        page_counts=adapt_number(_page_count(soup)),
        languages=adapt_string_array(_texts(soup, 'div[itemprop="inLanguage"]')),
        tags=adapt_string_array(_texts(soup, "a.actionLinkLite.bookPageGenreLink")),
        cover_image_urls=adapt_string_array(covers),
    )


class Goodreads(Source):
    """ISBN lookups only; Goodreads cannot serve as a search provider."""

    provider = Provider.GOODREADS

    async def from_isbn(self, fetch: Fetch, isbn: Isbn) -> Record:
        return decode_page(await fetch(SEARCH_URL.format(query=quote_query(str(isbn)))))
