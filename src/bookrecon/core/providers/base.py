"""Common interface of book metadata providers."""

from __future__ import annotations

from enum import Enum
from urllib.parse import quote

from ..errors import IdentifierParseError, UnsupportedProviderError
from ..http import Fetch
from ..isbn import Isbn
from ..models import Record

# Description searches look up at most this many candidate books.
MAX_CANDIDATES = 3


class Provider(str, Enum):
    GOOGLE_BOOKS = "google_books"
    OPEN_LIBRARY = "open_library"
    GOODREADS = "goodreads"
    AMAZON = "amazon"

    @classmethod
    def coerce(cls, value: Provider | str) -> Provider:
        """``value`` as a Provider; unknown names raise UnsupportedProviderError."""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedProviderError(str(value)) from None


class Source:
    """A provider that can be asked about an ISBN or a free-text description.

    Subclasses implement ``from_isbn`` and, if the provider has a search
    endpoint, ``from_description``.
    """

    provider: Provider

    async def from_isbn(self, fetch: Fetch, isbn: Isbn) -> Record:
        raise UnsupportedProviderError(self.provider.value, "ISBN lookup")

    async def from_description(self, fetch: Fetch, description: str) -> list[Isbn]:
        raise UnsupportedProviderError(self.provider.value, "description search")


def quote_query(text: str) -> str:
    return quote(text, safe="")


def candidate_isbns(raw_identifiers: list[str]) -> list[Isbn]:
    """Keep the first MAX_CANDIDATES identifiers, dropping any that do not parse."""
    candidates = []
    for raw in raw_identifiers[:MAX_CANDIDATES]:
        try:
            candidates.append(Isbn.parse(raw))
        except IdentifierParseError:
            continue
    return candidates
