"""Book metadata providers and the registry of implemented ones."""

from __future__ import annotations

from .base import MAX_CANDIDATES, Provider, Source
from .goodreads import Goodreads
from .google_books import GoogleBooks
from .open_library import OpenLibrary


def default_sources() -> dict[Provider, Source]:
    """One instance of every implemented provider. Amazon has none yet."""
    return {
        Provider.GOOGLE_BOOKS: GoogleBooks(),
        Provider.OPEN_LIBRARY: OpenLibrary(),
        Provider.GOODREADS: Goodreads(),
    }


__all__ = [
    "MAX_CANDIDATES",
    "Goodreads",
    "GoogleBooks",
    "OpenLibrary",
    "Provider",
    "Source",
    "default_sources",
]
