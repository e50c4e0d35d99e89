"""Normalize and merge book metadata from several providers."""

from .errors import (
    DateParseError,
    DuplicateFieldError,
    IdentifierParseError,
    JSONParseError,
    MissingFieldError,
    ParseError,
    ProviderConnectionError,
    ReconError,
    UnsupportedProviderError,
)
from .fetcher import DEFAULT_PROVIDERS, DEFAULT_SEARCH_PROVIDER, MetadataFetcher
from .http import Fetch, HttpFetcher
from .isbn import Isbn
from .models import Record, merge, merge_all
from .providers import Provider

__all__ = [
    # Orchestration
    "MetadataFetcher",
    "DEFAULT_PROVIDERS",
    "DEFAULT_SEARCH_PROVIDER",
    "Provider",
    # Fetching
    "Fetch",
    "HttpFetcher",
    # Records
    "Isbn",
    "Record",
    "merge",
    "merge_all",
    # Errors
    "ReconError",
    "ProviderConnectionError",
    "JSONParseError",
    "MissingFieldError",
    "DuplicateFieldError",
    "UnsupportedProviderError",
    "ParseError",
    "IdentifierParseError",
    "DateParseError",
]
