"""Look up book metadata across several providers and merge the answers."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from .errors import ReconError, UnsupportedProviderError
from .http import Fetch
from .isbn import Isbn
from .models import Record, merge_all
from .providers import Provider, Source, default_sources

DEFAULT_PROVIDERS: tuple[Provider, ...] = (Provider.GOOGLE_BOOKS, Provider.OPEN_LIBRARY)
DEFAULT_SEARCH_PROVIDER = Provider.GOOGLE_BOOKS


class MetadataFetcher:
    """Fetches book metadata from several providers and merges it.

    ISBN lookup: every provider is asked concurrently, the answers are
    merged into one Record. The first provider failure fails the lookup.

    Description search: a search provider turns free text into up to three
    candidate ISBNs, each of which gets its own ISBN lookup.
    """

    def __init__(
        self,
        fetch: Fetch,
        sources: Mapping[Provider, Source] | None = None,
        logger: Any = None,
    ) -> None:
        self.fetch = fetch
        self.sources = dict(default_sources() if sources is None else sources)
        self.log = logger if logger is not None else structlog.get_logger()

    def source(self, provider: Provider | str) -> Source:
        provider = Provider.coerce(provider)
        try:
            return self.sources[provider]
        except KeyError:
            raise UnsupportedProviderError(provider.value) from None

    def _resolve(self, providers: Iterable[Provider]) -> list[tuple[Provider, Source]]:
        # dict.fromkeys: drop repeats, keep order
        unique = dict.fromkeys(Provider.coerce(p) for p in providers)
        return [(p, self.source(p)) for p in unique]

    async def _ask(self, provider: Provider, source: Source, isbn: Isbn) -> Record:
        try:
            record = await source.from_isbn(self.fetch, isbn)
        except ReconError as e:
            self.log.warning(
                "provider_failed", provider=provider.value, isbn=str(isbn), error=str(e)
            )
            raise
        self.log.debug(
            "provider_decoded",
            provider=provider.value,
            isbn=str(isbn),
            fields={name: len(getattr(record, name)) for name in record.field_names()},
        )
        return record

    async def fetch_by_isbn(
        self, isbn: Isbn | str, providers: Iterable[Provider] = DEFAULT_PROVIDERS
    ) -> Record:
        """Merged Record for one ISBN.

        Flow:
        1. Parse the ISBN and resolve every provider (unsupported ones fail here)
        2. Ask all providers concurrently
        3. Fold the per-provider Records with merge
        """
        if isinstance(isbn, str):
            isbn = Isbn.parse(isbn)
        sources = self._resolve(providers)

        records = await asyncio.gather(*(self._ask(p, s, isbn) for p, s in sources))

        record = merge_all(records)
        self.log.info(
            "isbn_lookup_complete",
            isbn=str(isbn),
            providers=[p.value for p, _ in sources],
            titles=len(record.titles),
            failures=sum(1 for _ in record.failures()),
        )
        return record

    async def fetch_by_description(
        self,
        description: str,
        search_provider: Provider = DEFAULT_SEARCH_PROVIDER,
        providers: Iterable[Provider] = DEFAULT_PROVIDERS,
    ) -> list[Record]:
        """One merged Record per candidate book matching ``description``.

        Candidates are different books, so their Records are never merged
        with each other.
        """
        providers = [p for p, _ in self._resolve(providers)]
        search = self.source(search_provider)

        candidates = await search.from_description(self.fetch, description)
        self.log.debug(
            "search_candidates",
            provider=search.provider.value,
            description=description,
            candidates=[str(c) for c in candidates],
        )

        records = await asyncio.gather(*(self.fetch_by_isbn(c, providers) for c in candidates))
        return list(records)
