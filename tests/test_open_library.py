"""
Unit tests for the Open Library provider.
"""

import copy
import json
from datetime import date

import pytest
from fixtures import (
    DUNE_ISBN10,
    DUNE_ISBN13,
    OPEN_LIBRARY_DUNE,
    OPEN_LIBRARY_DUNE_URL,
    OPEN_LIBRARY_DUNE_WORK,
    OPEN_LIBRARY_DUNE_WORK_URL,
    OPEN_LIBRARY_SEARCH,
)

from bookrecon.core.errors import JSONParseError, MissingFieldError
from bookrecon.core.isbn import Isbn
from bookrecon.core.providers.open_library import (
    OpenLibrary,
    decode_response,
    decode_search,
    work_keys,
)

pytestmark = pytest.mark.unit

DUNE = Isbn(DUNE_ISBN13)


def dumps(obj) -> bytes:
    return json.dumps(obj).encode()


def dune_details(**changes) -> dict:
    response = copy.deepcopy(OPEN_LIBRARY_DUNE)
    response[f"ISBN:{DUNE_ISBN13}"]["details"].update(changes)
    return response


class TestDecodeResponse:
    """Tests for decoding the books API details response."""

    def test_full_entry(self):
        record = decode_response(dumps(OPEN_LIBRARY_DUNE), DUNE)
        assert record.titles == {"Dune"}
        assert record.authors == {"Frank Herbert"}
        assert record.identifiers == {Isbn(DUNE_ISBN10), Isbn(DUNE_ISBN13)}
        assert record.page_counts == {528}
        assert record.publishers == {"Ace Books"}
        assert record.publication_dates == {date(2005, 1, 1)}
        assert record.languages == {"eng"}
        assert record.tags == {"science-fiction", "fiction", "space-opera"}
        assert record.descriptions == frozenset()

    def test_covers_and_thumbnail(self):
        record = decode_response(dumps(OPEN_LIBRARY_DUNE), DUNE)
        assert record.cover_image_urls == {
            "https://covers.openlibrary.org/b/id/8231856-S.jpg",
            "https://covers.openlibrary.org/b/id/8231856-M.jpg",
            "https://covers.openlibrary.org/b/id/8231856-L.jpg",
        }

    def test_not_found(self):
        assert decode_response(b"{}", DUNE).is_empty()

    def test_missing_details(self):
        response = {f"ISBN:{DUNE_ISBN13}": {"bib_key": f"ISBN:{DUNE_ISBN13}"}}
        with pytest.raises(MissingFieldError):
            decode_response(dumps(response), DUNE)

    def test_missing_title(self):
        response = dune_details(title=None)
        with pytest.raises(MissingFieldError) as exc_info:
            decode_response(dumps(response), DUNE)
        assert exc_info.value.field == "title"

    def test_publisher_objects_and_subject_objects(self):
        response = dune_details(
            publishers=[{"name": "Chilton Books"}],
            subjects=[{"name": "Fiction, Classics"}],
        )
        record = decode_response(dumps(response), DUNE)
        assert record.publishers == {"Chilton Books"}
        assert record.tags == {"fiction", "classics"}

    def test_description_as_text_object(self):
        response = dune_details(description={"type": "/type/text", "value": "Arrakis."})
        assert decode_response(dumps(response), DUNE).descriptions == {"Arrakis."}

    def test_wrong_shape(self):
        with pytest.raises(JSONParseError):
            decode_response(dumps(dune_details(number_of_pages="528")), DUNE)

    def test_not_an_object(self):
        with pytest.raises(JSONParseError):
            decode_response(b"[]", DUNE)


class TestWorkKeys:
    def test_filters_non_work_keys(self):
        details = {"works": [{"key": "/works/OL1W"}, {"key": "/books/OL1M"}, "junk"]}
        assert work_keys(details) == ["/works/OL1W"]

    def test_no_works(self):
        assert work_keys({}) == []


class TestDecodeSearch:
    def test_first_isbn_of_each_doc(self):
        """Test that docs without ISBNs are skipped and bad ISBNs are dropped."""
        assert decode_search(dumps(OPEN_LIBRARY_SEARCH)) == [
            Isbn(DUNE_ISBN13),
            Isbn("9780143111580"),
        ]

    def test_empty(self):
        assert decode_search(dumps({"docs": []})) == []


class TestOpenLibrary:
    """Tests for the OpenLibrary source, including work enrichment."""

    @pytest.mark.asyncio
    async def test_enriches_description_from_work(self, fake_fetch):
        fetch = fake_fetch(
            {
                OPEN_LIBRARY_DUNE_URL: OPEN_LIBRARY_DUNE,
                OPEN_LIBRARY_DUNE_WORK_URL: OPEN_LIBRARY_DUNE_WORK,
            }
        )
        record = await OpenLibrary().from_isbn(fetch, DUNE)
        assert record.descriptions == {"Frank Herbert's epic of Arrakis and the spice melange."}
        assert fetch.calls == [OPEN_LIBRARY_DUNE_URL, OPEN_LIBRARY_DUNE_WORK_URL]

    @pytest.mark.asyncio
    async def test_work_failure_degrades_to_no_description(self, fake_fetch):
        fetch = fake_fetch({OPEN_LIBRARY_DUNE_URL: OPEN_LIBRARY_DUNE})
        record = await OpenLibrary().from_isbn(fetch, DUNE)
        assert record.titles == {"Dune"}
        assert record.descriptions == frozenset()

    @pytest.mark.asyncio
    async def test_malformed_work_degrades(self, fake_fetch):
        fetch = fake_fetch(
            {
                OPEN_LIBRARY_DUNE_URL: OPEN_LIBRARY_DUNE,
                OPEN_LIBRARY_DUNE_WORK_URL: "<html>oops</html>",
            }
        )
        record = await OpenLibrary().from_isbn(fetch, DUNE)
        assert record.descriptions == frozenset()

    @pytest.mark.asyncio
    async def test_no_work_fetch_when_described(self, fake_fetch):
        response = dune_details(description="Already here.")
        fetch = fake_fetch({OPEN_LIBRARY_DUNE_URL: response})
        record = await OpenLibrary().from_isbn(fetch, DUNE)
        assert record.descriptions == {"Already here."}
        assert fetch.calls == [OPEN_LIBRARY_DUNE_URL]

    @pytest.mark.asyncio
    async def test_not_found_is_empty(self, fake_fetch):
        fetch = fake_fetch({OPEN_LIBRARY_DUNE_URL: {}})
        assert (await OpenLibrary().from_isbn(fetch, DUNE)).is_empty()

    @pytest.mark.asyncio
    async def test_from_description(self, fake_fetch):
        url = "https://openlibrary.org/search.json?q=dune"
        fetch = fake_fetch({url: OPEN_LIBRARY_SEARCH})
        candidates = await OpenLibrary().from_description(fetch, "dune")
        assert candidates[0] == Isbn(DUNE_ISBN13)
        assert fetch.calls == [url]
