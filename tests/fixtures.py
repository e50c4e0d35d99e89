"""Canned provider responses and a fake fetch capability shared across tests."""

import json

from bookrecon.core.errors import ProviderConnectionError


class FakeFetch:
    """A fetch capability answering from a URL -> response map.

    Dicts and lists are served as JSON, strings as UTF-8, exceptions are
    raised. Unknown URLs fail like an HTTP 404.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    async def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise ProviderConnectionError(url, "404 Not Found")
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, (dict, list)):
            return json.dumps(response).encode()
        if isinstance(response, str):
            return response.encode()
        return response


DUNE_ISBN13 = "9780441013593"
DUNE_ISBN10 = "0441013597"

GOOGLE_DUNE_URL = f"https://www.googleapis.com/books/v1/volumes?q=isbn:{DUNE_ISBN13}"
OPEN_LIBRARY_DUNE_URL = (
    f"https://openlibrary.org/api/books?bibkeys=ISBN:{DUNE_ISBN13}&jscmd=details&format=json"
)
OPEN_LIBRARY_DUNE_WORK_URL = "https://openlibrary.org/works/OL893415W.json"

GOOGLE_DUNE = {
    "kind": "books#volumes",
    "totalItems": 1,
    "items": [
        {
            "kind": "books#volume",
            "id": "B1hSG45JCX4C",
            "volumeInfo": {
                "title": "Dune",
                "authors": ["Frank Herbert"],
                "publisher": "Ace",
                "publishedDate": "2005-08-02",
                "description": "Set on the desert planet Arrakis.",
                "industryIdentifiers": [
                    {"type": "ISBN_10", "identifier": DUNE_ISBN10},
                    {"type": "ISBN_13", "identifier": DUNE_ISBN13},
                ],
                "pageCount": 528,
                "printType": "BOOK",
                "categories": ["Fiction"],
                "imageLinks": {
                    "smallThumbnail": "http://books.google.com/books/content?id=B1hSG45JCX4C&zoom=5",
                    "thumbnail": "http://books.google.com/books/content?id=B1hSG45JCX4C&zoom=1",
                },
                "language": "en",
            },
        }
    ],
}

GOOGLE_DUNE_MINIMAL = {
    "items": [
        {
            "volumeInfo": {
                "title": "Dune",
                "industryIdentifiers": [{"type": "ISBN_13", "identifier": DUNE_ISBN13}],
            }
        }
    ]
}

GOOGLE_EMPTY = {"kind": "books#volumes", "totalItems": 0}

OPEN_LIBRARY_DUNE = {
    f"ISBN:{DUNE_ISBN13}": {
        "bib_key": f"ISBN:{DUNE_ISBN13}",
        "info_url": "https://openlibrary.org/books/OL24934196M/Dune",
        "thumbnail_url": "https://covers.openlibrary.org/b/id/8231856-S.jpg",
        "details": {
            "title": "Dune",
            "authors": [{"key": "/authors/OL79034A", "name": "Frank Herbert"}],
            "publishers": ["Ace Books"],
            "publish_date": "2005",
            "isbn_10": [DUNE_ISBN10],
            "isbn_13": [DUNE_ISBN13],
            "number_of_pages": 528,
            "languages": [{"key": "/languages/eng"}],
            "subjects": ["Science fiction", "Fiction, Space opera"],
            "covers": [8231856, -1],
            "works": [{"key": "/works/OL893415W"}],
        },
    }
}

OPEN_LIBRARY_DUNE_WORK = {
    "key": "/works/OL893415W",
    "title": "Dune",
    "description": {
        "type": "/type/text",
        "value": "Frank Herbert's epic of Arrakis and the spice melange.",
    },
}

GOOGLE_SEARCH_FIVE = {
    "totalItems": 5,
    "items": [
        {"volumeInfo": {"title": "Dune", "industryIdentifiers": [
            {"type": "ISBN_13", "identifier": "9780441013593"}]}},
        {"volumeInfo": {"title": "Dune", "industryIdentifiers": [
            {"type": "ISBN_13", "identifier": "9780593099322"}]}},
        {"volumeInfo": {"title": "Dune Messiah", "industryIdentifiers": [
            {"type": "ISBN_13", "identifier": "9780143111580"}]}},
        {"volumeInfo": {"title": "Children of Dune", "industryIdentifiers": [
            {"type": "ISBN_13", "identifier": "9780306406157"}]}},
        {"volumeInfo": {"title": "Heretics", "industryIdentifiers": [
            {"type": "ISBN_13", "identifier": "9781534431003"}]}},
    ],
}

OPEN_LIBRARY_SEARCH = {
    "numFound": 3,
    "docs": [
        {"title": "Dune", "isbn": ["9780441013593", "0441013597"]},
        {"title": "No ISBN here"},
        {"title": "Broken", "isbn": ["12345"]},
        {"title": "Dune Messiah", "isbn": ["9780143111580"]},
    ],
}

GOODREADS_DUNE_HTML = """
<html>
  <head><title>Dune by Frank Herbert | Goodreads</title></head>
  <body>
    <img id="coverImage" src="https://images.gr-assets.com/books/dune.jpg" />
    <h1 id="bookTitle">
      Dune
    </h1>
    <a class="authorName" href="/author/show/58.Frank_Herbert">
      <span itemprop="name">Frank Herbert</span>
    </a>
    <div id="description">
      <span>Set on the desert planet...</span>
      <span style="display:none">Set on the desert planet Arrakis, Dune is the story of Paul.</span>
    </div>
    <span itemprop="numberOfPages">688 pages</span>
    <span itemprop="isbn">9780441013593</span>
    <div itemprop="inLanguage">English</div>
    <a class="actionLinkLite bookPageGenreLink" href="/genres/science-fiction">Science Fiction</a>
    <a class="actionLinkLite bookPageGenreLink" href="/genres/fiction">Fiction</a>
  </body>
</html>
"""
