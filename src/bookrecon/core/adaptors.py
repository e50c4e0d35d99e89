"""Translate single JSON values into Record field collections.

Every adaptor takes one value whose JSON shape has already been checked by
the decoder and returns a frozenset of outcomes. An outcome is either a parsed
value or a ParseError standing in for a value that was present but malformed.
Adaptors never raise.

Examples (JSON -> collection):

    "Dune"                                   -> {"Dune"}
    ["Frank Herbert", "Brian Herbert"]       -> {"Frank Herbert", "Brian Herbert"}
    [{"name": "Ace"}, {"url": "..."}]        -> {"Ace"}
    [{"name": "Fiction, science fiction"}]   -> {"fiction", "science-fiction"}
    ["9780441013593", "not-an-isbn"]         -> {Isbn("9780441013593"),
                                                 IdentifierParseError("not-an-isbn")}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date

from .dates import DATE_FORMATS, parse_date
from .errors import DateParseError, IdentifierParseError
from .isbn import Isbn

OL_COVER_URL = "https://covers.openlibrary.org/b/id/{id}-{size}.jpg"
OL_COVER_SIZES = ("S", "M", "L")


def adapt_scalar_string(value: str | None) -> frozenset[str]:
    if value is None:
        return frozenset()
    return frozenset({value})


def adapt_string_array(values: Iterable[str]) -> frozenset[str]:
    return frozenset(values)


def adapt_object_field(obj: Mapping[str, object], key: str) -> frozenset[str]:
    """Value at ``key`` of a single map, e.g. ``{"type": ..., "value": "..."}``."""
    value = obj.get(key)
    if isinstance(value, str):
        return frozenset({value})
    return frozenset()


def adapt_object_field_list(
    objects: Iterable[Mapping[str, object]], key: str
) -> frozenset[str]:
    """Value at ``key`` from each map; maps without it are skipped."""
    found = set()
    for obj in objects:
        value = obj.get(key)
        if isinstance(value, str):
            found.add(value)
    return frozenset(found)


def _slugs(text: str, separator: str) -> set[str]:
    slugs = set()
    for part in text.split(separator):
        slug = part.strip().lower().replace(" ", "-")
        if slug:
            slugs.add(slug)
    return slugs


def adapt_string_array_split(
    values: Iterable[str], separator: str = ","
) -> frozenset[str]:
    found: set[str] = set()
    for value in values:
        found |= _slugs(value, separator)
    return frozenset(found)


def adapt_object_field_list_split(
    objects: Iterable[Mapping[str, object]], key: str, separator: str = ","
) -> frozenset[str]:
    """Like adapt_object_field_list, then split each value into tag slugs.

    ``"Fiction, science fiction"`` becomes ``{"fiction", "science-fiction"}``.
    """
    return adapt_string_array_split(adapt_object_field_list(objects, key), separator)


def adapt_map_values(obj: Mapping[str, object]) -> frozenset[str]:
    return frozenset(v for v in obj.values() if isinstance(v, str))


def adapt_number(value: int | None) -> frozenset[int]:
    if value is None:
        return frozenset()
    return frozenset({value})


def adapt_identifier_list(
    values: Iterable[str],
) -> frozenset[Isbn | IdentifierParseError]:
    """Parse each string as an ISBN, keeping failures as members."""
    found: set[Isbn | IdentifierParseError] = set()
    for value in values:
        try:
            found.add(Isbn.parse(value))
        except IdentifierParseError as e:
            found.add(e)
    return frozenset(found)


def adapt_language_keys(objects: Iterable[Mapping[str, object]]) -> frozenset[str]:
    """``[{"key": "/languages/eng"}]`` -> ``{"eng"}``."""
    return frozenset(
        key.rsplit("/", 1)[-1] for key in adapt_object_field_list(objects, "key")
    )


def adapt_cover_ids(ids: Iterable[int]) -> frozenset[str]:
    urls = set()
    for cover_id in ids:
        # -1 marks an edition without a cover
        if cover_id <= 0:
            continue
        for size in OL_COVER_SIZES:
            urls.add(OL_COVER_URL.format(id=cover_id, size=size))
    return frozenset(urls)


def adapt_date(
    value: str | None, formats: tuple[str, ...] = DATE_FORMATS
) -> date | DateParseError | None:
    """Parse with the first matching format; unparseable input is kept as an error."""
    if value is None:
        return None
    try:
        return parse_date(value, formats)
    except DateParseError as e:
        return e


def adapt_dates(
    value: str | None, formats: tuple[str, ...] = DATE_FORMATS
) -> frozenset[date | DateParseError]:
    outcome = adapt_date(value, formats)
    if outcome is None:
        return frozenset()
    return frozenset({outcome})
