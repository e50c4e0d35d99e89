"""The unified book metadata record and its merge operation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, fields, replace
from datetime import date
from functools import reduce

from .errors import DateParseError, IdentifierParseError, ParseError
from .isbn import Isbn


@dataclass(frozen=True)
class Record:
    """Book metadata gathered from one or more providers.

    Every field is a set of outcomes: parsed values next to ParseErrors for
    values that were present but malformed. An all-empty Record is the
    identity of merge.
    """

    identifiers: frozenset[Isbn | IdentifierParseError] = field(default_factory=frozenset)
    titles: frozenset[str] = field(default_factory=frozenset)
    authors: frozenset[str] = field(default_factory=frozenset)
    descriptions: frozenset[str] = field(default_factory=frozenset)
    page_counts: frozenset[int] = field(default_factory=frozenset)
    publishers: frozenset[str] = field(default_factory=frozenset)
    publication_dates: frozenset[date | DateParseError] = field(default_factory=frozenset)
    languages: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)
    cover_image_urls: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def empty(cls) -> Record:
        return cls()

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in self.field_names())

    def merge(self, other: Record) -> Record:
        return merge(self, other)

    def __add__(self, other: Record) -> Record:
        if not isinstance(other, Record):
            return NotImplemented
        return merge(self, other)

    def values(self, name: str) -> list:
        """Successfully parsed values of one field."""
        return [v for v in getattr(self, name) if not isinstance(v, ParseError)]

    def failures(self) -> Iterator[tuple[str, ParseError]]:
        for name in self.field_names():
            for value in getattr(self, name):
                if isinstance(value, ParseError):
                    yield name, value

    def to_dict(self) -> dict:
        """JSON-ready view: sorted string arrays per field plus retained errors."""
        data: dict = {}
        for name in self.field_names():
            values = sorted(self.values(name))
            if name in ("identifiers", "page_counts"):
                data[name] = [str(v) for v in values]
            elif name == "publication_dates":
                data[name] = [v.isoformat() for v in values]
            else:
                data[name] = values
        data["errors"] = sorted(
            (
                {"field": name, "kind": type(err).__name__, "raw": err.raw}
                for name, err in self.failures()
            ),
            key=lambda e: (e["field"], e["kind"], e["raw"]),
        )
        return data


def merge(a: Record, b: Record) -> Record:
    """Union every field of ``a`` and ``b``.

    Parsed values deduplicate by equality, errors by kind and raw input.
    """
    return replace(
        a, **{name: getattr(a, name) | getattr(b, name) for name in Record.field_names()}
    )


def merge_all(records: Iterable[Record]) -> Record:
    return reduce(merge, records, Record.empty())
