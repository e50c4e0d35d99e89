"""Declarative JSON-to-Record decoding.

A provider describes its schema as a table of FieldRule rows: which JSON key
feeds which Record field, through which adaptor, for which JSON shapes. The
table is walked once per decoded object. Keys without a rule are ignored;
a key with a rule that appears twice in one object is rejected.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import DuplicateFieldError, JSONParseError, MissingFieldError
from .models import Record

U16_MAX = 65535


class JSONObject(dict):
    """A decoded JSON object that remembers which keys it saw more than once."""

    duplicates: frozenset[str] = frozenset()


def _object_pairs(pairs: list[tuple[str, Any]]) -> JSONObject:
    obj = JSONObject()
    repeated = set()
    for key, value in pairs:
        if key in obj:
            repeated.add(key)
        obj[key] = value
    if repeated:
        obj.duplicates = frozenset(repeated)
    return obj


def load_json(raw: bytes | str) -> Any:
    try:
        return json.loads(raw, object_pairs_hook=_object_pairs)
    except ValueError as e:
        raise JSONParseError(f"invalid JSON: {e}") from e


def expect_object(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise JSONParseError(f"expected {what} to be a JSON object, got {type(value).__name__}")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= U16_MAX


class Shape(Enum):
    STRING = "string"
    NUMBER = "number"
    STRING_LIST = "list of strings"
    INTEGER_LIST = "list of integers"
    OBJECT = "object"
    OBJECT_LIST = "list of objects"

    def matches(self, value: Any) -> bool:
        if self is Shape.STRING:
            return isinstance(value, str)
        if self is Shape.NUMBER:
            return _is_number(value)
        if self is Shape.OBJECT:
            return isinstance(value, dict)
        if not isinstance(value, list):
            return False
        if self is Shape.STRING_LIST:
            return all(isinstance(v, str) for v in value)
        if self is Shape.INTEGER_LIST:
            return all(isinstance(v, int) and not isinstance(v, bool) for v in value)
        return all(isinstance(v, dict) for v in value)


Adaptor = Callable[[Any], Iterable[Any]]


@dataclass(frozen=True)
class FieldRule:
    """``key`` in the provider's JSON feeds Record field ``target``.

    ``adaptors`` maps each accepted JSON shape to the adaptor for it; the
    first shape the value matches is used.
    """

    key: str
    target: str
    adaptors: tuple[tuple[Shape, Adaptor], ...]
    required: bool = False

    def __post_init__(self) -> None:
        if self.target not in Record.field_names():
            raise ValueError(f"unknown Record field: {self.target}")

    def adapt(self, value: Any) -> frozenset:
        for shape, adaptor in self.adaptors:
            if shape.matches(value):
                return frozenset(adaptor(value))
        expected = " or ".join(shape.value for shape, _ in self.adaptors)
        raise JSONParseError(
            f"invalid type for `{self.key}`: expected {expected}, got {type(value).__name__}"
        )


def rule(
    key: str, target: str, shape: Shape, adaptor: Adaptor, required: bool = False
) -> FieldRule:
    """Shorthand for the common single-shape rule."""
    return FieldRule(key, target, ((shape, adaptor),), required)


def decode_record(obj: Any, rules: Iterable[FieldRule], what: str = "object") -> Record:
    """Build a Record from one JSON object by walking ``rules``.

    JSON ``null`` counts as absent.
    """
    obj = expect_object(obj, what)
    duplicates = getattr(obj, "duplicates", frozenset())
    collected: dict[str, frozenset] = {}
    for r in rules:
        if r.key in duplicates:
            raise DuplicateFieldError(r.key)
        value = obj.get(r.key)
        if value is None:
            if r.required:
                raise MissingFieldError(r.key)
            continue
        collected[r.target] = collected.get(r.target, frozenset()) | r.adapt(value)
    return Record(**collected)
