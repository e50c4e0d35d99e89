"""Error types raised while looking up and decoding book metadata."""

from __future__ import annotations


class ReconError(Exception):
    """Base class for every error raised by bookrecon."""


class ProviderConnectionError(ReconError):
    """A provider could not be reached or answered with an error status."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class JSONParseError(ReconError):
    """A response was not valid JSON or did not have the expected shape."""


class MissingFieldError(JSONParseError):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing field `{field}`")
        self.field = field


class DuplicateFieldError(JSONParseError):
    def __init__(self, field: str) -> None:
        super().__init__(f"duplicate field `{field}`")
        self.field = field


class UnsupportedProviderError(ReconError):
    """The provider is known but has no implementation for the operation."""

    def __init__(self, provider: str, operation: str = "lookup") -> None:
        super().__init__(f"{provider} does not support {operation}")
        self.provider = provider
        self.operation = operation


class ParseError(ReconError):
    """A single field value that was present but could not be parsed.

    Instances are stored inside Record fields next to the values that did
    parse, so two errors of the same kind for the same raw input compare
    equal and collapse into one member of a set.
    """

    def __init__(self, raw: str, reason: str = "") -> None:
        super().__init__(f"{raw!r}: {reason}" if reason else repr(raw))
        self.raw = raw
        self.reason = reason

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.raw == other.raw  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.raw))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw!r})"


class IdentifierParseError(ParseError):
    pass


class DateParseError(ParseError):
    pass
