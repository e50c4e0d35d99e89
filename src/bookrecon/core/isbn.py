"""ISBN-10 / ISBN-13 parsing and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import IdentifierParseError

_SEPARATORS = re.compile(r"[\s\-]")
# ASCII only: str.isdigit() also accepts superscripts and other scripts' digits
_ISBN10 = re.compile(r"[0-9]{9}[0-9X]")
_ISBN13 = re.compile(r"97[89][0-9]{10}")


def _isbn10_is_valid(digits: str) -> bool:
    if not _ISBN10.fullmatch(digits):
        return False
    total = sum((10 - i) * int(ch) for i, ch in enumerate(digits[:9]))
    total += 10 if digits[-1] == "X" else int(digits[-1])
    return total % 11 == 0


def _isbn13_is_valid(digits: str) -> bool:
    if not _ISBN13.fullmatch(digits):
        return False
    total = sum(int(d) * (1 if i % 2 == 0 else 3) for i, d in enumerate(digits[:12]))
    check = (10 - (total % 10)) % 10
    return check == int(digits[-1])


def _invalid_reason(digits: str) -> str | None:
    """Why ``digits`` is not a canonical ISBN, or None if it is one."""
    if len(digits) == 10:
        return None if _isbn10_is_valid(digits) else "invalid ISBN-10"
    if len(digits) == 13:
        return None if _isbn13_is_valid(digits) else "invalid ISBN-13"
    return f"expected 10 or 13 digits, got {len(digits)}"


@dataclass(frozen=True, order=True)
class Isbn:
    """A validated ISBN in its canonical, hyphenless form.

    Constructing one directly requires the canonical form; use ``parse``
    for user or provider input. ISBN-10 and ISBN-13 forms of the same
    edition are different values.
    """

    digits: str

    def __post_init__(self) -> None:
        if not isinstance(self.digits, str):
            raise IdentifierParseError(repr(self.digits), "expected a string")
        reason = _invalid_reason(self.digits)
        if reason:
            raise IdentifierParseError(self.digits, reason)

    @classmethod
    def parse(cls, raw: str) -> Isbn:
        """Parse ``raw`` into an Isbn, accepting hyphens and spaces.

        Raises IdentifierParseError when the string is not a valid ISBN.
        """
        digits = _SEPARATORS.sub("", raw).upper()
        reason = _invalid_reason(digits)
        if reason:
            raise IdentifierParseError(raw, reason)
        return cls(digits)

    @property
    def kind(self) -> int:
        return len(self.digits)

    @property
    def is_isbn13(self) -> bool:
        return self.kind == 13

    def __str__(self) -> str:
        return self.digits
