# src/canonmatch/core/matcher.py
"""Expected-value wrapper for JSON columns.

A CanonicalJsonMatcher stands in for a literal expected value wherever a
test compares a stored JSON column. Equality against stored text decodes
the text and compares canonical forms, so key order and whitespace in the
stored value do not matter:

    row = {"id": 1, "days": '[ "mon", "tue" ]'}
    assert row == {"id": 1, "days": json_column(["mon", "tue"])}

The canonical form is computed at construction, so an expected value that
cannot be represented as JSON fails while the test is being set up, not
inside the comparison. Every comparison uses that frozen form; mutating
the wrapped value afterwards has no effect.
"""

from __future__ import annotations

from typing import Any

from canonmatch.contracts.errors import UnsupportedValueKindError
from canonmatch.core.canonical import canonicalize, canonicalize_stored


class CanonicalJsonMatcher:
    """Compare stored JSON text to an expected structured value.

    Attributes:
        expected: The structured value as given
        canonical: Its canonical JSON form
    """

    __slots__ = ("canonical", "expected")

    def __init__(self, expected: Any) -> None:
        self.expected = expected
        self.canonical = canonicalize(expected)

    def matches(self, stored_text: str | bytes) -> bool:
        """Return True iff ``stored_text`` decodes to a logically equal value.

        Raises:
            MalformedJsonError: If ``stored_text`` is not valid JSON
        """
        return canonicalize_stored(stored_text) == self.canonical

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CanonicalJsonMatcher):
            return self.canonical == other.canonical
        if isinstance(other, str | bytes | bytearray):
            return self.matches(other)
        try:
            return self.canonical == canonicalize(other)
        except UnsupportedValueKindError:
            return NotImplemented

    def __hash__(self) -> int:
        return hash(self.canonical)

    def __repr__(self) -> str:
        return f"json_column({self.canonical})"


def json_column(value: Any) -> CanonicalJsonMatcher:
    """Wrap an expected JSON column value for canonical comparison."""
    if isinstance(value, CanonicalJsonMatcher):
        return value
    return CanonicalJsonMatcher(value)
