"""
canonmatch: logical equality for JSON-typed database columns in tests.

Stored JSON text is decoded and compared in canonical form (RFC 8785), so
key order and whitespace differences never fail an assertion while
sequence order and values still do.
"""

from canonmatch.contracts.errors import (
    CanonicalJsonError,
    ComparisonMismatchError,
    MalformedJsonError,
    UnsupportedValueKindError,
)
from canonmatch.core.canonical import canonicalize, matches
from canonmatch.core.matcher import CanonicalJsonMatcher, json_column

__version__ = "0.1.0"

__all__ = [
    "CanonicalJsonError",
    "CanonicalJsonMatcher",
    "ComparisonMismatchError",
    "MalformedJsonError",
    "UnsupportedValueKindError",
    "canonicalize",
    "json_column",
    "matches",
]
