"""Shared contracts: exception types raised across canonmatch."""

from canonmatch.contracts.errors import (
    CanonicalJsonError,
    ComparisonMismatchError,
    MalformedJsonError,
    UnsupportedValueKindError,
)

__all__ = [
    "CanonicalJsonError",
    "ComparisonMismatchError",
    "MalformedJsonError",
    "UnsupportedValueKindError",
]
