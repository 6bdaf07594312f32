"""Test helpers: canonical JSON assertions for database rows."""

from canonmatch.testing.assertions import assert_json_equal
from canonmatch.testing.database import (
    assert_database_count,
    assert_database_has,
    assert_database_missing,
    find_matching_rows,
)

__all__ = [
    "assert_database_count",
    "assert_database_has",
    "assert_database_missing",
    "assert_json_equal",
    "find_matching_rows",
]
