# tests/core/test_matcher.py
"""Tests for the json_column() expected-value wrapper."""

import pytest

from canonmatch.contracts.errors import MalformedJsonError, UnsupportedValueKindError
from canonmatch.core.matcher import CanonicalJsonMatcher, json_column


class TestConstruction:
    def test_canonical_computed_eagerly(self) -> None:
        matcher = json_column({"b": 2, "a": 1})
        assert matcher.canonical == '{"a":1,"b":2}'
        assert matcher.expected == {"b": 2, "a": 1}

    def test_unsupported_value_fails_at_construction(self) -> None:
        with pytest.raises(UnsupportedValueKindError):
            json_column({"a": float("nan")})

    def test_wrapping_a_matcher_returns_it(self) -> None:
        matcher = json_column(["mon"])
        assert json_column(matcher) is matcher

    def test_repr_shows_canonical_form(self) -> None:
        assert repr(json_column({"b": 2, "a": 1})) == 'json_column({"a":1,"b":2})'


class TestEquality:
    def test_equal_to_reformatted_stored_text(self) -> None:
        assert json_column(["mon", "tue"]) == '[\n  "mon",\n  "tue"\n]'

    def test_stored_text_on_the_left(self) -> None:
        assert '{"b": 2, "a": 1}' == json_column({"a": 1, "b": 2})

    def test_equal_to_stored_bytes(self) -> None:
        assert json_column({"a": 1}) == b'{"a": 1}'

    def test_sequence_order_matters(self) -> None:
        assert json_column(["mon", "tue"]) != '["tue","mon"]'

    def test_equal_to_structured_value(self) -> None:
        assert json_column({"a": 1.0}) == {"a": 1}

    def test_equal_to_other_matcher(self) -> None:
        assert json_column({"a": 1, "b": 2}) == json_column({"b": 2, "a": 1})

    def test_unsupported_other_is_not_equal(self) -> None:
        assert json_column({"a": 1}) != object()

    def test_malformed_stored_text_raises(self) -> None:
        with pytest.raises(MalformedJsonError):
            _ = json_column(["mon"]) == "not json"

    def test_usable_inside_row_dicts(self) -> None:
        row = {"id": 1, "days": '["mon", "tue"]', "options": '{"b": true, "a": null}'}
        assert row == {
            "id": 1,
            "days": json_column(["mon", "tue"]),
            "options": json_column({"a": None, "b": True}),
        }

    def test_hash_follows_canonical_form(self) -> None:
        assert hash(json_column({"a": 1, "b": 2})) == hash(json_column({"b": 2, "a": 1}))
        assert len({json_column([1, 2]), json_column((1, 2))}) == 1


class TestMatchesMethod:
    def test_matches(self) -> None:
        matcher = CanonicalJsonMatcher({"a": [1, 2]})
        assert matcher.matches('{ "a" : [1, 2] }') is True
        assert matcher.matches('{"a": [2, 1]}') is False

    def test_mutating_wrapped_value_does_not_change_comparisons(self) -> None:
        days = ["mon"]
        matcher = json_column(days)
        days.append("tue")

        assert matcher.canonical == '["mon"]'
        assert matcher.matches('["mon"]') is True
        assert matcher == '["mon"]'
        assert matcher != '["mon", "tue"]'
