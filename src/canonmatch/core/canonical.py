# src/canonmatch/core/canonical.py
"""
Canonical JSON serialization for logical equality checks.

Two-phase approach:
1. Normalize: Convert Python/pandas/numpy values to JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Two values that are logically equal always produce byte-identical
canonical text: mapping keys are sorted, whitespace is dropped and numbers
use ECMAScript formatting (so 1 and 1.0 serialize identically). Sequence
order is preserved.

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd
import rfc8785
from pydantic import BaseModel

from canonmatch.contracts.errors import MalformedJsonError, UnsupportedValueKindError
from canonmatch.core.config import get_settings

# I-JSON (RFC 7493) safe integer range; RFC 8785 serializes anything wider as a double
MAX_SAFE_INT = 2**53 - 1
MIN_SAFE_INT = -(2**53 - 1)


def _child_path(path: str, token: str | int) -> str:
    """Extend a JSON pointer (RFC 6901) with one reference token."""
    escaped = str(token).replace("~", "~0").replace("/", "~1")
    return f"{path}/{escaped}"


def _normalize_key(key: Any, path: str) -> str:
    """Convert a mapping key to its JSON string form.

    Strings pass through, integers use their decimal form. Booleans are
    rejected even though they are ints: json.dumps would write "true",
    which nobody means.
    """
    if isinstance(key, str):
        return key
    if isinstance(key, int | np.integer) and not isinstance(key, bool | np.bool_):
        return str(int(key))
    raise UnsupportedValueKindError(
        f"Cannot canonicalize mapping key {key!r} of type {type(key).__name__}; keys must be str or int",
        value_type=type(key).__name__,
        path=path,
    )


def _normalize_int(value: int, path: str) -> int | float:
    """Keep integers inside the I-JSON safe range; larger ones become doubles.

    JSON numbers are IEEE-754 doubles, so 2**60 and 2.0**60 are the same number.
    """
    if MIN_SAFE_INT <= value <= MAX_SAFE_INT:
        return value
    try:
        return float(value)
    except OverflowError as e:
        raise UnsupportedValueKindError(
            f"Cannot canonicalize integer {value}: too large for a JSON number",
            value_type=type(value).__name__,
            path=path,
        ) from e


def _normalize_value(obj: Any, path: str = "") -> Any:
    """Convert a single scalar value to a JSON-safe primitive.

    NaN Policy: STRICT REJECTION
    - NaN and Infinity are invalid for float AND Decimal
    - Use None/pd.NA/NaT for intentional missing values

    Args:
        obj: Any Python scalar
        path: Location of the value, for error messages

    Returns:
        JSON-serializable primitive

    Raises:
        UnsupportedValueKindError: If the value has no JSON representation
    """
    # Check for NaN/Infinity FIRST (before type coercion)
    if isinstance(obj, float | np.floating):
        if math.isnan(obj) or math.isinf(obj):
            raise UnsupportedValueKindError(
                f"Cannot canonicalize non-finite float: {obj}. Use None for missing values, not NaN.",
                value_type=type(obj).__name__,
                path=path,
            )
        return float(obj)

    # Primitives pass through unchanged
    if obj is None or isinstance(obj, str | bool):
        return obj
    if isinstance(obj, int):
        return _normalize_int(obj, path)

    # NumPy scalar types
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return _normalize_int(int(obj), path)

    # Intentional missing values (NOT NaN - that's rejected above).
    # NaT is a datetime subclass, so this must run before the datetime branches.
    if obj is pd.NA or obj is pd.NaT:
        return None

    if isinstance(obj, pd.Timestamp):
        # Naive timestamps assumed UTC (explicit policy)
        if obj.tz is None:
            return obj.tz_localize("UTC").isoformat()
        return obj.tz_convert("UTC").isoformat()

    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=UTC)
        return obj.astimezone(UTC).isoformat()

    if isinstance(obj, date):
        return obj.isoformat()

    if isinstance(obj, Decimal):
        if not obj.is_finite():  # Rejects NaN, sNaN, Infinity, -Infinity
            raise UnsupportedValueKindError(
                f"Cannot canonicalize non-finite Decimal: {obj}. Use None for missing values, not NaN/Infinity.",
                value_type="Decimal",
                path=path,
            )
        # Same numeric rule as float: 1, 1.0 and Decimal("1.00") are one number
        if obj == obj.to_integral_value():
            return _normalize_int(int(obj), path)
        return float(obj)

    if isinstance(obj, set | frozenset):
        raise UnsupportedValueKindError(
            "Cannot canonicalize a set: sets have no defined element order. Use a sorted list.",
            value_type=type(obj).__name__,
            path=path,
        )

    raise UnsupportedValueKindError(
        f"Cannot canonicalize value of type {type(obj).__name__}",
        value_type=type(obj).__name__,
        path=path,
    )


def _normalize_for_canonical(data: Any, path: str = "", _active: set[int] | None = None) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Args:
        data: Any data structure (mapping, sequence, scalar)
        path: Location of ``data`` within the root value
        _active: ids of containers on the current recursion path

    Returns:
        Normalized structure built from dict, list and JSON primitives

    Raises:
        UnsupportedValueKindError: On cycles, bad keys or non-JSON values
    """
    if isinstance(data, BaseModel):
        return _normalize_for_canonical(data.model_dump(mode="json"), path, _active)

    if isinstance(data, np.ndarray):
        # Multi-dimensional arrays need element-wise NaN/Infinity validation
        if data.size > 0:
            try:
                if np.any(np.isnan(data)) or np.any(np.isinf(data)):
                    raise UnsupportedValueKindError(
                        "NaN/Infinity found in NumPy array. Use None for missing values, not NaN.",
                        value_type="ndarray",
                        path=path,
                    )
            except TypeError:
                # np.isnan/isinf raise TypeError for non-numeric dtypes (e.g., strings)
                pass
        return _normalize_for_canonical(data.tolist(), path, _active)

    if not isinstance(data, Mapping | list | tuple):
        return _normalize_value(data, path)

    active = _active if _active is not None else set()
    marker = id(data)
    if marker in active:
        raise UnsupportedValueKindError(
            "Cannot canonicalize cyclic structure",
            value_type=type(data).__name__,
            path=path,
        )
    active.add(marker)
    try:
        if isinstance(data, Mapping):
            result: dict[str, Any] = {}
            for key, value in data.items():
                json_key = _normalize_key(key, path)
                if json_key in result:
                    raise UnsupportedValueKindError(
                        f"Mapping keys collide after conversion to JSON: {json_key!r}",
                        value_type=type(key).__name__,
                        path=path,
                    )
                result[json_key] = _normalize_for_canonical(value, _child_path(path, json_key), active)
            return result
        return [_normalize_for_canonical(v, _child_path(path, i), active) for i, v in enumerate(data)]
    finally:
        active.discard(marker)


def canonicalize(value: Any) -> str:
    """Produce the canonical JSON form of a structured value.

    Args:
        value: Mapping/sequence/scalar composition

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        UnsupportedValueKindError: If the value is not representable as JSON
    """
    normalized = _normalize_for_canonical(value)
    try:
        result: bytes = rfc8785.dumps(normalized)
    except rfc8785.CanonicalizationError as e:
        # rfc8785 rejects anything normalization let through
        raise UnsupportedValueKindError(
            f"Cannot canonicalize value: {e}",
            value_type=type(value).__name__,
        ) from e
    return result.decode("utf-8")


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _reject_nonfinite_constant(name: str) -> Any:
    raise ValueError(f"non-standard constant {name}")


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key {key!r}")
        result[key] = value
    return result


def decode_stored_json(text: str | bytes, *, max_raw_text_length: int | None = None) -> Any:
    """Decode JSON text read back from storage.

    Stricter than json.loads: NaN/Infinity literals and duplicate keys
    within one object are rejected, since either makes the stored value
    ambiguous.

    Args:
        text: Stored JSON text (bytes are decoded as UTF-8)
        max_raw_text_length: Truncation for the raw text carried on errors;
            defaults to the active settings

    Returns:
        Decoded structured value

    Raises:
        MalformedJsonError: If the text is not valid RFC 8259 JSON
    """
    limit = max_raw_text_length if max_raw_text_length is not None else get_settings().max_raw_text_length

    if isinstance(text, bytes | bytearray | memoryview):
        raw = bytes(text)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedJsonError(f"invalid UTF-8: {e.reason}", raw_text=_truncate(repr(raw), limit)) from e

    if not isinstance(text, str):
        raise MalformedJsonError(
            f"expected JSON text, got {type(text).__name__}",
            raw_text=_truncate(repr(text), limit),
        )

    try:
        return json.loads(
            text,
            parse_constant=_reject_nonfinite_constant,
            object_pairs_hook=_reject_duplicate_keys,
        )
    except ValueError as e:
        # json.JSONDecodeError is a ValueError, as are the hook rejections above
        raise MalformedJsonError(str(e), raw_text=_truncate(text, limit)) from e


def canonicalize_stored(text: str | bytes, *, max_raw_text_length: int | None = None) -> str:
    """Decode stored JSON text and return its canonical form.

    Args:
        text: Stored JSON text
        max_raw_text_length: Truncation for the raw text carried on errors;
            defaults to the active settings

    Raises:
        MalformedJsonError: If the text does not decode, or decodes to a
            value with no canonical form (e.g. 1e400, which decodes to infinity)
    """
    limit = max_raw_text_length if max_raw_text_length is not None else get_settings().max_raw_text_length
    decoded = decode_stored_json(text, max_raw_text_length=limit)
    try:
        return canonicalize(decoded)
    except UnsupportedValueKindError as e:
        raw = text if isinstance(text, str) else repr(text)
        raise MalformedJsonError(
            f"decoded value has no canonical form: {e}",
            raw_text=_truncate(raw, limit),
        ) from e


def canonicalize_decoded(value: Any, *, max_raw_text_length: int | None = None) -> str:
    """Canonicalize a JSON value a database driver has already decoded.

    Native JSON column types (PostgreSQL json/jsonb, for one) can hand back
    dicts and lists instead of text. Such a value is held to the same rule
    as stored text: if it has no canonical form, the stored value is bad.

    Raises:
        MalformedJsonError: If the value has no canonical form
    """
    limit = max_raw_text_length if max_raw_text_length is not None else get_settings().max_raw_text_length
    try:
        return canonicalize(value)
    except UnsupportedValueKindError as e:
        raise MalformedJsonError(
            f"decoded value has no canonical form: {e}",
            raw_text=_truncate(repr(value), limit),
        ) from e


def matches(expected: Any, actual_stored_text: str | bytes) -> bool:
    """Check stored JSON text against an expected structured value.

    Args:
        expected: Expected structured value
        actual_stored_text: JSON text as held by the database

    Returns:
        True iff the canonical forms are identical

    Raises:
        MalformedJsonError: If the stored text cannot be decoded
        UnsupportedValueKindError: If ``expected`` is not representable as JSON
    """
    actual = canonicalize_stored(actual_stored_text)
    return canonicalize(expected) == actual
