# src/canonmatch/contracts/errors.py
"""Exceptions raised by canonical JSON comparison.

All errors share CanonicalJsonError so callers can catch the package's
failures in one place. The two comparison failures also subclass
AssertionError so the host test runner reports them as ordinary assertion
failures rather than errors.
"""


class CanonicalJsonError(Exception):
    """Base class for canonmatch errors."""


class UnsupportedValueKindError(CanonicalJsonError, ValueError):
    """Raised when a value cannot be represented as JSON.

    Examples: NaN/Infinity, cyclic containers, set values, non-string keys.
    This is a test-construction error and is raised synchronously.

    Attributes:
        value_type: Name of the offending Python type
        path: JSON-pointer-like location of the value ("" for the root)
    """

    def __init__(self, message: str, *, value_type: str, path: str = "") -> None:
        self.value_type = value_type
        self.path = path
        location = f" at {path!r}" if path else ""
        super().__init__(f"{message}{location}")


class MalformedJsonError(CanonicalJsonError, AssertionError):
    """Raised when stored JSON text cannot be decoded.

    A malformed stored value points at data corruption or a broken test
    setup, so it is surfaced rather than treated as a plain mismatch.

    Attributes:
        raw_text: The stored text, truncated for display
        reason: Decoder error description
    """

    def __init__(self, reason: str, *, raw_text: str) -> None:
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"Stored value is not valid JSON ({reason}): {raw_text!r}")


class ComparisonMismatchError(CanonicalJsonError, AssertionError):
    """Raised when canonical forms differ.

    Attributes:
        expected: Canonical form of the expected value
        actual: Canonical forms observed (empty when nothing was found)
    """

    def __init__(self, message: str, *, expected: str, actual: list[str] | None = None) -> None:
        self.expected = expected
        self.actual = actual if actual is not None else []
        super().__init__(message)
