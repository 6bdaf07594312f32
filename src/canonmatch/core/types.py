# src/canonmatch/core/types.py
"""SQLAlchemy column type for JSON-bearing text columns.

JsonText plays the part of an application's "array cast" attribute: the
application hands it a list or dict, it is written to a Text column as
JSON, and read back decoded. The stored formatting is whatever the writer
chose (indentation, insertion-ordered keys), which is exactly why tests
compare these columns canonically instead of as raw strings.
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator


class JsonText(TypeDecorator[Any]):
    """Store a structured value as JSON text.

    Args:
        indent: Passed to json.dumps; None writes compact single-line JSON
        sort_keys: Passed to json.dumps
    """

    impl = Text
    cache_ok = True

    def __init__(self, *args: Any, indent: int | None = None, sort_keys: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.indent = indent
        self.sort_keys = sort_keys

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return json.dumps(value, indent=self.indent, sort_keys=self.sort_keys, allow_nan=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        return json.loads(value)
