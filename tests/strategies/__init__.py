# tests/strategies/__init__.py
"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import json_values, STANDARD_SETTINGS
"""

from tests.strategies.json import json_mappings, json_primitives, json_values
from tests.strategies.settings import DETERMINISM_SETTINGS, STANDARD_SETTINGS

__all__ = [
    "DETERMINISM_SETTINGS",
    "STANDARD_SETTINGS",
    "json_mappings",
    "json_primitives",
    "json_values",
]
