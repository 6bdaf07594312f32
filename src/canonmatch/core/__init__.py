"""Core canonicalization, configuration and logging."""

from canonmatch.core.canonical import canonicalize, canonicalize_decoded, canonicalize_stored, decode_stored_json, matches
from canonmatch.core.config import CanonMatchSettings, get_settings, load_settings, use_settings
from canonmatch.core.matcher import CanonicalJsonMatcher, json_column

__all__ = [
    "CanonMatchSettings",
    "CanonicalJsonMatcher",
    "canonicalize",
    "canonicalize_decoded",
    "canonicalize_stored",
    "decode_stored_json",
    "get_settings",
    "json_column",
    "load_settings",
    "matches",
    "use_settings",
]
