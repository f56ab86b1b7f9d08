"""Lookup key derivation.

Pure functions mapping case names and group type names to catalog keys, plus
the default message text built from a key.
"""

import re
from collections.abc import Mapping

from errorkit.config import DEFAULT_PATTERN

_UPPER = re.compile(r"(?<!^)[A-Z]")


def case_key(name: str) -> str:
    """``"AppMissingHeaders"`` -> ``"app_missing_headers"``."""
    key = _UPPER.sub(lambda m: "_" + m.group(0), name).lower()
    return key.replace("__", "_")


def group_key(type_name: str, suffix: str = "RespCode") -> str:
    """``"MainRespCode"`` -> ``"main"``. Idempotent."""
    if suffix and type_name.lower().endswith(suffix.lower()):
        type_name = type_name[: -len(suffix)]
    return case_key(type_name)


def humanize(key: str) -> str:
    """``"user_not_found"`` -> ``"User not found"``."""
    readable = key.replace("_", " ")
    return readable[:1].upper() + readable[1:]


def default_message(
    key: str,
    locale: str = "en",
    patterns: Mapping[str, str] | None = None,
    fallback_locale: str = "en",
) -> str:
    """Default text for a key: the locale's pattern, else the fallback locale's, else the built-in one."""
    patterns = patterns or {}
    pattern = patterns.get(locale) or patterns.get(fallback_locale) or DEFAULT_PATTERN
    return pattern.replace(":readable", humanize(key))
