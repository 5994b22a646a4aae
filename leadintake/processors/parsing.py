"""
Value helpers shared by the webhook processors.

Third-party payloads arrive as loosely typed JSON: numbers as strings,
blank strings instead of nulls, field names in any casing. These helpers
keep the per-provider modules focused on their field tables.
"""
import math
import re
from typing import Any, Dict, Optional

_LEADING_NUMBER = re.compile(r'^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)')
_NON_ALNUM = re.compile(r'[^a-z0-9]')
_WHITESPACE = re.compile(r'\s+')


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty or whitespace only."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def parse_float(value: Any) -> Optional[float]:
    """
    Lenient float parse: reads the leading number of a string.

    "12000" -> 12000.0, "1500 USD" -> 1500.0, "abc" -> None.
    Booleans and non-finite results are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return None
        number = float(match.group(1))
    if not math.isfinite(number):
        return None
    return number


def parse_amount(value: Any) -> Optional[float]:
    """parse_float() restricted to non-negative results."""
    number = parse_float(value)
    if number is None or number < 0:
        return None
    return number


def normalize_key(key: Any, replacement: str = '') -> str:
    """Lowercase a field name and replace every non-alphanumeric char."""
    return _NON_ALNUM.sub(replacement, str(key).lower())


def slugify(text: Any) -> str:
    """'Spring Promo' -> 'spring-promo'."""
    return _WHITESPACE.sub('-', str(text).strip().lower())


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(' ', text).strip()


def get_first(payload: Dict[str, Any], *keys: str) -> Any:
    """Return the first non-blank value among keys."""
    for key in keys:
        value = payload.get(key)
        if is_blank(value):
            continue
        return value
    return None


def join_name(*parts: Any) -> str:
    """Join the non-blank name parts with a single space."""
    return ' '.join(str(p).strip() for p in parts if not is_blank(p))
