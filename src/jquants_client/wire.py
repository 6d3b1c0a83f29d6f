"""
Normalisers for J-Quants wire values

The API abbreviates keys, sends some numbers as strings, sends small
codes as numeric strings and uses the empty string as a "no value"
sentinel where a number is expected. These helpers turn raw JSON values
into Python values and raise DecodeError for anything unexpected.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .errors import DecodeError


# ASCII digits only; str.isdigit() also accepts characters such as '²'
CODE_PATTERN = re.compile(r'-?[0-9]+')


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def to_decimal(value: Any) -> Decimal:
    """Parse a finite number or numeric string; NaN and infinities are rejected"""
    if _is_number(value) or isinstance(value, str):
        try:
            number = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation:
            pass
        else:
            if number.is_finite():
                return number
    raise DecodeError(f"Expected a number, got {value!r}")


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    """None and the empty-string sentinel both mean no value"""
    if value is None or value == "":
        return None
    return to_decimal(value)


def to_int(value: Any) -> int:
    """Truncate numbers, parse numeric strings"""
    if _is_number(value) or isinstance(value, str):
        try:
            return int(to_decimal(value))
        except DecodeError:
            pass
    raise DecodeError(f"Expected an integer, got {value!r}")


def to_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return to_int(value)


def to_code_int(value: Any) -> int:
    """Parse a code the API sends as a numeric string, e.g. '05'"""
    if isinstance(value, str) and CODE_PATTERN.fullmatch(value):
        return int(value)
    raise DecodeError(f"Expected a numeric code string, got {value!r}")


def to_optional_code_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return to_code_int(value)


def to_limit_flag(value: Any) -> bool:
    """Daily price limit flags are "0" or "1"."""
    if value == "0":
        return False
    if value == "1":
        return True
    raise DecodeError(f"Unknown limit flag: {value!r}")


def to_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DecodeError(f"Expected a string, got {value!r}")
    return value


def price_or_none(value: Any) -> Optional[int]:
    """
    Decode a price that is a number when traded and a string otherwise

    Args:
        value: Raw JSON value

    Returns:
        The price truncated to an integer, or None for the string sentinel

    Raises:
        DecodeError: If the value is neither a finite number nor a string
    """
    if _is_number(value):
        return to_int(value)
    if isinstance(value, str):
        return None
    raise DecodeError(f"Unknown price type {type(value).__name__}")


def decimal_or_none(value: Any) -> Optional[Decimal]:
    """Like price_or_none but keeps the exact decimal value"""
    if _is_number(value):
        return to_decimal(value)
    if isinstance(value, str):
        return None
    raise DecodeError(f"Unknown number type {type(value).__name__}")


def require(raw: Any, key: str) -> Any:
    """Fetch a mandatory key from a record"""
    if not isinstance(raw, dict):
        raise DecodeError(f"Expected a JSON object, got {type(raw).__name__}")
    try:
        return raw[key]
    except KeyError:
        raise DecodeError(f"Missing field '{key}'")
