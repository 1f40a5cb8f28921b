"""Setting values and their typed coercions.

A setting value is one of ``None`` (unset), ``bool``, ``int``/``float``,
``str`` or a one-level ``list`` of those.  ``False`` doubles as the marker for
a negated option (``-nofoo``).
"""

from __future__ import annotations

import json
import re
from typing import Union

SettingsValue = Union[None, bool, int, float, str, list]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_LEADING_INT_RX = re.compile(r"-?\d+")


def is_number(value: SettingsValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def atoi64(text: str) -> int:
    """Parse the leading integer of *text* the way C ``atoi`` would.

    Surrounding whitespace is ignored, a single leading ``+`` is accepted,
    out-of-range values saturate at the signed 64-bit limits and anything that
    does not start with a number yields ``0``.
    """
    s = text.strip()
    if s.startswith("+"):
        if s[1:2] == "-":
            return 0
        s = s[1:]
    match = _LEADING_INT_RX.match(s)
    if match is None:
        return 0
    result = int(match.group(0))
    return max(INT64_MIN, min(INT64_MAX, result))


def interpret_bool(text: str) -> bool:
    """Interpret an option string as a boolean.

    An empty string means the option was given without a value and is
    ``True``.  Everything else goes through :func:`atoi64`, so ``"0"`` and
    also non-numeric text like ``"false"`` or ``"foo"`` are ``False``.
    """
    if text == "":
        return True
    return atoi64(text) != 0


def setting_to_string(value: SettingsValue, default: str | None = None) -> str | None:
    if value is None:
        return default
    if value is False:
        return "0"
    if value is True:
        return "1"
    if is_number(value):
        return str(value)
    if isinstance(value, str):
        return value
    raise TypeError(f"Cannot convert {type(value).__name__} setting to string")


def setting_to_int(value: SettingsValue, default: int | None = None) -> int | None:
    if value is None:
        return default
    if value is False:
        return 0
    if value is True:
        return 1
    if is_number(value):
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Setting value {value!r} is not an integer")
        result = int(value)
        if not INT64_MIN <= result <= INT64_MAX:
            raise ValueError(f"Setting value {value!r} is out of range")
        return result
    if isinstance(value, str):
        return atoi64(value)
    raise TypeError(f"Cannot convert {type(value).__name__} setting to int")


def setting_to_bool(value: SettingsValue, default: bool | None = None) -> bool | None:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return interpret_bool(value)
    raise TypeError(f"Cannot convert {type(value).__name__} setting to bool")


def write_value(value: SettingsValue) -> str:
    """Return the JSON text used when logging *value*."""
    return json.dumps(value)


__all__ = [
    "SettingsValue",
    "atoi64",
    "interpret_bool",
    "is_number",
    "setting_to_string",
    "setting_to_int",
    "setting_to_bool",
    "write_value",
]
