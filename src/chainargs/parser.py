"""Tokenising helpers shared by the command line and config file readers."""

from __future__ import annotations

import logging

from .errors import NegationForbiddenError
from .registry import ArgFlags
from .value import SettingsValue, interpret_bool

logger = logging.getLogger(__name__)


def parse_key_value(token: str) -> tuple[str, str] | None:
    """Split ``-key=value`` into ``("-key", "value")``.

    ``--key`` is normalised to ``-key``.  ``None`` is returned when the token
    does not start with a ``-`` marker.
    """
    key, _, value = token.partition("=")
    if not key.startswith("-"):
        return None
    if key.startswith("--"):
        key = key[1:]
    return key, value


def split_section(key: str) -> tuple[str, str]:
    """Split ``"testnet.foo"`` into ``("testnet", "foo")``."""
    section, dot, name = key.partition(".")
    if not dot:
        return "", key
    return section, name


def interpret_option(key: str, value: str) -> tuple[str, str, SettingsValue]:
    """Resolve section prefix and ``no`` negation of *key*.

    Returns ``(section, name, value)``.  ``-nofoo`` becomes ``False``;
    the double negative ``-nofoo=0`` becomes ``True`` and is logged.  For
    keys without the ``no`` prefix *value* is returned untouched.
    """
    section, name = split_section(key)
    if name.startswith("no"):
        name = name[2:]
        if not interpret_bool(value):
            logger.warning(
                "Warning: parsed potentially confusing double-negative -%s=%s",
                name,
                value,
            )
            return section, name, True
        return section, name, False
    return section, name, value


def check_valid(name: str, value: SettingsValue, flags: ArgFlags) -> None:
    """Raise :class:`NegationForbiddenError` for booleans on non-bool settings."""
    if isinstance(value, bool) and not flags & ArgFlags.ALLOW_BOOL:
        raise NegationForbiddenError(
            f"Negating of -{name} is meaningless and therefore forbidden"
        )


__all__ = ["check_valid", "interpret_option", "parse_key_value", "split_section"]
