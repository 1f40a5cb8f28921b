from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Iterable, Iterator

from .errors import ProgrammingError


class ArgFlags(IntFlag):
    NONE = 0
    ALLOW_BOOL = 0x01
    ALLOW_INT = 0x02
    ALLOW_STRING = 0x04
    ALLOW_ANY = ALLOW_BOOL | ALLOW_INT | ALLOW_STRING
    DEBUG_ONLY = 0x100
    # Must not be set only in the default section of the config file while a
    # non-main network is active.
    NETWORK_ONLY = 0x200
    # Value is redacted when logged.
    SENSITIVE = 0x400


class OptionsCategory(IntEnum):
    OPTIONS = 0
    CONNECTION = 1
    WALLET = 2
    WALLET_DEBUG_TEST = 3
    ZMQ = 4
    DEBUG_TEST = 5
    CHAINPARAMS = 6
    NODE_RELAY = 7
    BLOCK_CREATION = 8
    RPC = 9
    GUI = 10
    COMMANDS = 11
    REGISTER_COMMANDS = 12
    AVALANCHE = 13
    CHRONIK = 14
    HIDDEN = 15


@dataclass(frozen=True)
class Arg:
    help_param: str
    help_text: str
    flags: ArgFlags


def setting_name(arg: str) -> str:
    """Return *arg* without its leading ``-`` marker."""
    return arg[1:] if arg.startswith("-") else arg


class ArgRegistry:
    """Registered arguments grouped by :class:`OptionsCategory`.

    Registration happens once at start-up; afterwards the registry is only
    read.  The registry does no locking of its own, the owning
    :class:`~chainargs.manager.ArgsManager` serialises access.
    """

    def __init__(self) -> None:
        self._by_category: dict[OptionsCategory, dict[str, Arg]] = {}
        self._network_only: set[str] = set()

    def add(
        self,
        name: str,
        help_text: str,
        flags: ArgFlags | int,
        category: OptionsCategory,
    ) -> None:
        arg_name, eq, hint = name.partition("=")
        bare = setting_name(arg_name)
        help_param = f"{eq}{hint}"
        flags = ArgFlags(flags)
        arg_map = self._by_category.setdefault(category, {})
        if bare in arg_map:
            raise ProgrammingError(
                f"argument -{bare} registered twice in category {category.name}"
            )
        arg_map[bare] = Arg(help_param, help_text, flags)
        if flags & ArgFlags.NETWORK_ONLY:
            self._network_only.add(bare)

    def add_hidden(self, names: Iterable[str]) -> None:
        for name in names:
            self.add(name, "", ArgFlags.ALLOW_ANY, OptionsCategory.HIDDEN)

    def flags_of(self, name: str) -> ArgFlags | None:
        bare = setting_name(name)
        for category in sorted(self._by_category):
            arg = self._by_category[category].get(bare)
            if arg is not None:
                return arg.flags
        return None

    def is_network_only(self, name: str) -> bool:
        return setting_name(name) in self._network_only

    @property
    def network_only(self) -> frozenset[str]:
        return frozenset(self._network_only)

    def items(self) -> Iterator[tuple[OptionsCategory, str, Arg]]:
        """Yield ``(category, name, arg)`` sorted by category then name."""
        for category in sorted(self._by_category):
            arg_map = self._by_category[category]
            for name in sorted(arg_map):
                yield category, name, arg_map[name]

    def clear(self) -> None:
        self._by_category.clear()
        self._network_only.clear()


__all__ = ["Arg", "ArgFlags", "ArgRegistry", "OptionsCategory", "setting_name"]
