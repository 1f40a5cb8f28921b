"""Settings store and the precedence walk over it.

The store keeps one container per source.  Lookups visit the sources in
:data:`PRECEDENCE` order, highest first, and stop at the first source that
decides the value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

from .value import SettingsValue


class Source(Enum):
    FORCED = "forced"
    COMMAND_LINE = "command-line"
    CONFIG_FILE_NETWORK_SECTION = "config-network"
    CONFIG_FILE_DEFAULT_SECTION = "config-default"
    RW_SETTINGS = "rw-settings"


PRECEDENCE: tuple[Source, ...] = (
    Source.FORCED,
    Source.COMMAND_LINE,
    Source.CONFIG_FILE_NETWORK_SECTION,
    Source.CONFIG_FILE_DEFAULT_SECTION,
    Source.RW_SETTINGS,
)

_CONFIG_SOURCES = (Source.CONFIG_FILE_NETWORK_SECTION, Source.CONFIG_FILE_DEFAULT_SECTION)
_NONPERSISTENT_SOURCES = (Source.FORCED, Source.COMMAND_LINE)


@dataclass
class Settings:
    forced: dict[str, SettingsValue] = field(default_factory=dict)
    command_line: dict[str, list[SettingsValue]] = field(default_factory=dict)
    rw_settings: dict[str, SettingsValue] = field(default_factory=dict)
    ro_config: dict[str, dict[str, list[SettingsValue]]] = field(default_factory=dict)


class Span:
    """View over the values one source holds for a setting.

    A ``False`` entry is a negation; it discards everything before it.
    """

    def __init__(self, values: list[SettingsValue]):
        self.values = values

    @classmethod
    def of(cls, value: SettingsValue) -> "Span":
        """Wrap one stored value; a stored list stays a single element."""
        return cls([value])

    def negated(self) -> int:
        """Return the number of leading values cancelled by the last negation."""
        for i in range(len(self.values), 0, -1):
            if self.values[i - 1] is False:
                return i
        return 0

    def __iter__(self) -> Iterator[SettingsValue]:
        return iter(self.values[self.negated():])

    def last_negated(self) -> bool:
        return bool(self.values) and self.values[-1] is False

    def empty(self) -> bool:
        return not self.values or self.last_negated()

    def first(self) -> SettingsValue:
        return self.values[self.negated()]

    def last(self) -> SettingsValue:
        return self.values[-1]


def merge_settings(
    settings: Settings,
    section: str,
    name: str,
    visit: Callable[[Span, Source], None],
) -> None:
    """Call *visit* for each source holding *name*, in precedence order."""
    for source in PRECEDENCE:
        if source is Source.FORCED:
            if name in settings.forced:
                visit(Span.of(settings.forced[name]), source)
        elif source is Source.COMMAND_LINE:
            if name in settings.command_line:
                visit(Span(settings.command_line[name]), source)
        elif source is Source.CONFIG_FILE_NETWORK_SECTION:
            if section:
                values = settings.ro_config.get(section, {}).get(name)
                if values is not None:
                    visit(Span(values), source)
        elif source is Source.CONFIG_FILE_DEFAULT_SECTION:
            values = settings.ro_config.get("", {}).get(name)
            if values is not None:
                visit(Span(values), source)
        elif source is Source.RW_SETTINGS:
            if name in settings.rw_settings:
                visit(Span.of(settings.rw_settings[name]), source)


def get_setting(
    settings: Settings,
    section: str,
    name: str,
    *,
    ignore_default_section_config: bool = False,
    ignore_nonpersistent: bool = False,
    ignore_persistent: bool = False,
    get_chain_name: bool = False,
) -> SettingsValue:
    """Return the effective single value of *name*.

    ``ignore_default_section_config`` hides the default config section except
    for negations in it.  ``ignore_nonpersistent`` skips forced and command
    line values; ``ignore_persistent`` skips the read/write settings.  With
    ``get_chain_name`` negated command line entries are skipped and config
    values use the last occurrence instead of the first.
    """
    result: SettingsValue = None
    done = False

    def visit(span: Span, source: Source) -> None:
        nonlocal result, done
        if done:
            return
        never_ignore_negated_setting = span.last_negated()
        reverse_precedence = source in _CONFIG_SOURCES and not get_chain_name
        if (
            ignore_default_section_config
            and source is Source.CONFIG_FILE_DEFAULT_SECTION
            and not never_ignore_negated_setting
        ):
            return
        if ignore_nonpersistent and source in _NONPERSISTENT_SOURCES:
            return
        if ignore_persistent and source is Source.RW_SETTINGS:
            return
        if get_chain_name and source is Source.COMMAND_LINE and span.last_negated():
            return
        if not span.empty():
            result = span.first() if reverse_precedence else span.last()
            done = True
        elif span.last_negated():
            result = False
            done = True

    merge_settings(settings, section, name, visit)
    return result


def get_settings_list(
    settings: Settings,
    section: str,
    name: str,
    *,
    ignore_default_section_config: bool = False,
) -> list[SettingsValue]:
    """Return every effective value of a multi-valued setting.

    A forced value ends the list.  A negation on the command line ends it
    too, unless it is followed by a later non-negated value, in which case
    config file values are still appended after the command line ones.
    """
    result: list[SettingsValue] = []
    result_complete = False
    prev_negated_empty = False
    forced = False

    def visit(span: Span, source: Source) -> None:
        nonlocal result_complete, prev_negated_empty, forced
        if forced:
            return
        forced = source is Source.FORCED
        add_zombie_config_values = source in _CONFIG_SOURCES and not prev_negated_empty
        if ignore_default_section_config and source is Source.CONFIG_FILE_DEFAULT_SECTION:
            return
        if not result_complete or add_zombie_config_values:
            for value in span:
                if isinstance(value, list):
                    result.extend(value)
                else:
                    result.append(value)
        result_complete = result_complete or span.negated() > 0 or source is Source.FORCED
        prev_negated_empty = prev_negated_empty or (span.last_negated() and not result)

    merge_settings(settings, section, name, visit)
    return result


def only_has_default_section_setting(settings: Settings, section: str, name: str) -> bool:
    """Return True if *name* is set in the default config section and nowhere else."""
    has_default_section_setting = False
    has_other_setting = False

    def visit(span: Span, source: Source) -> None:
        nonlocal has_default_section_setting, has_other_setting
        if span.empty():
            return
        if source is Source.CONFIG_FILE_DEFAULT_SECTION:
            has_default_section_setting = True
        else:
            has_other_setting = True

    merge_settings(settings, section, name, visit)
    return has_default_section_setting and not has_other_setting


__all__ = [
    "PRECEDENCE",
    "Settings",
    "Source",
    "Span",
    "get_setting",
    "get_settings_list",
    "merge_settings",
    "only_has_default_section_setting",
]
