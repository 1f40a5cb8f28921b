"""Line oriented reader for the sectioned configuration file."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ConfigFileError

_WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class SectionInfo:
    """Where a section header appeared in a configuration file."""

    name: str
    file: str
    line: int


@dataclass(frozen=True)
class ConfigOption:
    key: str
    value: str
    file: str
    line: int


def parse_config_lines(
    lines: Iterable[str], filepath: str
) -> tuple[list[ConfigOption], list[SectionInfo]]:
    """Parse configuration *lines* into options and section headers.

    Keys inside a ``[section]`` are returned prefixed as ``section.key``.  A
    line holding only ``key`` is returned with an empty value, which reads as
    ``True`` for boolean settings.

    Raises :class:`ConfigFileError` for keys written with a leading ``-``.
    """
    options: list[ConfigOption] = []
    sections: list[SectionInfo] = []
    prefix = ""
    for linenr, raw in enumerate(lines, start=1):
        text = raw.split("#", 1)[0].strip(_WHITESPACE)
        if not text:
            continue
        if text.startswith("[") and text.endswith("]"):
            section = text[1:-1]
            sections.append(SectionInfo(section, filepath, linenr))
            prefix = f"{section}."
            continue
        if text.startswith("-"):
            raise ConfigFileError(
                f"parse error on line {linenr}: {text}, options in configuration "
                "file must be specified without leading -"
            )
        key, eq, value = text.partition("=")
        name = prefix + key.strip(_WHITESPACE)
        value = value.strip(_WHITESPACE) if eq else ""
        options.append(ConfigOption(name, value, filepath, linenr))
        pos = name.rfind(".")
        if pos != -1 and len(prefix) <= pos:
            sections.append(SectionInfo(name[:pos], filepath, linenr))
    return options, sections


__all__ = ["ConfigOption", "SectionInfo", "parse_config_lines"]
