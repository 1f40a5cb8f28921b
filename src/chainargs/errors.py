from __future__ import annotations

from collections.abc import Iterable


class ArgsError(Exception):
    """Base class for chainargs errors."""


class InvalidParameterError(ArgsError):
    """Raised for an unknown or malformed command line token."""


class IncludeConfError(InvalidParameterError):
    """Raised after parsing when ``-includeconf`` was given on the command line."""

    def __init__(self, messages: Iterable[str]):
        self.messages = list(messages)
        super().__init__("\n".join(self.messages))


class NegationForbiddenError(ArgsError):
    """Raised when a boolean is supplied for a setting that does not allow one."""


class ConfigFileError(ArgsError):
    """Raised when a configuration file cannot be parsed."""


class _CollectedErrors(ArgsError):
    def __init__(self, errors: Iterable[str], summary: str | None = None):
        self.errors = list(errors)
        self.summary = summary
        if summary is None:
            message = "\n".join(self.errors)
        else:
            message = summary + ":\n- " + "\n- ".join(self.errors)
        super().__init__(message)


class SettingsReadError(_CollectedErrors):
    """Raised when the read/write settings file cannot be loaded."""


class SettingsWriteError(_CollectedErrors):
    """Raised when the read/write settings file cannot be saved."""


class ChainSelectionConflictError(ArgsError):
    """Raised when more than one network selector is active."""


class ProgrammingError(RuntimeError):
    """Raised on API misuse such as duplicate registration.

    Not an :class:`ArgsError`; ``except ArgsError`` does not catch it.
    """
