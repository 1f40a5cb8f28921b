from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from ..value import SettingsValue


class BaseBackend(ABC):
    """Abstract read/write settings file backend."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def load(self, path: Path) -> dict[str, SettingsValue]:
        """Return the settings stored at *path*.

        Raise :class:`~chainargs.errors.SettingsReadError` listing every
        problem found.
        """

    @abstractmethod
    def save(
        self,
        path: Path,
        data: Mapping[str, SettingsValue],
        *,
        tmp_path: Path | None = None,
    ) -> None:
        """Write *data* to *path* via *tmp_path*, raising ``SettingsWriteError`` on failure."""
