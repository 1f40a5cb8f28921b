from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from ..errors import SettingsReadError, SettingsWriteError
from ..value import SettingsValue
from . import register_backend
from .base import BaseBackend


class _Pairs(list):
    """Key/value pairs of one JSON object, duplicates included."""


def _is_primitive(value: object) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


@register_backend
class JsonBackend(BaseBackend):
    """JSON settings file backend.

    The file holds one object mapping setting names to booleans, numbers,
    strings or lists of those.
    """

    suffixes = (".json",)

    def load(self, path: Path) -> dict[str, SettingsValue]:
        path = Path(path)
        if not path.exists():
            return {}
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsReadError(
                [f"Failed reading settings file {path}: {exc}. Please check permissions."]
            ) from exc
        if raw.strip() == "":
            return {}
        try:
            data = json.loads(raw, object_pairs_hook=_Pairs)
        except json.JSONDecodeError as exc:
            raise SettingsReadError([f"Unable to parse settings file {path}: {exc}"]) from exc
        if not isinstance(data, _Pairs):
            raise SettingsReadError(
                [f"Found non-object value {raw.strip()} in settings file {path}"]
            )

        values: dict[str, SettingsValue] = {}
        errors: list[str] = []
        for key, value in data:
            if key in values:
                errors.append(f"Found duplicate key {key} in settings file {path}")
            elif isinstance(value, list) and not isinstance(value, _Pairs):
                if all(_is_primitive(v) for v in value):
                    values[key] = list(value)
                else:
                    errors.append(f"Found nested value for key {key} in settings file {path}")
            elif _is_primitive(value):
                values[key] = value
            else:
                errors.append(f"Found nested value for key {key} in settings file {path}")
        if errors:
            raise SettingsReadError(errors)
        return values

    def save(
        self,
        path: Path,
        data: Mapping[str, SettingsValue],
        *,
        tmp_path: Path | None = None,
    ) -> None:
        """Write *data* to *tmp_path*, then rename it over *path*.

        *path* is left untouched when either step fails.
        """
        path = Path(path)
        tmp = Path(tmp_path) if tmp_path is not None else path.with_name(path.name + ".tmp")
        try:
            tmp.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as fh:
                json.dump(dict(data), fh, indent=4, sort_keys=True, ensure_ascii=False)
                fh.write("\n")
        except OSError as exc:
            raise SettingsWriteError(
                [f"Error: Unable to open settings file {tmp} for writing: {exc}"]
            ) from exc
        try:
            tmp.replace(path)
        except OSError as exc:
            raise SettingsWriteError(
                [f"Failed renaming settings file {tmp} to {path}: {exc}"]
            ) from exc
